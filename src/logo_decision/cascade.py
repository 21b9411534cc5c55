"""Accept/reject decision over classifier scores and pixel statistics."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import DecisionThresholds
from .features import extract_pixel_stats
from .image_utils import ImageInput
from .stats import Labels, as_label_set, compute_stats
from .types import (
    Accepted,
    ClassificationResult,
    DistributionStats,
    PixelStats,
    RejectedBoostedNoLogo,
    RejectedLowConfidence,
    RejectedVisualMismatch,
    RejectionReason,
)

logger = logging.getLogger(__name__)


class LogoDecisionEngine:
    """Runs the fixed rule cascade for one label set.

    The gates run in a fixed order and the first one that fires decides the
    outcome:

    1. visual mismatch (flat image or too few edges)
    2. boosted NoLogo probability
    3. confidence (top-1, gap, entropy, dominant NoLogo)

    Instances hold only read-only configuration and may be shared between
    threads.
    """

    def __init__(self, labels: Labels, thresholds: Optional[DecisionThresholds] = None) -> None:
        self.labels = as_label_set(labels)
        self.thresholds = thresholds or DecisionThresholds()

    def classify(self, probabilities: Sequence[float], image: ImageInput) -> ClassificationResult:
        """Return the verdict for ``probabilities`` scored on ``image``.

        Raises:
            InvalidInput: the probability vector does not fit the label set.
        """

        stats = compute_stats(probabilities, self.labels, no_logo_boost=self.thresholds.no_logo_boost)
        pixels = extract_pixel_stats(image, self.thresholds)
        self._log_distribution(probabilities, stats, pixels)

        if not self.looks_logo_like(pixels):
            logger.debug("Reject: visual cues do not match a printed logo")
            return RejectedVisualMismatch(stats=stats, pixels=pixels)

        if stats.boosted_no_logo_prob > self.thresholds.max_boosted_no_logo:
            logger.debug("Reject: boosted NoLogo triggers (%.4f)", stats.boosted_no_logo_prob)
            return RejectedBoostedNoLogo(stats=stats, pixels=pixels)

        reason = self.low_confidence_reason(stats)
        if reason is not None:
            logger.debug("Reject: low confidence (%s)", reason.value)
            return RejectedLowConfidence(reason, stats=stats, pixels=pixels)

        label = self.labels[stats.top1_index]
        logger.debug("Accept: %s (%.4f)", label, stats.top1_prob)
        return Accepted(label, stats.top1_prob, stats=stats, pixels=pixels)

    def looks_logo_like(self, pixels: PixelStats) -> bool:
        return not pixels.is_flat and pixels.edge_density > self.thresholds.min_edge_density

    def low_confidence_reason(self, stats: DistributionStats) -> Optional[RejectionReason]:
        """First failing confidence condition, or ``None`` when all pass."""

        t = self.thresholds
        if stats.top1_prob < t.min_top1:
            return RejectionReason.LOW_TOP1
        if stats.gap < t.min_gap:
            return RejectionReason.AMBIGUOUS_GAP
        if stats.entropy > t.max_entropy:
            return RejectionReason.HIGH_ENTROPY
        if stats.no_logo_prob > t.max_no_logo and stats.no_logo_prob > t.no_logo_top1_ratio * stats.top1_prob:
            return RejectionReason.DOMINANT_NO_LOGO
        return None

    def _log_distribution(
        self,
        probabilities: Sequence[float],
        stats: DistributionStats,
        pixels: PixelStats,
    ) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug(
            "top1=%s (%.4f) top2=%s (%.4f) gap=%.4f no_logo=%.4f entropy=%.4f stddev=%.4f",
            self.labels[stats.top1_index],
            stats.top1_prob,
            self.labels[stats.top2_index],
            stats.top2_prob,
            stats.gap,
            stats.no_logo_prob,
            stats.entropy,
            stats.stddev,
        )
        logger.debug(
            "distribution: %s",
            " ".join(f"{name}:{float(p):.3f}" for name, p in zip(self.labels, probabilities)),
        )
        logger.debug(
            "pixels: luma_variance=%.2f edge_density=%.4f (%d/%d)",
            pixels.luma_variance,
            pixels.edge_density,
            pixels.edge_count,
            pixels.edge_samples,
        )


def classify(
    probabilities: Sequence[float],
    labels: Labels,
    image: ImageInput,
    thresholds: Optional[DecisionThresholds] = None,
) -> ClassificationResult:
    """One-shot form of :meth:`LogoDecisionEngine.classify`."""

    return LogoDecisionEngine(labels, thresholds).classify(probabilities, image)
