"""Common types used throughout the decision engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, Mapping, Optional, Tuple

import numpy as np

NO_LOGO_LABEL = "NoLogo"

ImageSample = np.ndarray
CentroidTable = Mapping[str, np.ndarray]


class InvalidInput(ValueError):
    """Raised when a probability vector, label set or config is malformed."""


class LabelSet:
    """Ordered, immutable class names; the index of a name is its class id."""

    __slots__ = ("_names", "_index", "_sentinel")

    def __init__(self, names: Iterable[str], sentinel: str = NO_LOGO_LABEL) -> None:
        cleaned = tuple(str(name) for name in names)
        index = {}
        for position, name in enumerate(cleaned):
            if not name:
                raise InvalidInput(f"Empty label at index {position}")
            if name in index:
                raise InvalidInput(f"Duplicate label: {name!r}")
            index[name] = position
        self._names: Tuple[str, ...] = cleaned
        self._index = index
        self._sentinel = sentinel

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def sentinel(self) -> str:
        return self._sentinel

    @property
    def no_logo_index(self) -> Optional[int]:
        return self._index.get(self._sentinel)

    def index_of(self, name: str) -> Optional[int]:
        return self._index.get(name)

    def __len__(self) -> int:
        return len(self._names)

    def __getitem__(self, position: int) -> str:
        return self._names[position]

    def __iter__(self):
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelSet):
            return NotImplemented
        return self._names == other._names and self._sentinel == other._sentinel

    def __hash__(self) -> int:
        return hash((self._names, self._sentinel))

    def __repr__(self) -> str:
        return f"LabelSet({list(self._names)!r}, sentinel={self._sentinel!r})"


@dataclass(frozen=True)
class PixelStats:
    """Coarse visual-sanity signals gathered from one image."""

    width: int
    height: int
    luma_variance: float
    edge_count: int
    edge_samples: int
    edge_density: float
    is_flat: bool


@dataclass(frozen=True)
class DistributionStats:
    """Summary of a classifier probability vector."""

    top1_index: int
    top1_prob: float
    top2_index: int
    top2_prob: float
    gap: float
    entropy: float
    mean: float
    stddev: float
    no_logo_prob: float
    boosted_no_logo_prob: float


class Verdict(str, Enum):
    """Outcome tags of the decision cascade."""

    ACCEPTED = "accepted"
    REJECTED_VISUAL_MISMATCH = "rejected_visual_mismatch"
    REJECTED_BOOSTED_NO_LOGO = "rejected_boosted_no_logo"
    REJECTED_LOW_CONFIDENCE = "rejected_low_confidence"


class RejectionReason(str, Enum):
    """Confidence-gate conditions, listed in evaluation order."""

    LOW_TOP1 = "low_top1"
    AMBIGUOUS_GAP = "ambiguous_gap"
    HIGH_ENTROPY = "high_entropy"
    DOMINANT_NO_LOGO = "dominant_no_logo"


@dataclass(frozen=True)
class ClassificationResult:
    """Base of every cascade outcome.

    ``stats`` and ``pixels`` are attached for diagnostics only and do not take
    part in equality, so ``Accepted("A", 0.9)`` compares equal to a result
    produced by the engine.
    """

    stats: Optional[DistributionStats] = field(default=None, compare=False, kw_only=True)
    pixels: Optional[PixelStats] = field(default=None, compare=False, kw_only=True)

    verdict: ClassVar[Optional[Verdict]] = None

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED


@dataclass(frozen=True)
class Accepted(ClassificationResult):
    label: str
    confidence: float

    verdict = Verdict.ACCEPTED


@dataclass(frozen=True)
class RejectedVisualMismatch(ClassificationResult):
    verdict = Verdict.REJECTED_VISUAL_MISMATCH


@dataclass(frozen=True)
class RejectedBoostedNoLogo(ClassificationResult):
    verdict = Verdict.REJECTED_BOOSTED_NO_LOGO


@dataclass(frozen=True)
class RejectedLowConfidence(ClassificationResult):
    reason: RejectionReason

    verdict = Verdict.REJECTED_LOW_CONFIDENCE


class VerificationStatus(str, Enum):
    """Outcome tags of the embedding verifier."""

    VERIFIED = "verified"
    REJECTED = "rejected"
    NO_CENTROIDS = "no_centroids"


@dataclass(frozen=True)
class VerificationResult:
    """Base of every verifier outcome."""

    status: ClassVar[Optional[VerificationStatus]] = None

    @property
    def verified(self) -> bool:
        return self.status is VerificationStatus.VERIFIED


@dataclass(frozen=True)
class Verified(VerificationResult):
    brand: str
    similarity: float

    status = VerificationStatus.VERIFIED


@dataclass(frozen=True)
class Rejected(VerificationResult):
    best_similarity: float

    status = VerificationStatus.REJECTED


@dataclass(frozen=True)
class NoCentroids(VerificationResult):
    status = VerificationStatus.NO_CENTROIDS
