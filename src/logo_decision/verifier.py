"""Brand verification by cosine similarity against known centroids."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from .config import DEFAULT_SIMILARITY_THRESHOLD, build_centroid_table
from .embedding import EmbeddingSource
from .image_utils import ImageInput
from .types import CentroidTable, NoCentroids, Rejected, VerificationResult, Verified

logger = logging.getLogger(__name__)

EPSILON = 1e-6


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity over the common prefix of ``a`` and ``b``.

    Trailing dimensions of the longer vector are ignored. Returns ``0.0`` when
    either vector is empty.
    """

    a_vec = np.asarray(a, dtype=np.float64).ravel()
    b_vec = np.asarray(b, dtype=np.float64).ravel()
    length = min(a_vec.size, b_vec.size)
    if length == 0:
        return 0.0
    a_vec = a_vec[:length]
    b_vec = b_vec[:length]
    denom = float(np.linalg.norm(a_vec) * np.linalg.norm(b_vec)) + EPSILON
    return float(np.dot(a_vec, b_vec) / denom)


def verify_against_centroids(
    embedding: Sequence[float],
    centroids: Mapping[str, Any],
    threshold: float,
) -> VerificationResult:
    """Match ``embedding`` to the closest brand centroid.

    Empty or missing centroids are skipped. The first brand seen keeps a tie.
    A similarity equal to ``threshold`` is accepted.
    """

    best_brand: Optional[str] = None
    best_similarity = 0.0
    for brand, centroid in centroids.items():
        if centroid is None or np.size(centroid) == 0:
            logger.warning("Centroid for %s is empty, skipping", brand)
            continue
        similarity = cosine_similarity(embedding, centroid)
        logger.debug("Cosine with %s: %.4f", brand, similarity)
        if best_brand is None or similarity > best_similarity:
            best_brand = brand
            best_similarity = similarity

    if best_brand is None:
        return NoCentroids()
    if best_similarity < threshold:
        return Rejected(best_similarity)
    return Verified(best_brand, best_similarity)


class EmbeddingVerifier:
    """Verifier bound to an immutable centroid table and a threshold."""

    def __init__(
        self,
        centroids: Mapping[str, Any],
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    ) -> None:
        self.centroids: CentroidTable = build_centroid_table(centroids)
        self.threshold = threshold

    def verify(self, embedding: Sequence[float]) -> VerificationResult:
        return verify_against_centroids(embedding, self.centroids, self.threshold)

    def verify_image(self, image: ImageInput, source: EmbeddingSource) -> VerificationResult:
        """Extract an embedding with ``source`` and verify it."""

        return self.verify(source.embed(image))
