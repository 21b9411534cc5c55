"""Interfaces to the external inference model.

Classification scores and embeddings are separate capabilities. The shipped
model exposes no penultimate-layer tap, so :class:`ClassifierOutputEmbedding`
reuses the score vector as a coarse embedding; a real embedding source can
replace it without touching the verifier.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .image_utils import ImageInput


class ScoreSource(ABC):
    """Produces a per-class probability vector for an image."""

    @abstractmethod
    def scores(self, image: ImageInput) -> np.ndarray:
        """Return dequantized float scores in ``[0, 1]``, one per label."""


class EmbeddingSource(ABC):
    """Produces a feature vector comparable with brand centroids."""

    @abstractmethod
    def embed(self, image: ImageInput) -> np.ndarray:
        """Return a 1-D float feature vector for the image."""


class ClassifierOutputEmbedding(EmbeddingSource):
    """Uses the classifier's output vector as the embedding."""

    def __init__(self, score_source: ScoreSource) -> None:
        self.score_source = score_source

    def embed(self, image: ImageInput) -> np.ndarray:
        return np.asarray(self.score_source.scores(image), dtype=np.float64).ravel()


def dequantize_scores(raw: np.ndarray) -> np.ndarray:
    """Map raw model output to float scores.

    ``uint8`` output from a quantized model is scaled by ``1/255``; float
    output passes through unchanged.
    """

    values = np.asarray(raw)
    if values.dtype == np.uint8:
        return values.astype(np.float64) / 255.0
    return values.astype(np.float64)
