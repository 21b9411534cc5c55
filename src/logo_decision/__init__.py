"""Public exports for the logo decision package."""

from .cascade import LogoDecisionEngine, classify
from .config import DecisionThresholds, EngineConfig, load_centroids, load_config, load_labels
from .embedding import ClassifierOutputEmbedding, EmbeddingSource, ScoreSource
from .features import edge_density, extract_pixel_stats, is_flat
from .stats import compute_stats
from .types import (
    Accepted,
    ClassificationResult,
    DistributionStats,
    InvalidInput,
    LabelSet,
    NoCentroids,
    PixelStats,
    Rejected,
    RejectedBoostedNoLogo,
    RejectedLowConfidence,
    RejectedVisualMismatch,
    RejectionReason,
    Verdict,
    VerificationResult,
    VerificationStatus,
    Verified,
)
from .verifier import EmbeddingVerifier, cosine_similarity, verify_against_centroids

__all__ = [
    "LogoDecisionEngine",
    "classify",
    "DecisionThresholds",
    "EngineConfig",
    "load_centroids",
    "load_config",
    "load_labels",
    "ClassifierOutputEmbedding",
    "EmbeddingSource",
    "ScoreSource",
    "edge_density",
    "extract_pixel_stats",
    "is_flat",
    "compute_stats",
    "Accepted",
    "ClassificationResult",
    "DistributionStats",
    "InvalidInput",
    "LabelSet",
    "NoCentroids",
    "PixelStats",
    "Rejected",
    "RejectedBoostedNoLogo",
    "RejectedLowConfidence",
    "RejectedVisualMismatch",
    "RejectionReason",
    "Verdict",
    "VerificationResult",
    "VerificationStatus",
    "Verified",
    "EmbeddingVerifier",
    "cosine_similarity",
    "verify_against_centroids",
]
