"""Human-readable and JSON-friendly renderings of engine results."""

from __future__ import annotations

from dataclasses import fields
from enum import Enum
from typing import Any, Dict, Mapping

from .types import ClassificationResult, Verdict, VerificationResult, VerificationStatus


def details_of(result: Any) -> Dict[str, Any]:
    """Public dataclass fields of a result variant, enums as their values."""

    payload: Dict[str, Any] = {}
    for item in fields(result):
        if item.name in ("stats", "pixels"):
            continue
        value = getattr(result, item.name)
        payload[item.name] = value.value if isinstance(value, Enum) else value
    return payload


def format_classification(result: ClassificationResult) -> str:
    if result.verdict is Verdict.ACCEPTED:
        return f"{result.label} ({result.confidence * 100:.1f}%)"
    if result.verdict is Verdict.REJECTED_VISUAL_MISMATCH:
        return "⚠️ No logo detected (visual mismatch)"
    return "⚠️ No known logo detected"


def format_verification(result: VerificationResult) -> str:
    if result.status is VerificationStatus.VERIFIED:
        return f"✅ Verified: {result.brand} ({result.similarity:.2f})"
    if result.status is VerificationStatus.REJECTED:
        return f"⚠️ No known logo detected (cosine={result.best_similarity:.2f})"
    return "⚠️ No centroids available for comparison"


def result_to_dict(result: ClassificationResult) -> Dict[str, Any]:
    """Flatten a cascade result, including its diagnostics when present."""

    record: Dict[str, Any] = {"verdict": result.verdict.value}
    record.update(details_of(result))
    if result.stats is not None:
        record["stats"] = {
            "top1_index": result.stats.top1_index,
            "top1_prob": round(result.stats.top1_prob, 4),
            "top2_index": result.stats.top2_index,
            "top2_prob": round(result.stats.top2_prob, 4),
            "gap": round(result.stats.gap, 4),
            "entropy": round(result.stats.entropy, 4),
            "no_logo_prob": round(result.stats.no_logo_prob, 4),
            "boosted_no_logo_prob": round(result.stats.boosted_no_logo_prob, 4),
        }
    if result.pixels is not None:
        record["pixels"] = {
            "luma_variance": round(result.pixels.luma_variance, 2),
            "edge_density": round(result.pixels.edge_density, 4),
            "is_flat": result.pixels.is_flat,
        }
    return record


def reorganize_results(results: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
    """Split per-image records into accepted and rejected groups.

    ``results`` maps an image name to either a :func:`result_to_dict` record
    or ``{"error": message}``.
    """

    accepted = []
    rejected = []
    failed = []
    for image_name, data in results.items():
        if "error" in data:
            failed.append({"image": image_name, "error": data["error"]})
        elif data.get("verdict") == Verdict.ACCEPTED.value:
            accepted.append({"image": image_name, **data})
        else:
            rejected.append({"image": image_name, **data})

    return {
        "accepted": accepted,
        "rejected": rejected,
        "failed": failed,
        "summary": {
            "total": len(results),
            "accepted_count": len(accepted),
            "rejected_count": len(rejected),
            "failed_count": len(failed),
        },
    }
