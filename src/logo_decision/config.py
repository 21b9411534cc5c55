"""Calibration constants and loaders for labels, centroids and config files.

Every threshold the cascade uses lives in :class:`DecisionThresholds`; the
defaults reproduce the calibration shipped with the scanner. Files are read
once by the caller and the resulting values are handed to the engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np
import yaml

from .types import NO_LOGO_LABEL, CentroidTable, InvalidInput, LabelSet

PathLike = Union[str, Path]

DEFAULT_SIMILARITY_THRESHOLD = 0.8


@dataclass(frozen=True)
class DecisionThresholds:
    """Tunable, model-specific calibration for the decision cascade."""

    # visual gate
    flat_variance: float = 20.0
    edge_pixel_diff: int = 20
    edge_grid_divisions: int = 50
    min_edge_density: float = 0.015
    # NoLogo bias
    no_logo_boost: float = 0.25
    max_boosted_no_logo: float = 0.3
    # confidence gate
    min_top1: float = 0.8
    min_gap: float = 0.15
    max_entropy: float = 2.2
    max_no_logo: float = 0.4
    no_logo_top1_ratio: float = 0.5

    def with_overrides(self, **overrides: Any) -> "DecisionThresholds":
        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidInput(f"Unknown threshold(s): {', '.join(unknown)}")
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "DecisionThresholds":
        if not data:
            return cls()
        return cls().with_overrides(**dict(data))


@dataclass(frozen=True)
class EngineConfig:
    thresholds: DecisionThresholds = field(default_factory=DecisionThresholds)
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    sentinel_label: str = NO_LOGO_LABEL
    labels_path: Optional[Path] = None
    centroids_path: Optional[Path] = None


def _load_mapping(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    suffix = path.suffix.lower()
    if not path.exists():
        raise FileNotFoundError(f"Config path not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        if suffix == ".json":
            data = json.load(handle)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(handle)
        else:
            raise InvalidInput(f"Unsupported config file type: {path} (expected .json/.yaml/.yml)")

    if not isinstance(data, dict):
        raise InvalidInput(f"Top level of {path} must be a mapping")
    return data


def _as_optional_path(value: Any, base: Path) -> Optional[Path]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    candidate = Path(text).expanduser()
    return candidate if candidate.is_absolute() else base / candidate


def load_config(path: PathLike) -> EngineConfig:
    """Read an :class:`EngineConfig` from a JSON or YAML file.

    Relative ``labels`` / ``centroids`` paths resolve against the file's
    directory.
    """

    path = Path(path)
    data = _load_mapping(path)
    thresholds = data.get("thresholds") or {}
    if not isinstance(thresholds, dict):
        raise InvalidInput("'thresholds' must be a mapping")

    return EngineConfig(
        thresholds=DecisionThresholds.from_mapping(thresholds),
        similarity_threshold=float(data.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD)),
        sentinel_label=str(data.get("sentinel_label", NO_LOGO_LABEL)),
        labels_path=_as_optional_path(data.get("labels"), path.parent),
        centroids_path=_as_optional_path(data.get("centroids"), path.parent),
    )


def load_labels(path: PathLike, sentinel: str = NO_LOGO_LABEL) -> LabelSet:
    """Read a ``labels.txt`` style file, one class name per line."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Labels path not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        names = [line.strip() for line in handle]
    return LabelSet((name for name in names if name), sentinel=sentinel)


def build_centroid_table(centroids: Mapping[str, Any]) -> CentroidTable:
    """Freeze a brand -> vector mapping into a read-only centroid table.

    ``None`` entries become empty vectors so the verifier can skip them.
    """

    table: Dict[str, np.ndarray] = {}
    for brand, vector in centroids.items():
        values = np.asarray([] if vector is None else vector, dtype=np.float64).ravel().copy()
        values.setflags(write=False)
        table[str(brand)] = values
    return MappingProxyType(table)


def load_centroids(path: PathLike) -> CentroidTable:
    data = _load_mapping(path)
    brands = data.get("centroids", data)
    if not isinstance(brands, dict):
        raise InvalidInput("'centroids' must be a mapping of brand to vector")
    try:
        return build_centroid_table(brands)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Malformed centroid vector in {path}: {exc}") from exc
