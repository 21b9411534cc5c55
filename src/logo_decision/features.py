"""Pixel-level sanity signals: flatness and edge density."""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .config import DecisionThresholds
from .image_utils import ImageInput, load_image
from .types import PixelStats

LUMA_WEIGHTS = np.array([0.3, 0.59, 0.11], dtype=np.float64)


def luma(image: np.ndarray) -> np.ndarray:
    """Per-pixel luma ``0.3R + 0.59G + 0.11B`` as float64."""

    return image[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def luma_variance(image: np.ndarray) -> float:
    values = luma(image)
    if values.size == 0:
        return 0.0
    return float(values.var())


def is_flat(image_input: ImageInput, variance_threshold: float = 20.0) -> bool:
    """True when the image is (nearly) a single uniform colour."""

    return luma_variance(load_image(image_input)) < variance_threshold


def _edge_counts(image: np.ndarray, pixel_diff: int, grid_divisions: int) -> Tuple[int, int]:
    height, width = image.shape[:2]
    step = max(1, min(width, height) // grid_divisions)
    ys = np.arange(step, height - step, step)
    xs = np.arange(step, width - step, step)
    if ys.size == 0 or xs.size == 0:
        return 0, 0

    red = image[..., 0].astype(np.int32)
    rows = red[ys]
    diff = np.abs(rows[:, xs] - rows[:, xs + step])
    return int(np.count_nonzero(diff > pixel_diff)), int(diff.size)


def edge_density(image_input: ImageInput, pixel_diff: int = 20, grid_divisions: int = 50) -> float:
    """Fraction of grid samples whose red channel jumps to the right neighbour.

    Images too small to hold a single interior sample give ``0.0``.
    """

    edges, samples = _edge_counts(load_image(image_input), pixel_diff, grid_divisions)
    if samples == 0:
        return 0.0
    return edges / samples


def extract_pixel_stats(
    image_input: ImageInput,
    thresholds: Optional[DecisionThresholds] = None,
) -> PixelStats:
    """Compute flatness and edge density from one load of the pixel buffer."""

    thresholds = thresholds or DecisionThresholds()
    image = load_image(image_input)
    height, width = image.shape[:2]
    variance = luma_variance(image)
    edges, samples = _edge_counts(image, thresholds.edge_pixel_diff, thresholds.edge_grid_divisions)
    return PixelStats(
        width=int(width),
        height=int(height),
        luma_variance=variance,
        edge_count=edges,
        edge_samples=samples,
        edge_density=edges / samples if samples else 0.0,
        is_flat=variance < thresholds.flat_variance,
    )
