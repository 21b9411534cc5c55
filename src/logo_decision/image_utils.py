"""Utility helpers for image loading and preprocessing."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image

ImageInput = Union[str, Path, np.ndarray, Image.Image]


def load_image(image_input: ImageInput) -> np.ndarray:
    """Load an image input into an RGB ``(H, W, 3)`` uint8 ndarray.

    Arrays are taken to be RGB already; files are decoded with OpenCV and
    converted from its BGR order.
    """

    if isinstance(image_input, np.ndarray):
        image = image_input
    elif isinstance(image_input, Image.Image):
        image = np.array(image_input.convert("RGB"))
    else:
        path = Path(image_input)
        if not path.exists():
            raise FileNotFoundError(f"Image path not found: {path}")
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is None:
            raise ValueError(f"Unable to read image from path: {path}")
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    return ensure_rgb(image)


def ensure_rgb(image: np.ndarray) -> np.ndarray:
    """Ensure the ndarray is three-channel RGB."""

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported image shape: {image.shape}")
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    return image
