"""Helpers that generate synthetic RGB images for engine tests."""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np


Color = Tuple[int, int, int]


def create_blank_image(width: int = 320, height: int = 320, color: Color = (255, 255, 255)) -> np.ndarray:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = color
    return image


def create_split_image(size: int = 100, boundary: int = 50, left_red: int = 0, right_red: int = 255) -> np.ndarray:
    """Two flat halves that differ only in the red channel.

    With the default 100x100 canvas the sampling stride is 2 and exactly one
    sample column (x=48) straddles the boundary, giving an edge density of
    1/48.
    """

    image = np.zeros((size, size, 3), dtype=np.uint8)
    image[:, :boundary, 0] = left_red
    image[:, boundary:, 0] = right_red
    return image


def create_striped_image(width: int = 200, height: int = 200, stripe: int = 4) -> np.ndarray:
    image = create_blank_image(width, height, color=(0, 0, 0))
    for x in range(0, width, stripe * 2):
        image[:, x : x + stripe] = (255, 255, 255)
    return image


def create_noisy_flat_image(width: int = 120, height: int = 120, base: int = 128, spread: int = 2) -> np.ndarray:
    rng = np.random.default_rng(7)
    noise = rng.integers(-spread, spread + 1, size=(height, width, 1))
    image = np.clip(base + noise, 0, 255).astype(np.uint8)
    return np.repeat(image, 3, axis=2)


def create_text_logo_image(text: str = "ACME") -> np.ndarray:
    canvas = create_blank_image(480, 240)
    font = cv2.FONT_HERSHEY_SIMPLEX
    thickness = 5
    normalized_text = text.upper()
    target_width = int(canvas.shape[1] * 0.8)
    base_size, _ = cv2.getTextSize(normalized_text, font, 1.0, thickness)
    if base_size[0] == 0:
        font_scale = 1.0
    else:
        font_scale = target_width / base_size[0]
    font_scale = float(max(1.0, min(3.5, font_scale)))
    text_size, baseline = cv2.getTextSize(normalized_text, font, font_scale, thickness)
    origin_x = max(10, (canvas.shape[1] - text_size[0]) // 2)
    origin_y = max(text_size[1] + baseline, (canvas.shape[0] + text_size[1]) // 2)
    cv2.putText(
        canvas,
        normalized_text,
        (origin_x, origin_y),
        font,
        font_scale,
        (200, 20, 20),
        thickness,
        lineType=cv2.LINE_AA,
    )
    return canvas
