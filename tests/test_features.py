"""Unit tests for the pixel feature extractor using synthetic images."""

from __future__ import annotations

import cv2
import numpy as np
import pytest
from PIL import Image

from logo_decision import DecisionThresholds, edge_density, extract_pixel_stats, is_flat
from logo_decision.features import luma

from . import image_factory as factory


def test_luma_weights():
    pixel = np.array([[[100, 50, 200]]], dtype=np.uint8)
    assert luma(pixel)[0, 0] == pytest.approx(0.3 * 100 + 0.59 * 50 + 0.11 * 200)


@pytest.mark.parametrize("color", [(255, 255, 255), (0, 0, 0), (12, 200, 90)])
def test_uniform_images_are_flat(color):
    assert is_flat(factory.create_blank_image(color=color))


def test_low_noise_image_is_flat():
    assert is_flat(factory.create_noisy_flat_image())


def test_split_image_is_not_flat():
    assert not is_flat(factory.create_split_image())


def test_split_image_edge_density():
    assert edge_density(factory.create_split_image()) == pytest.approx(1 / 48)


def test_stripes_are_all_edges():
    assert edge_density(factory.create_striped_image()) == 1.0


def test_edge_requires_difference_above_threshold():
    assert edge_density(factory.create_split_image(right_red=20)) == 0.0
    assert edge_density(factory.create_split_image(right_red=21)) > 0.0


@pytest.mark.parametrize("size", [1, 2])
def test_degenerate_image_has_zero_density(size: int):
    image = factory.create_split_image(size=size, boundary=1)
    assert edge_density(image) == 0.0


def test_pixel_stats_match_individual_signals():
    image = factory.create_split_image()
    stats = extract_pixel_stats(image)

    assert stats.width == 100
    assert stats.height == 100
    assert stats.edge_samples == 48 * 48
    assert stats.edge_count == 48
    assert stats.edge_density == pytest.approx(edge_density(image))
    assert stats.is_flat is is_flat(image)


def test_pixel_stats_follow_thresholds():
    image = factory.create_noisy_flat_image()
    assert extract_pixel_stats(image).is_flat
    assert not extract_pixel_stats(image, DecisionThresholds(flat_variance=0.5)).is_flat


def test_pixel_stats_accept_grayscale_and_pil_inputs():
    gray = np.zeros((60, 60), dtype=np.uint8)
    gray[:, 30:] = 255
    assert not extract_pixel_stats(gray).is_flat

    pil_image = Image.fromarray(factory.create_striped_image())
    assert extract_pixel_stats(pil_image).edge_density == 1.0


def test_signals_accept_paths_and_pil_images(tmp_path):
    path = tmp_path / "stripes.png"
    cv2.imwrite(str(path), factory.create_striped_image())
    flat = Image.fromarray(factory.create_blank_image(color=(40, 40, 40)))

    assert edge_density(path) == 1.0
    assert not is_flat(path)
    assert is_flat(flat)
    assert edge_density(flat) == 0.0


def test_text_logo_has_texture():
    stats = extract_pixel_stats(factory.create_text_logo_image())
    assert not stats.is_flat
    assert stats.edge_count > 0
