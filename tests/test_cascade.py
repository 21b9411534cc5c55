"""Scenario tests for the decision cascade."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from logo_decision import (
    Accepted,
    DecisionThresholds,
    InvalidInput,
    LogoDecisionEngine,
    RejectedBoostedNoLogo,
    RejectedLowConfidence,
    RejectedVisualMismatch,
    RejectionReason,
    Verdict,
    classify,
)

from . import image_factory as factory

LABELS = ["A", "B", "NoLogo"]


@pytest.fixture(scope="module")
def logo_image():
    return factory.create_split_image()


@pytest.fixture(scope="module")
def engine() -> LogoDecisionEngine:
    return LogoDecisionEngine(LABELS)


def test_confident_prediction_is_accepted(engine, logo_image):
    result = engine.classify([0.9, 0.05, 0.05], logo_image)

    assert result == Accepted("A", 0.9)
    assert result.accepted
    assert result.stats.gap == pytest.approx(0.85)
    assert result.pixels.edge_density == pytest.approx(1 / 48)


def test_low_top1_is_rejected(logo_image):
    result = classify([0.5, 0.3, 0.2], ["A", "B", "C"], logo_image)
    assert result == RejectedLowConfidence(RejectionReason.LOW_TOP1)
    assert not result.accepted


def test_boosted_no_logo_preempts_low_confidence(engine, logo_image):
    # 0.2 + 0.25 * 0.5 = 0.325 crosses the boosted gate before top-1 is checked
    result = engine.classify([0.5, 0.3, 0.2], logo_image)
    assert result == RejectedBoostedNoLogo()


@pytest.mark.parametrize(
    "probabilities",
    [[0.9, 0.05, 0.05], [0.5, 0.1, 0.4], [0.0, 0.0, 1.0]],
)
def test_flat_image_is_visual_mismatch_regardless_of_scores(engine, probabilities):
    result = engine.classify(probabilities, factory.create_blank_image(color=(200, 30, 30)))
    assert result == RejectedVisualMismatch()
    assert result.verdict is Verdict.REJECTED_VISUAL_MISMATCH


def test_low_edge_density_is_visual_mismatch(engine):
    # stride 2 over a 400px row: one sampled column out of 198 is an edge
    image = np.zeros((100, 400, 3), dtype=np.uint8)
    image[:, 200:, 0] = 255
    result = engine.classify([0.9, 0.05, 0.05], image)
    assert result == RejectedVisualMismatch()
    assert not result.pixels.is_flat


def test_boosted_no_logo_is_rejected(engine, logo_image):
    result = engine.classify([0.5, 0.1, 0.4], logo_image)
    assert result == RejectedBoostedNoLogo()
    assert result.stats.boosted_no_logo_prob == pytest.approx(0.525)


def test_ambiguous_gap_is_rejected(engine, logo_image):
    result = engine.classify([0.85, 0.75, 0.0], logo_image)
    assert result == RejectedLowConfidence(RejectionReason.AMBIGUOUS_GAP)


def test_high_entropy_is_rejected(logo_image):
    labels = [f"brand_{i}" for i in range(41)]
    probabilities = [0.9] + [0.05] * 40
    result = classify(probabilities, labels, logo_image)
    assert result == RejectedLowConfidence(RejectionReason.HIGH_ENTROPY)


def test_dominant_no_logo_is_rejected_when_boost_gate_is_relaxed(logo_image):
    thresholds = DecisionThresholds().with_overrides(max_boosted_no_logo=1.0)
    result = classify([0.85, 0.0, 0.45], LABELS, logo_image, thresholds)
    assert result == RejectedLowConfidence(RejectionReason.DOMINANT_NO_LOGO)


def test_thresholds_are_overridable(logo_image):
    strict = DecisionThresholds(min_edge_density=0.05)
    assert classify([0.9, 0.05, 0.05], LABELS, logo_image, strict) == RejectedVisualMismatch()

    lenient = DecisionThresholds(min_top1=0.4, max_boosted_no_logo=0.5)
    assert classify([0.5, 0.3, 0.2], LABELS, logo_image, lenient) == Accepted("A", 0.5)


def test_invalid_vector_raises_before_visual_gate(engine):
    with pytest.raises(InvalidInput):
        engine.classify([0.9, 0.1], factory.create_blank_image())


def test_engine_reads_image_files(tmp_path, engine):
    path = tmp_path / "stripes.png"
    cv2.imwrite(str(path), factory.create_striped_image())
    assert engine.classify([0.05, 0.92, 0.03], path) == Accepted("B", 0.92)


def test_missing_image_file_raises(tmp_path, engine):
    with pytest.raises(FileNotFoundError):
        engine.classify([0.9, 0.05, 0.05], tmp_path / "missing.png")
