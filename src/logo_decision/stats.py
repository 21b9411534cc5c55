"""Statistics over a classifier probability vector."""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

from .types import NO_LOGO_LABEL, DistributionStats, InvalidInput, LabelSet

Labels = Union[LabelSet, Sequence[str]]


def as_label_set(labels: Labels) -> LabelSet:
    if isinstance(labels, LabelSet):
        return labels
    return LabelSet(labels, sentinel=NO_LOGO_LABEL)


def _as_vector(probabilities: Sequence[float]) -> np.ndarray:
    try:
        vector = np.asarray(probabilities, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Probability vector is not numeric: {exc}") from exc
    if vector.ndim != 1:
        raise InvalidInput(f"Probability vector must be 1-D, got shape {vector.shape}")
    if not np.all(np.isfinite(vector)):
        raise InvalidInput("Probability vector contains NaN or infinite values")
    return vector


def compute_stats(
    probabilities: Sequence[float],
    labels: Labels,
    no_logo_boost: float = 0.25,
) -> DistributionStats:
    """Summarise ``probabilities`` for the decision cascade.

    Top-1/top-2 use strict ``>`` so the earlier index wins a tie. Entropy is
    the natural-log Shannon entropy over strictly positive entries. The vector
    is never renormalised.

    Raises:
        InvalidInput: fewer than two classes, or the vector and label set
            differ in length.
    """

    label_set = as_label_set(labels)
    vector = _as_vector(probabilities)
    n = vector.size
    if n < 2:
        raise InvalidInput(f"At least two classes are required, got {n}")
    if n != len(label_set):
        raise InvalidInput(f"Probability vector length {n} does not match {len(label_set)} labels")

    top1_index, top2_index = -1, -1
    top1_prob, top2_prob = -math.inf, -math.inf
    entropy = 0.0
    total = 0.0
    for index, p in enumerate(vector.tolist()):
        if p > top1_prob:
            top2_index, top2_prob = top1_index, top1_prob
            top1_index, top1_prob = index, p
        elif p > top2_prob:
            top2_index, top2_prob = index, p
        if p > 0:
            entropy -= p * math.log(p)
        total += p

    mean = total / n
    variance = float(np.sum((vector - mean) ** 2)) / n

    no_logo_index = label_set.no_logo_index
    no_logo_prob = float(vector[no_logo_index]) if no_logo_index is not None else 0.0

    return DistributionStats(
        top1_index=top1_index,
        top1_prob=top1_prob,
        top2_index=top2_index,
        top2_prob=top2_prob,
        gap=top1_prob - top2_prob,
        entropy=entropy,
        mean=mean,
        stddev=math.sqrt(variance),
        no_logo_prob=no_logo_prob,
        boosted_no_logo_prob=no_logo_prob + no_logo_boost * (1.0 - top1_prob),
    )
