"""Weighted aggregation of category scores into an overall score."""

from __future__ import annotations

import math
from typing import Mapping

DEFAULT_CATEGORY_WEIGHTS = {"environmental": 0.4, "social": 0.3, "governance": 0.3}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def weighted_mean(
    scores: Mapping[str, float | None],
    weights: Mapping[str, float] | None = None,
) -> float | None:
    """Weighted mean over the categories present in both ``scores`` and ``weights``.

    Parameters
    ----------
    scores : Mapping[str, float | None]
        Category -> raw score (0-100). ``None`` and NaN count as absent.
    weights : Mapping[str, float] | None, optional
        Category -> weight (default: environmental 0.4, social 0.3, governance 0.3)

    Returns
    -------
    float | None
        ``Σ(score_i × weight_i) / Σ(weight_i)`` over present categories, or
        ``None`` when no weighted category is present. An absent category is
        dropped from numerator and denominator, so the remaining weights are
        re-normalized instead of the missing one counting as zero.
    """
    weights = DEFAULT_CATEGORY_WEIGHTS if weights is None else weights
    negative = [k for k, w in weights.items() if w < 0]
    if negative:
        raise ValueError(f"Negative category weights: {negative}")

    total = 0.0
    total_weight = 0.0
    for category, weight in weights.items():
        score = scores.get(category)
        if score is None or (isinstance(score, float) and math.isnan(score)):
            continue
        total += float(score) * weight
        total_weight += weight

    if total_weight == 0:
        return None
    return total / total_weight


def weighted_score(
    scores: Mapping[str, float | None],
    weights: Mapping[str, float] | None = None,
) -> int:
    """Overall score: :func:`weighted_mean` rounded to an integer and clamped to [0, 100].

    Returns 0 when no category is present.
    """
    mean = weighted_mean(scores, weights)
    if mean is None:
        return 0
    return min(100, max(0, round_half_up(mean)))
