"""Linear trend forecasting over short metric histories.

Slope and intercept come from an ordinary least-squares fit over the index
domain ``0..n-1``; the reported periods only label the points. Forecast
confidence is a fixed decay (0.75, 0.60, 0.45, then a 0.30 floor), not an
interval derived from the residuals.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd

from ..scoring.benchmark_scorer import esg_rating
from ..scoring.weighted_scorer import round_half_up

DEFAULT_HORIZON = 3
MIN_POINTS = 2
BASE_CONFIDENCE = 0.9
CONFIDENCE_DECAY = 0.15
CONFIDENCE_FLOOR = 0.3


@dataclass(frozen=True)
class TrendPoint:
    period: Any
    value: float


@dataclass(frozen=True)
class Forecast:
    period: Any
    predicted: float
    confidence: float


@dataclass
class TrendForecast:
    historical: list[TrendPoint]
    forecast: list[Forecast]
    slope: float
    intercept: float
    direction: str = field(init=False)

    def __post_init__(self):
        self.direction = "improving" if self.slope > 0 else "declining"

    def to_dict(self) -> dict[str, Any]:
        return {
            "historical": [{"period": p.period, "value": p.value} for p in self.historical],
            "forecast": [
                {"period": f.period, "predicted": f.predicted, "confidence": f.confidence}
                for f in self.forecast
            ],
            "trend": {"slope": self.slope, "intercept": self.intercept},
        }


def forecast_confidence(step: int) -> float:
    """Heuristic confidence for the ``step``-th period ahead (1-based)."""
    return round(max(CONFIDENCE_FLOOR, BASE_CONFIDENCE - step * CONFIDENCE_DECAY), 2)


def _as_points(points: Sequence[TrendPoint | tuple[Any, Any]]) -> list[TrendPoint]:
    out = []
    for p in points:
        if isinstance(p, TrendPoint):
            out.append(p)
        else:
            period, value = p
            out.append(TrendPoint(period=period, value=value))

    values = pd.to_numeric(pd.Series([p.value for p in out], dtype=object), errors="coerce")
    if values.isna().any():
        warnings.warn(
            f"{int(values.isna().sum())} non-numeric trend values treated as 0",
            UserWarning,
        )
    values = values.fillna(0.0).astype(float)
    return [TrendPoint(period=p.period, value=float(v)) for p, v in zip(out, values)]


def calculate_trend(values: Sequence[float]) -> tuple[float, float]:
    """Least-squares slope and intercept of ``values`` against ``0..n-1``.

    Raises
    ------
    ValueError
        If fewer than two values are given
    """
    if len(values) < MIN_POINTS:
        raise ValueError(f"At least {MIN_POINTS} values are required for a trend")
    x = np.arange(len(values), dtype=float)
    y = np.asarray(values, dtype=float)
    slope, intercept = np.polyfit(x, y, deg=1)
    return float(slope), float(intercept)


def _next_period(points: list[TrendPoint], step: int) -> Any:
    last = points[-1].period
    if isinstance(last, (int, np.integer)) and not isinstance(last, bool):
        return int(last) + step
    return len(points) + step - 1


def forecast_trend(
    points: Sequence[TrendPoint | tuple[Any, Any]],
    years: int = DEFAULT_HORIZON,
) -> TrendForecast | None:
    """Project a metric history ``years`` periods ahead.

    Parameters
    ----------
    points : Sequence[TrendPoint | tuple]
        Historical ``(period, value)`` pairs in chronological order
    years : int, default 3
        Number of future periods to project

    Returns
    -------
    TrendForecast | None
        ``None`` when fewer than two historical points are available.
        Predictions are ``max(0, slope * (n + i - 1) + intercept)``.
    """
    history = _as_points(points)
    if len(history) < MIN_POINTS:
        return None

    slope, intercept = calculate_trend([p.value for p in history])
    n = len(history)

    forecast = []
    for i in range(1, years + 1):
        predicted = max(0.0, slope * (n + i - 1) + intercept)
        forecast.append(
            Forecast(
                period=_next_period(history, i),
                predicted=predicted,
                confidence=forecast_confidence(i),
            )
        )

    return TrendForecast(historical=history, forecast=forecast, slope=slope, intercept=intercept)


def forecast_score_trend(
    scores: Sequence[TrendPoint | tuple[Any, Any]],
    years: int = DEFAULT_HORIZON,
) -> dict[str, Any] | None:
    """Forecast overall ESG scores, clamped to [0, 100] and rated."""
    result = forecast_trend(scores, years)
    if result is None:
        return None

    predictions = []
    for f in result.forecast:
        score = min(100.0, f.predicted)
        predictions.append({
            "period": f.period,
            "predictedScore": round_half_up(score),
            "confidence": f.confidence,
            "rating": esg_rating(score),
        })

    return {"trend": result.direction, "predictions": predictions, "confidence": "medium"}
