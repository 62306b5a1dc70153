"""Trend Forecasting Module."""

from .trend import (
    Forecast,
    TrendForecast,
    TrendPoint,
    calculate_trend,
    forecast_score_trend,
    forecast_trend,
)

__all__ = [
    "Forecast",
    "TrendForecast",
    "TrendPoint",
    "calculate_trend",
    "forecast_score_trend",
    "forecast_trend",
]
