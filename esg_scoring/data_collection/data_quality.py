from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
import pandas as pd


OUTLIER_Z = 4.0


@dataclass(frozen=True)
class QualityReport:
    companies: int
    slots: int
    missing_by_metric: dict[str, float]
    overall_missing: float
    outlier_counts_by_metric: dict[str, int]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "missing_rate": pd.Series(self.missing_by_metric, dtype=float),
            "outliers": pd.Series(self.outlier_counts_by_metric, dtype="Int64"),
        }).rename_axis("metric")


def to_number(value: Any) -> float:
    """Coerce a single reported value to float; NaN, None and non-numeric become 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def coerce_numeric(
    values: Mapping[str, Any],
    *,
    keys: list[str] | None = None,
    context: str = "metrics",
) -> dict[str, float]:
    """Coerce metric values to floats, treating bad data as zero.

    Parameters
    ----------
    values : Mapping[str, Any]
        Raw metric values (strings, None, NaN and numbers are all accepted)
    keys : list[str] | None, optional
        Restrict coercion to these keys (missing keys become 0.0)
    context : str, default "metrics"
        Label used in the warning message

    Returns
    -------
    dict[str, float]
        Numeric values; every value that could not be parsed is reported once
        through a ``UserWarning``.
    """
    keys = list(values.keys()) if keys is None else keys
    out: dict[str, float] = {}
    coerced: list[str] = []
    for key in keys:
        raw = values.get(key)
        number = to_number(raw)
        if raw is not None and number == 0.0 and not _is_zero_like(raw):
            coerced.append(key)
        out[key] = number

    if coerced:
        warnings.warn(
            f"Non-numeric {context} treated as 0: {', '.join(sorted(coerced))}",
            UserWarning,
        )
    return out


def _is_zero_like(raw: Any) -> bool:
    try:
        return float(raw) == 0.0
    except (TypeError, ValueError):
        return False


def missingness_report(df: pd.DataFrame, *, z_cutoff: float = OUTLIER_Z) -> QualityReport:
    """Coverage and outlier screening over a long-format metric table.

    Parameters
    ----------
    df : pd.DataFrame
        Rows of ``company_id, metric_name, value, period``
    z_cutoff : float, default 4.0
        A value is counted as an outlier when its z-score within its own
        metric exceeds this (a screening aid, not a statistical test)

    Returns
    -------
    QualityReport
        ``missing_by_metric`` is the share of reporting slots (distinct
        company/period pairs) in which the metric was not reported.
    """
    if df.empty:
        return QualityReport(
            companies=0,
            slots=0,
            missing_by_metric={},
            overall_missing=float("nan"),
            outlier_counts_by_metric={},
        )

    slots = len(df[["company_id", "period"]].drop_duplicates())
    reported = (
        df.drop_duplicates(subset=["company_id", "period", "metric_name"])
        .groupby("metric_name")
        .size()
    )
    missing = 1.0 - reported / slots

    by_metric = df.groupby("metric_name")["value"]
    sig = by_metric.transform("std").replace(0, np.nan)
    z = (df["value"] - by_metric.transform("mean")) / sig
    outliers = (z.abs() > z_cutoff).groupby(df["metric_name"]).sum()

    return QualityReport(
        companies=int(df["company_id"].nunique()),
        slots=slots,
        missing_by_metric={str(k): float(v) for k, v in missing.items()},
        overall_missing=float(missing.mean()),
        outlier_counts_by_metric={str(k): int(v) for k, v in outliers.items()},
    )
