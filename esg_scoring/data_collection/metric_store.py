"""Reported ESG metric values per company and period.

The store is a thin wrapper around a long-format DataFrame with columns
``company_id, metric_name, value, period``. Readers receive their database
connection from the caller; the store never opens or caches one itself.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import asdict, dataclass
from typing import Any, Iterable

import pandas as pd

from ..forecasting.trend import TrendPoint
from .data_quality import QualityReport, missingness_report

METRIC_COLUMNS = ["company_id", "metric_name", "value", "period"]

DEFAULT_QUERY = (
    "SELECT company_id, metric_name, metric_value AS value, reporting_year AS period "
    "FROM {table}"
)


@dataclass(frozen=True)
class Metric:
    company_id: str
    metric_name: str
    value: float
    period: int


class MetricStore:
    """Flat key/value table of reported metrics."""

    def __init__(self, df: pd.DataFrame):
        missing = [c for c in METRIC_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Metric table is missing columns: {missing}")

        df = df[METRIC_COLUMNS].copy()
        df["company_id"] = df["company_id"].astype(str)
        df["metric_name"] = df["metric_name"].astype(str)

        values = pd.to_numeric(df["value"], errors="coerce")
        bad = values.isna()
        if bad.any():
            names = sorted(df.loc[bad, "metric_name"].unique())
            warnings.warn(
                f"{int(bad.sum())} non-numeric metric values treated as 0: {', '.join(names)}",
                UserWarning,
            )
        df["value"] = values.fillna(0.0).astype(float)
        self.df = df.reset_index(drop=True)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_records(cls, rows: Iterable[Metric | dict[str, Any]]) -> MetricStore:
        records = [asdict(r) if isinstance(r, Metric) else dict(r) for r in rows]
        if not records:
            return cls(pd.DataFrame(columns=METRIC_COLUMNS))
        return cls(pd.DataFrame.from_records(records))

    @classmethod
    def from_csv(cls, path: str | os.PathLike[str]) -> MetricStore:
        return cls(pd.read_csv(path))

    @classmethod
    def from_sql(cls, con: Any, *, table: str = "esg_data", query: str | None = None) -> MetricStore:
        """Read metric rows through an open connection supplied by the caller.

        Parameters
        ----------
        con : Any
            DB-API connection or SQLAlchemy connectable accepted by ``pandas.read_sql_query``
        table : str, default "esg_data"
            Table holding ``company_id, metric_name, metric_value, reporting_year``
        query : str | None, optional
            Custom query returning the four metric columns
        """
        sql = query or DEFAULT_QUERY.format(table=table)
        return cls(pd.read_sql_query(sql, con))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def companies(self) -> list[str]:
        return sorted(self.df["company_id"].unique())

    def periods(self, company_id: str) -> list[Any]:
        rows = self.df[self.df["company_id"] == str(company_id)]
        return sorted(_to_python(p) for p in rows["period"].unique())

    def latest_metrics(self, company_id: str, period: Any = None) -> dict[str, float]:
        """Metric map for one period of a company (latest period when not given)."""
        rows = self.df[self.df["company_id"] == str(company_id)]
        if rows.empty:
            return {}
        if period is None:
            period = rows["period"].max()
        rows = rows[rows["period"] == period]
        # Last reported row wins when a metric is reported twice in one period
        rows = rows.drop_duplicates(subset="metric_name", keep="last")
        return dict(zip(rows["metric_name"], rows["value"].astype(float)))

    def history(self, company_id: str, metric_name: str) -> list[TrendPoint]:
        rows = self.df[
            (self.df["company_id"] == str(company_id)) & (self.df["metric_name"] == metric_name)
        ]
        rows = rows.drop_duplicates(subset="period", keep="last").sort_values("period")
        return [
            TrendPoint(period=_to_python(p), value=float(v))
            for p, v in zip(rows["period"], rows["value"])
        ]

    def emissions_by_scope(self, company_id: str, period: Any = None) -> dict[str, float]:
        metrics = self.latest_metrics(company_id, period)
        return {
            "scope1": metrics.get("scope1Emissions", 0.0),
            "scope2": metrics.get("scope2Emissions", 0.0),
            "scope3": metrics.get("scope3Emissions", 0.0),
        }

    def to_wide(self) -> pd.DataFrame:
        """One row per (company_id, period), one column per metric."""
        if self.df.empty:
            return pd.DataFrame(columns=["company_id", "period"])
        wide = self.df.pivot_table(
            index=["company_id", "period"],
            columns="metric_name",
            values="value",
            aggfunc="last",
        )
        wide.columns.name = None
        return wide.reset_index()

    def quality_report(self) -> QualityReport:
        return missingness_report(self.df)

    def __len__(self) -> int:
        return len(self.df)


def _to_python(value: Any) -> Any:
    # numpy scalars from pandas columns are not JSON serializable
    return value.item() if hasattr(value, "item") else value
