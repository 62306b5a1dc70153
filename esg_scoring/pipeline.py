"""Per-company ESG scoring over a metric store.

Combines risk classification, benchmark scoring, trend forecasts, scenario
analysis, data validation and target tracking for every company in a
:class:`MetricStore`.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
import pandas as pd

from .analytics.benchmarking import Target, track_targets
from .analytics.scenarios import scenario_analysis
from .data_collection.metric_store import MetricStore
from .forecasting.trend import DEFAULT_HORIZON, forecast_trend
from .risk.assessment import assess_esg_risk
from .scoring.benchmark_scorer import BenchmarkScorer
from .validation.validator import load_validation_rules, validate_esg_data


class ScoringPipeline:
    """Score companies from reported metrics."""

    def __init__(self, config: dict[str, Any] | None = None):
        """Initialize with scoring configuration.

        Parameters
        ----------
        config : dict[str, Any] | None
            Scoring config dict (from scoring_config.yaml)
        """
        self.config = config or {}
        self.forecast_cfg = self.config.get("forecasting", {})
        self.benchmark_scorer = BenchmarkScorer(self.config)
        self.validation_rules = load_validation_rules(self.config)
        self.targets = [Target.from_config(t) for t in self.config.get("targets", [])]

    @property
    def horizon(self) -> int:
        return int(self.forecast_cfg.get("years", DEFAULT_HORIZON))

    def score_company(
        self,
        store: MetricStore,
        company_id: str,
        *,
        period: Any = None,
        industry: str | None = None,
        forecast_metrics: list[str] | None = None,
    ) -> dict[str, Any]:
        """Full scoring result for one company as a JSON-serializable dict.

        Progress on the configured ``targets`` is included as of the scored
        period when any are configured and the period is a year.

        Parameters
        ----------
        store : MetricStore
            Reported metrics
        company_id : str
            Company to score
        period : Any, optional
            Reporting period to score (default: latest)
        industry : str | None, optional
            Benchmark industry (default from config)
        forecast_metrics : list[str] | None, optional
            Metrics to forecast (default: config ``forecasting.metrics``, else
            every metric reported for the company)
        """
        metrics = store.latest_metrics(company_id, period)
        if period is None:
            periods = store.periods(company_id)
            period = periods[-1] if periods else None

        if forecast_metrics is None:
            forecast_metrics = self.forecast_cfg.get("metrics") or sorted(metrics)
        forecasts = {}
        for metric in forecast_metrics:
            result = forecast_trend(store.history(company_id, metric), self.horizon)
            forecasts[metric] = result.to_dict() if result is not None else None

        out = {
            "companyId": company_id,
            "risk": assess_esg_risk(metrics, config=self.config).to_dict(),
            "esgScore": self.benchmark_scorer.score(
                metrics, industry=industry, company_id=company_id
            ).to_dict(),
            "forecasts": forecasts,
            "scenarios": scenario_analysis(
                store.emissions_by_scope(company_id, period), config=self.config
            ),
            "validation": validate_esg_data(metrics, self.validation_rules).to_dict(),
        }
        if self.targets and period is not None:
            year = _period_year(period)
            if year is None:
                warnings.warn(
                    f"Targets not tracked for {company_id}: period {period!r} is not a year",
                    UserWarning,
                )
            else:
                out["targets"] = track_targets(self.targets, metrics, as_of_year=year)
        return out

    def score_all(self, store: MetricStore, *, industry: str | None = None) -> pd.DataFrame:
        """One summary row per company for its latest period."""
        rows = []
        for company_id in store.companies():
            periods = store.periods(company_id)
            metrics = store.latest_metrics(company_id)
            risk = assess_esg_risk(metrics, config=self.config)
            esg = self.benchmark_scorer.score(metrics, industry=industry, company_id=company_id)
            validation = validate_esg_data(metrics, self.validation_rules)
            rows.append({
                "company_id": company_id,
                "period": periods[-1] if periods else None,
                "environmental_risk": risk.breakdown.get("environmental"),
                "social_risk": risk.breakdown.get("social"),
                "governance_risk": risk.breakdown.get("governance"),
                "overall_risk": risk.overall,
                "risk_level": risk.level,
                "esg_score": esg.overall_score,
                "esg_rating": esg.rating,
                "data_quality_score": validation.data_quality_score,
            })

        columns = [
            "company_id", "period", "environmental_risk", "social_risk", "governance_risk",
            "overall_risk", "risk_level", "esg_score", "esg_rating", "data_quality_score",
        ]
        return pd.DataFrame(rows, columns=columns)


def _period_year(period: Any) -> int | None:
    if isinstance(period, (int, np.integer)) and not isinstance(period, bool):
        return int(period)
    return None
