"""Benchmark-relative ESG scoring.

Each reported metric is mapped to a 30/50/70/90 band against an industry
median and top-quartile value, category scores are weighted sums of those
bands, and the overall score combines the categories with the standard
category weights.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..data_collection.data_quality import coerce_numeric
from .weighted_scorer import DEFAULT_CATEGORY_WEIGHTS, round_half_up, weighted_mean, weighted_score

NEUTRAL_SCORE = 50

DEFAULT_METRIC_MODELS: dict[str, dict[str, dict[str, Any]]] = {
    "environmental": {
        "ghgEmissions": {"weight": 0.25, "direction": "lower_better"},
        "energyIntensity": {"weight": 0.20, "direction": "lower_better"},
        "waterUsage": {"weight": 0.15, "direction": "lower_better"},
        "wasteGeneration": {"weight": 0.15, "direction": "lower_better"},
        "renewableEnergy": {"weight": 0.15, "direction": "higher_better"},
        "biodiversityImpact": {"weight": 0.10, "direction": "lower_better"},
    },
    "social": {
        "workplaceSafety": {"weight": 0.25, "direction": "lower_better"},
        "employeeDiversity": {"weight": 0.20, "direction": "higher_better"},
        "communityEngagement": {"weight": 0.20, "direction": "higher_better"},
        "humanRights": {"weight": 0.15, "direction": "higher_better"},
        "laborPractices": {"weight": 0.10, "direction": "higher_better"},
        "productSafety": {"weight": 0.10, "direction": "higher_better"},
    },
    "governance": {
        "boardDiversity": {"weight": 0.25, "direction": "higher_better"},
        "executiveCompensation": {"weight": 0.20, "direction": "balanced"},
        "businessEthics": {"weight": 0.20, "direction": "higher_better"},
        "riskManagement": {"weight": 0.15, "direction": "higher_better"},
        "transparency": {"weight": 0.10, "direction": "higher_better"},
        "cybersecurity": {"weight": 0.10, "direction": "higher_better"},
    },
}

DEFAULT_INDUSTRY_BENCHMARKS: dict[str, dict[str, dict[str, Any]]] = {
    "mining": {
        "ghgEmissions": {"median": 2.5, "top25": 1.8, "unit": "tCO2e/M$"},
        "workplaceSafety": {"median": 3.2, "top25": 1.5, "unit": "LTIFR"},
        "boardDiversity": {"median": 25, "top25": 40, "unit": "%"},
    },
    "manufacturing": {
        "ghgEmissions": {"median": 1.8, "top25": 1.2, "unit": "tCO2e/M$"},
        "workplaceSafety": {"median": 2.1, "top25": 0.8, "unit": "LTIFR"},
        "boardDiversity": {"median": 30, "top25": 45, "unit": "%"},
    },
}

DEFAULT_INDUSTRY = "mining"

RATING_BANDS = [(80, "AAA"), (70, "AA"), (60, "A"), (50, "BBB"), (40, "BB"), (30, "B")]


def normalize_metric_score(value: float, benchmark: Mapping[str, float], direction: str) -> int:
    """Map a metric value to a 30/50/70/90 band relative to its industry benchmark.

    Parameters
    ----------
    value : float
        Reported metric value
    benchmark : Mapping[str, float]
        Industry benchmark with ``median`` and ``top25`` keys
    direction : str
        "lower_better", "higher_better" or "balanced" (distance from the median)
    """
    median = benchmark["median"]
    top25 = benchmark["top25"]

    if direction == "lower_better":
        if value <= top25:
            return 90
        if value <= median:
            return 70
        if value <= median * 1.5:
            return 50
        return 30
    if direction == "higher_better":
        if value >= top25:
            return 90
        if value >= median:
            return 70
        if value >= median * 0.7:
            return 50
        return 30
    if direction == "balanced":
        if median == 0:
            return NEUTRAL_SCORE
        deviation = abs(value - median) / median
        if deviation <= 0.1:
            return 90
        if deviation <= 0.2:
            return 70
        if deviation <= 0.3:
            return 50
        return 30
    raise ValueError(f"Unknown benchmark direction: {direction}")


def esg_rating(score: float) -> str:
    for cutoff, rating in RATING_BANDS:
        if score >= cutoff:
            return rating
    return "CCC"


def category_performance(score: float) -> str:
    if score >= 75:
        return "Leading"
    if score >= 60:
        return "Above Average"
    if score >= 40:
        return "Average"
    return "Below Average"


@dataclass
class MetricScore:
    value: float
    normalized_score: int
    weight: float

    @property
    def contribution(self) -> float:
        return self.normalized_score * self.weight


@dataclass
class CategoryResult:
    category: str
    score: int
    raw_score: float
    metrics: dict[str, MetricScore] = field(default_factory=dict)

    @property
    def performance(self) -> str:
        return category_performance(self.raw_score)

    def weakest_metric(self) -> str | None:
        weakest = None
        lowest = 100
        for name, metric in self.metrics.items():
            if metric.normalized_score < lowest:
                lowest = metric.normalized_score
                weakest = name
        return weakest

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "performance": self.performance,
            "metrics": {
                name: {
                    "value": m.value,
                    "normalizedScore": m.normalized_score,
                    "weight": m.weight,
                    "contribution": m.contribution,
                }
                for name, m in self.metrics.items()
            },
        }


@dataclass
class BenchmarkScore:
    company_id: str | None
    industry: str
    overall_score: int
    rating: str
    categories: dict[str, CategoryResult]
    recommendations: list[dict[str, str]]
    risks: list[dict[str, str]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "companyId": self.company_id,
            "industry": self.industry,
            "overallScore": self.overall_score,
            "rating": self.rating,
            "categoryScores": {name: c.to_dict() for name, c in self.categories.items()},
            "recommendations": self.recommendations,
            "riskAssessment": self.risks,
        }


class BenchmarkScorer:
    """Score companies against industry benchmarks."""

    def __init__(self, config: dict[str, Any] | None = None):
        """Initialize with scoring configuration.

        Parameters
        ----------
        config : dict[str, Any] | None
            Full scoring config (from scoring_config.yaml); the
            ``category_weights`` and ``benchmark_scoring`` sections are used
        """
        config = config or {}
        self.category_weights = config.get("category_weights", DEFAULT_CATEGORY_WEIGHTS)
        bench_cfg = config.get("benchmark_scoring", {})
        self.metric_models = bench_cfg.get("metric_models", DEFAULT_METRIC_MODELS)
        self.industry_benchmarks = bench_cfg.get("industry_benchmarks", DEFAULT_INDUSTRY_BENCHMARKS)
        self.default_industry = bench_cfg.get("default_industry", DEFAULT_INDUSTRY)

    def benchmarks_for(self, industry: str) -> dict[str, dict[str, Any]]:
        if industry in self.industry_benchmarks:
            return self.industry_benchmarks[industry]
        return self.industry_benchmarks.get(self.default_industry, {})

    def score_category(
        self,
        category: str,
        metrics: Mapping[str, float],
        benchmarks: Mapping[str, Mapping[str, float]],
    ) -> CategoryResult:
        model = self.metric_models.get(category, {})
        result = CategoryResult(category=category, score=0, raw_score=0.0)

        total = 0.0
        for metric, metric_cfg in model.items():
            value = metrics.get(metric, 0.0)
            weight = float(metric_cfg.get("weight", 0.0))
            benchmark = benchmarks.get(metric)
            normalized = NEUTRAL_SCORE
            if benchmark:
                normalized = normalize_metric_score(value, benchmark, metric_cfg.get("direction", ""))
            result.metrics[metric] = MetricScore(value=value, normalized_score=normalized, weight=weight)
            total += normalized * weight

        result.raw_score = total
        result.score = round_half_up(total)
        return result

    def score(
        self,
        metrics: Mapping[str, Any],
        *,
        industry: str | None = None,
        company_id: str | None = None,
    ) -> BenchmarkScore:
        industry = industry or self.default_industry
        benchmarks = self.benchmarks_for(industry)

        model_metrics = [m for model in self.metric_models.values() for m in model]
        values = coerce_numeric(
            {k: v for k, v in metrics.items() if k in model_metrics}, context="benchmark metrics"
        )

        categories = {
            category: self.score_category(category, values, benchmarks)
            for category in self.metric_models
        }
        category_scores = {name: c.score for name, c in categories.items()}
        overall = weighted_mean(category_scores, self.category_weights) or 0.0

        return BenchmarkScore(
            company_id=company_id,
            industry=industry,
            overall_score=weighted_score(category_scores, self.category_weights),
            rating=esg_rating(overall),
            categories=categories,
            recommendations=self.recommendations(categories),
            risks=self.risk_flags(categories),
        )

    @staticmethod
    def recommendations(categories: Mapping[str, CategoryResult]) -> list[dict[str, str]]:
        recs = []
        env = categories.get("environmental")
        if env is not None and env.score < 60:
            recs.append({
                "category": "Environmental",
                "priority": "High",
                "action": f"Improve {env.weakest_metric()} performance through targeted initiatives",
                "impact": "Could increase overall ESG score by 5-8 points",
            })
        social = categories.get("social")
        if social is not None and social.score < 60:
            recs.append({
                "category": "Social",
                "priority": "Medium",
                "action": "Enhance workplace safety programs and diversity initiatives",
                "impact": "Could improve social score by 10-15 points",
            })
        gov = categories.get("governance")
        if gov is not None and gov.score < 60:
            recs.append({
                "category": "Governance",
                "priority": "Medium",
                "action": "Strengthen board diversity and risk management frameworks",
                "impact": "Could enhance governance score by 8-12 points",
            })
        return recs

    @staticmethod
    def risk_flags(categories: Mapping[str, CategoryResult]) -> list[dict[str, str]]:
        flags = []
        env = categories.get("environmental")
        if env is not None and env.score < 40:
            flags.append({
                "type": "Environmental",
                "level": "High",
                "description": "Significant environmental compliance and reputation risks",
                "mitigation": "Implement comprehensive environmental management system",
            })
        social = categories.get("social")
        if social is not None and social.score < 40:
            flags.append({
                "type": "Social",
                "level": "Medium",
                "description": "Workforce and community relation challenges",
                "mitigation": "Enhance stakeholder engagement and safety protocols",
            })
        gov = categories.get("governance")
        if gov is not None and gov.score < 40:
            flags.append({
                "type": "Governance",
                "level": "High",
                "description": "Corporate governance and oversight deficiencies",
                "mitigation": "Strengthen board oversight and transparency measures",
            })
        return flags
