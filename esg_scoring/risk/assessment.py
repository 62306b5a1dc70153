"""Company-level risk assessments built from the rule tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..scoring.weighted_scorer import (
    DEFAULT_CATEGORY_WEIGHTS,
    round_half_up,
    weighted_mean,
    weighted_score,
)
from .rules import RiskDomain, classify_level, score_domain
from .tables import ESG_RISK_DOMAINS, MINING_RECOMMENDATIONS, MINING_RISK_DOMAINS, domains_from_config

RECOMMENDATION_CUTOFF = 60


@dataclass
class RiskAssessment:
    overall: int
    breakdown: dict[str, int]
    level: str
    recommendations: list[str] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "overall": self.overall,
            "breakdown": dict(self.breakdown),
            "level": self.level,
        }
        if self.recommendations is not None:
            out["recommendations"] = list(self.recommendations)
        return out


def assess_risk(
    inputs: Mapping[str, Any],
    domains: Mapping[str, RiskDomain],
    weights: Mapping[str, float],
    *,
    present_sources: set[str] | None = None,
) -> RiskAssessment:
    """Score every domain and combine the domain scores with ``weights``.

    The level is classified from the unrounded weighted mean: a mean of 40.3
    is "medium" although the reported overall rounds to 40.
    """
    breakdown = {
        name: score_domain(domain, inputs, present_sources=present_sources)
        for name, domain in domains.items()
    }
    mean = weighted_mean(breakdown, weights)
    return RiskAssessment(
        overall=weighted_score(breakdown, weights),
        breakdown=breakdown,
        level=classify_level(mean if mean is not None else 0.0),
    )


def assess_esg_risk(
    metrics: Mapping[str, Any],
    *,
    weights: Mapping[str, float] | None = None,
    config: Mapping[str, Any] | None = None,
) -> RiskAssessment:
    """Environmental, social and governance risk for one company's metrics.

    Parameters
    ----------
    metrics : Mapping[str, Any]
        Metric name -> value for the assessed period
    weights : Mapping[str, float] | None, optional
        Category weights (default: config ``category_weights`` or 0.4/0.3/0.3)
    config : Mapping[str, Any] | None, optional
        Scoring config; ``risk_rules.esg`` overrides the built-in rules
    """
    config = config or {}
    if weights is None:
        weights = config.get("category_weights", DEFAULT_CATEGORY_WEIGHTS)
    domains = domains_from_config(config, "esg", ESG_RISK_DOMAINS)
    return assess_risk(metrics, domains, weights)


def assess_mining_risk(
    tailings: Mapping[str, Any] | None = None,
    biodiversity: Mapping[str, Any] | None = None,
    community: Mapping[str, Any] | None = None,
    water: Mapping[str, Any] | None = None,
    *,
    config: Mapping[str, Any] | None = None,
) -> RiskAssessment:
    """Mining-specific risk across tailings, environmental, social and operational domains.

    Each argument is the latest record of that kind for the company, or
    ``None`` when nothing has been reported. Domains are equally weighted and
    any domain scoring above 60 adds a recommendation.
    """
    records = {
        "tailings": tailings,
        "biodiversity": biodiversity,
        "community": community,
        "water": water,
    }
    present = {name for name, record in records.items() if record is not None}
    inputs: dict[str, Any] = {}
    for record in records.values():
        if record is not None:
            inputs.update(record)

    domains = domains_from_config(config, "mining", MINING_RISK_DOMAINS)
    weights = {name: 1.0 for name in domains}
    result = assess_risk(inputs, domains, weights, present_sources=present)
    result.recommendations = [
        MINING_RECOMMENDATIONS.get(name, f"Review {name} risk controls")
        for name, score in result.breakdown.items()
        if score > RECOMMENDATION_CUTOFF
    ]
    return result


def rehabilitation_rate(biodiversity: Mapping[str, Any] | None) -> int:
    if not biodiversity or not biodiversity.get("total_land_disturbed"):
        return 0
    rehabilitated = biodiversity.get("land_rehabilitated") or 0
    return round_half_up(100 * rehabilitated / biodiversity["total_land_disturbed"])


def water_recycling_rate(water: Mapping[str, Any] | None) -> int:
    if not water or not water.get("water_withdrawal"):
        return 0
    recycled = water.get("water_recycled") or 0
    return round_half_up(100 * recycled / water["water_withdrawal"])


def mining_kpis(
    tailings: Mapping[str, Any] | None = None,
    biodiversity: Mapping[str, Any] | None = None,
    community: Mapping[str, Any] | None = None,
    water: Mapping[str, Any] | None = None,
) -> dict[str, dict[str, Any]]:
    """Dashboard summary of the latest mining records."""
    tailings = tailings or {}
    community = community or {}
    return {
        "tailingsManagement": {
            "facilities": tailings.get("facility_count") or 0,
            "riskLevel": tailings.get("risk_classification") or "unknown",
            "lastAssessment": tailings.get("created_at"),
        },
        "biodiversity": {
            "landDisturbed": (biodiversity or {}).get("total_land_disturbed") or 0,
            "landRehabilitated": (biodiversity or {}).get("land_rehabilitated") or 0,
            "rehabilitationRate": rehabilitation_rate(biodiversity),
        },
        "community": {
            "localEmployment": community.get("local_employment_rate") or 0,
            "communityInvestment": community.get("community_investment") or 0,
            "grievances": community.get("grievance_mechanism") or "not_implemented",
        },
        "water": {
            "withdrawal": (water or {}).get("water_withdrawal") or 0,
            "recyclingRate": water_recycling_rate(water),
            "qualityIncidents": (water or {}).get("water_quality_incidents") or 0,
        },
    }
