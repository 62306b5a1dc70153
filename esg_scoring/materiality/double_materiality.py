"""Double materiality assessment.

A topic is assessed on two dimensions: its impact on people and the
environment, and its effect on the company's finances. Both are scored 0-100
from four sub-factors. The impact dimension adds likelihood as a weighted
term while the financial dimension scales its weighted sum by likelihood.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from ..data_collection.data_quality import to_number

MATERIALITY_THRESHOLD = 50
HIGH_DIMENSION_SCORE = 75
NEUTRAL_FACTOR = 50

IMPACT_WEIGHTS = {"scale": 0.4, "scope": 0.3, "irremediability": 0.2, "likelihood": 0.1}
FINANCIAL_WEIGHTS = {"revenue": 0.3, "cost": 0.3, "asset": 0.2, "liability": 0.2}

LIKELIHOOD_SCORES = {"certain": 100, "high": 75, "medium": 50, "low": 25, "rare": 10}
IRREMEDIABILITY_SCORES = {"irreversible": 100, "difficult": 75, "medium": 50, "easy": 25, "reversible": 0}

# (minimum percentage, score), checked in order
SCOPE_BANDS = [(75, 100), (50, 75), (25, 50), (10, 25)]
FLOW_IMPACT_BANDS = [(10, 100), (5, 75), (2, 50), (1, 25)]
BALANCE_IMPACT_BANDS = [(5, 100), (2, 75), (1, 50), (0.5, 25)]
FLOOR_BAND_SCORE = 10


def _banded(percentage: float, bands: Sequence[tuple[float, int]]) -> int:
    for minimum, score in bands:
        if percentage >= minimum:
            return score
    return FLOOR_BAND_SCORE


def _factor(data: Mapping[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    return default if value is None else to_number(value)


def _percentage(impact: Any, total: Any) -> float:
    total = to_number(total) or 1.0
    return abs(to_number(impact) / total * 100)


def likelihood_score(likelihood: str | None) -> int:
    return LIKELIHOOD_SCORES.get(likelihood or "medium", NEUTRAL_FACTOR)


def materiality_level(score: float) -> str:
    if score >= 75:
        return "very-high"
    if score >= 50:
        return "high"
    if score >= 25:
        return "medium"
    return "low"


def priority_for(impact_score: float, financial_score: float) -> str:
    """Priority from the simple average of the two dimension scores."""
    average = (impact_score + financial_score) / 2
    if average >= 75:
        return "critical"
    if average >= 50:
        return "high"
    if average >= 25:
        return "medium"
    return "low"


# ----------------------------------------------------------------------
# Impact materiality
# ----------------------------------------------------------------------
def impact_scale(data: Mapping[str, Any]) -> float:
    """Mean of severity, magnitude and duration (each 0-100, 50 when not reported)."""
    return (
        _factor(data, "severity", NEUTRAL_FACTOR)
        + _factor(data, "magnitude", NEUTRAL_FACTOR)
        + _factor(data, "duration", NEUTRAL_FACTOR)
    ) / 3


def impact_scope(data: Mapping[str, Any]) -> int:
    """Share of the population affected, banded to 10/25/50/75/100."""
    return _banded(_percentage(data.get("peopleAffected"), data.get("totalPopulation")), SCOPE_BANDS)


def irremediability_score(remediability: str | None) -> int:
    return IRREMEDIABILITY_SCORES.get(remediability or "medium", NEUTRAL_FACTOR)


def impact_score(scale: float, scope: float, irremediability: float, likelihood: float) -> float:
    return (
        scale * IMPACT_WEIGHTS["scale"]
        + scope * IMPACT_WEIGHTS["scope"]
        + irremediability * IMPACT_WEIGHTS["irremediability"]
        + likelihood * IMPACT_WEIGHTS["likelihood"]
    )


@dataclass
class ImpactAssessment:
    topic: str
    impact_type: str | None
    scale: float
    scope: int
    irremediability: int
    likelihood: str
    overall_score: float

    @property
    def materiality_level(self) -> str:
        return materiality_level(self.overall_score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "impactType": self.impact_type,
            "scale": self.scale,
            "scope": self.scope,
            "irremediability": self.irremediability,
            "likelihood": self.likelihood,
            "overallScore": self.overall_score,
            "materialityLevel": self.materiality_level,
        }


def assess_impact_materiality(topic: str, data: Mapping[str, Any]) -> ImpactAssessment:
    scale = impact_scale(data)
    scope = impact_scope(data)
    irremediability = irremediability_score(data.get("remediability"))
    likelihood = data.get("likelihood") or "medium"
    return ImpactAssessment(
        topic=topic,
        impact_type=data.get("impactType"),
        scale=scale,
        scope=scope,
        irremediability=irremediability,
        likelihood=likelihood,
        overall_score=impact_score(scale, scope, irremediability, likelihood_score(likelihood)),
    )


# ----------------------------------------------------------------------
# Financial materiality
# ----------------------------------------------------------------------
def financial_score(
    revenue: float,
    cost: float,
    asset: float,
    liability: float,
    likelihood: float,
) -> float:
    """Weighted financial impact scaled by likelihood (0-100) as a multiplier."""
    weighted = (
        revenue * FINANCIAL_WEIGHTS["revenue"]
        + cost * FINANCIAL_WEIGHTS["cost"]
        + asset * FINANCIAL_WEIGHTS["asset"]
        + liability * FINANCIAL_WEIGHTS["liability"]
    )
    return weighted * (likelihood / 100)


@dataclass
class FinancialAssessment:
    topic: str
    revenue_impact: int
    cost_impact: int
    asset_impact: int
    liability_impact: int
    time_horizon: str
    likelihood: str
    overall_score: float

    @property
    def materiality_level(self) -> str:
        return materiality_level(self.overall_score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "revenueImpact": self.revenue_impact,
            "costImpact": self.cost_impact,
            "assetImpact": self.asset_impact,
            "liabilityImpact": self.liability_impact,
            "timeHorizon": self.time_horizon,
            "likelihood": self.likelihood,
            "overallScore": self.overall_score,
            "materialityLevel": self.materiality_level,
        }


def assess_financial_materiality(topic: str, data: Mapping[str, Any]) -> FinancialAssessment:
    revenue = _banded(_percentage(data.get("revenueImpact"), data.get("totalRevenue")), FLOW_IMPACT_BANDS)
    cost = _banded(_percentage(data.get("costImpact"), data.get("totalCosts")), FLOW_IMPACT_BANDS)
    asset = _banded(_percentage(data.get("assetImpact"), data.get("totalAssets")), BALANCE_IMPACT_BANDS)
    liability = _banded(
        _percentage(data.get("liabilityImpact"), data.get("totalLiabilities")), BALANCE_IMPACT_BANDS
    )
    likelihood = data.get("likelihood") or "medium"
    return FinancialAssessment(
        topic=topic,
        revenue_impact=revenue,
        cost_impact=cost,
        asset_impact=asset,
        liability_impact=liability,
        time_horizon=data.get("timeHorizon") or "medium-term",
        likelihood=likelihood,
        overall_score=financial_score(revenue, cost, asset, liability, likelihood_score(likelihood)),
    )


# ----------------------------------------------------------------------
# Double materiality
# ----------------------------------------------------------------------
@dataclass
class MaterialityAssessment:
    topic: str
    impact_score: float
    financial_score: float
    is_material: bool
    priority: str
    recommendation: list[str] = field(default_factory=list)
    impact: ImpactAssessment | None = None
    financial: FinancialAssessment | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "impactMateriality": self.impact.to_dict() if self.impact else self.impact_score,
            "financialMateriality": self.financial.to_dict() if self.financial else self.financial_score,
            "isMaterial": self.is_material,
            "priority": self.priority,
            "recommendation": list(self.recommendation),
        }


def recommendations_for(impact_score: float, financial_score: float) -> list[str]:
    recs = []
    if impact_score >= HIGH_DIMENSION_SCORE:
        recs.append("High impact materiality - immediate action required")
    if financial_score >= HIGH_DIMENSION_SCORE:
        recs.append("High financial materiality - significant business impact")
    if impact_score >= MATERIALITY_THRESHOLD and financial_score >= MATERIALITY_THRESHOLD:
        recs.append("Material on both dimensions - priority topic for disclosure")
    if not recs:
        recs.append("Monitor and reassess periodically")
    return recs


def combine(topic: str, impact_score: float, financial_score: float) -> MaterialityAssessment:
    """Combine the two dimension scores of a topic.

    A topic is material when either dimension reaches 50.
    """
    return MaterialityAssessment(
        topic=topic,
        impact_score=impact_score,
        financial_score=financial_score,
        is_material=impact_score >= MATERIALITY_THRESHOLD or financial_score >= MATERIALITY_THRESHOLD,
        priority=priority_for(impact_score, financial_score),
        recommendation=recommendations_for(impact_score, financial_score),
    )


def assess_double_materiality(
    topic: str,
    impact_data: Mapping[str, Any],
    financial_data: Mapping[str, Any],
) -> MaterialityAssessment:
    impact = assess_impact_materiality(topic, impact_data)
    financial = assess_financial_materiality(topic, financial_data)
    result = combine(topic, impact.overall_score, financial.overall_score)
    result.impact = impact
    result.financial = financial
    return result


def materiality_matrix(assessments: Sequence[MaterialityAssessment]) -> list[dict[str, Any]]:
    """Plot points: financial score on x, impact score on y."""
    return [
        {
            "topic": a.topic,
            "x": a.financial_score,
            "y": a.impact_score,
            "priority": a.priority,
            "isMaterial": a.is_material,
        }
        for a in assessments
    ]


def materiality_report(
    assessments: Sequence[MaterialityAssessment],
    *,
    as_of: datetime | None = None,
) -> dict[str, Any]:
    as_of = as_of or datetime.now(timezone.utc)
    material = [a for a in assessments if a.is_material]
    critical = [a for a in assessments if a.priority == "critical"]
    return {
        "summary": {
            "totalTopics": len(assessments),
            "materialTopics": len(material),
            "criticalTopics": len(critical),
            "assessmentDate": as_of.isoformat(),
        },
        "materialTopics": [
            {
                "topic": a.topic,
                "priority": a.priority,
                "impactScore": a.impact_score,
                "financialScore": a.financial_score,
                "recommendations": list(a.recommendation),
            }
            for a in material
        ],
        "matrix": materiality_matrix(assessments),
    }


def stakeholder_survey(
    topic: str,
    stakeholder_group: str,
    responses: Sequence[Mapping[str, Any]],
) -> dict[str, Any] | None:
    """Average importance and concern (0-100) across survey responses.

    Returns ``None`` when there are no responses.
    """
    if not responses:
        return None
    importance = sum(to_number(r.get("importance")) for r in responses) / len(responses)
    concern = sum(to_number(r.get("concern")) for r in responses) / len(responses)
    return {
        "topic": topic,
        "stakeholderGroup": stakeholder_group,
        "importance": importance,
        "concern": concern,
        "responseCount": len(responses),
        "averageScore": (importance + concern) / 2,
    }
