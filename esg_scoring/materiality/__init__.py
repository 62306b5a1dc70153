"""Double Materiality Assessment Module."""

from .double_materiality import (
    MaterialityAssessment,
    assess_double_materiality,
    assess_financial_materiality,
    assess_impact_materiality,
    combine,
    financial_score,
    impact_score,
    materiality_matrix,
    materiality_report,
    stakeholder_survey,
)

__all__ = [
    "MaterialityAssessment",
    "assess_double_materiality",
    "assess_financial_materiality",
    "assess_impact_materiality",
    "combine",
    "financial_score",
    "impact_score",
    "materiality_matrix",
    "materiality_report",
    "stakeholder_survey",
]
