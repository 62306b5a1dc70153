"""Rule-based ESG and mining risk classification."""

from .assessment import RiskAssessment, assess_esg_risk, assess_mining_risk, assess_risk, mining_kpis
from .rules import RiskDomain, RiskRule, classify_level, score_domain
from .tables import ESG_RISK_DOMAINS, MINING_RISK_DOMAINS

__all__ = [
    "ESG_RISK_DOMAINS",
    "MINING_RISK_DOMAINS",
    "RiskAssessment",
    "RiskDomain",
    "RiskRule",
    "assess_esg_risk",
    "assess_mining_risk",
    "assess_risk",
    "classify_level",
    "mining_kpis",
    "score_domain",
]
