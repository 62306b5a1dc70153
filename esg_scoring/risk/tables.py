"""Built-in risk rule tables.

Thresholds and points are calibrated constants; changing them changes every
reported risk score. Deployments can replace any domain through the
``risk_rules`` section of the scoring config.
"""

from __future__ import annotations

from typing import Any, Mapping

from .rules import RiskDomain, RiskRule

ESG_RISK_DOMAINS: dict[str, RiskDomain] = {
    "environmental": RiskDomain(
        name="environmental",
        rules=(
            RiskRule("scope1Emissions", ">", 10000, 30),
            RiskRule("scope2Emissions", ">", 5000, 20),
            RiskRule("waterWithdrawal", ">", 100000, 25),
            RiskRule("wasteGenerated", ">", 1000, 25),
        ),
    ),
    "social": RiskDomain(
        name="social",
        rules=(
            RiskRule("lostTimeInjuryRate", ">", 5, 40),
            RiskRule("femaleEmployeesPercentage", "<", 20, 30),
            RiskRule("employeeTurnoverRate", ">", 20, 30),
        ),
    ),
    "governance": RiskDomain(
        name="governance",
        rules=(
            RiskRule("independentDirectorsPercentage", "<", 30, 35),
            RiskRule("dataBreachIncidents", ">", 0, 40),
            RiskRule("ethicsTrainingCompletion", "<", 80, 25),
        ),
    ),
}

MINING_RISK_DOMAINS: dict[str, RiskDomain] = {
    "tailings": RiskDomain(
        name="tailings",
        rules=(
            RiskRule("risk_classification", "==", "high", 40),
            RiskRule("risk_classification", "==", "extreme", 60),
            RiskRule("emergency_preparedness", "falsy", points=30),
            RiskRule("monitoring_frequency", "==", "annual", 20),
        ),
        default_when_missing=50,
        source="tailings",
    ),
    "environmental": RiskDomain(
        name="environmental",
        rules=(
            RiskRule("protected_areas_impact", ">", 0, 30),
            RiskRule("species_at_risk", ">", 5, 25),
            RiskRule("water_quality_incidents", ">", 2, 35),
            RiskRule("water_recycled", "ratio_below", 0.3, 10, denominator="water_withdrawal"),
        ),
    ),
    "social": RiskDomain(
        name="social",
        rules=(
            RiskRule("local_employment_rate", "<", 20, 25),
            RiskRule("resettlement_households", ">", 0, 30),
            RiskRule("indigenous_consultation", "falsy", points=35),
            RiskRule("grievance_mechanism", "==", "not_implemented", 10),
        ),
        default_when_missing=30,
        source="community",
    ),
    "operational": RiskDomain(
        name="operational",
        rules=(
            RiskRule("facility_count", ">", 5, 20),
            RiskRule("water_withdrawal", ">", 1000000, 15),
            RiskRule("total_land_disturbed", ">", 10000, 25),
            RiskRule("consultation_meetings", "<", 12, 10),
        ),
    ),
}

MINING_RECOMMENDATIONS = {
    "tailings": "Implement enhanced tailings monitoring and emergency response procedures",
    "environmental": "Develop comprehensive biodiversity management and water stewardship plans",
    "social": "Strengthen community engagement and indigenous consultation processes",
    "operational": "Review operational procedures and implement additional safety measures",
}


def domains_from_config(
    config: Mapping[str, Any] | None,
    table: str,
    defaults: Mapping[str, RiskDomain],
) -> dict[str, RiskDomain]:
    """Built-in domains for ``table`` with any configured overrides applied.

    A domain listed under ``risk_rules.<table>.<domain>`` in the config
    replaces the built-in domain of the same name; new names are appended.
    """
    domains = dict(defaults)
    overrides = ((config or {}).get("risk_rules") or {}).get(table) or {}
    for name, domain_cfg in overrides.items():
        domains[name] = RiskDomain.from_config(name, domain_cfg)
    return domains
