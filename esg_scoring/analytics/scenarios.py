"""TCFD climate scenario analysis."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..data_collection.data_quality import to_number

DEFAULT_SCENARIOS = ("1.5C", "2C", "3C")
FALLBACK_SCENARIO = "2C"
CARBON_PRICE = 50.0  # USD per tCO2e

SCENARIO_MULTIPLIERS = {
    "1.5C": {"physical": 1.2, "transition": 2.0},
    "2C": {"physical": 1.5, "transition": 1.5},
    "3C": {"physical": 2.5, "transition": 1.0},
}

TIME_HORIZONS = {"1.5C": "short", "2C": "medium"}


def scenario_multipliers(
    scenario: str,
    multipliers: Mapping[str, Mapping[str, float]] | None = None,
) -> Mapping[str, float]:
    multipliers = multipliers or SCENARIO_MULTIPLIERS
    return multipliers.get(scenario, multipliers[FALLBACK_SCENARIO])


def scenario_analysis(
    emissions: Mapping[str, Any],
    scenarios: Sequence[str] = DEFAULT_SCENARIOS,
    *,
    config: Mapping[str, Any] | None = None,
) -> dict[str, dict[str, Any]]:
    """Physical, transition and financial exposure under warming pathways.

    Parameters
    ----------
    emissions : Mapping[str, Any]
        ``scope1`` and ``scope2`` totals in tCO2e (missing -> 0)
    scenarios : Sequence[str]
        Scenario names; unknown names use the 2C multipliers
    config : Mapping[str, Any] | None, optional
        Scoring config; ``scenario_analysis.multipliers`` and
        ``scenario_analysis.carbon_price`` override the defaults
    """
    scenario_cfg = (config or {}).get("scenario_analysis", {})
    multipliers = scenario_cfg.get("multipliers", SCENARIO_MULTIPLIERS)
    carbon_price = float(scenario_cfg.get("carbon_price", CARBON_PRICE))

    scope1 = to_number(emissions.get("scope1"))
    scope2 = to_number(emissions.get("scope2"))

    results = {}
    for scenario in scenarios:
        m = scenario_multipliers(scenario, multipliers)
        results[scenario] = {
            "physicalRisk": scope1 * m["physical"],
            "transitionRisk": scope2 * m["transition"],
            "financialImpact": (scope1 + scope2) * m["transition"] * carbon_price,
            "timeHorizon": TIME_HORIZONS.get(scenario, "long"),
        }
    return results
