import pytest

from esg_scoring.risk.assessment import assess_esg_risk, assess_mining_risk, mining_kpis
from esg_scoring.risk.rules import RiskDomain, RiskRule, classify_level, score_domain
from esg_scoring.risk.tables import ESG_RISK_DOMAINS, MINING_RISK_DOMAINS


class TestRiskRules:
    def test_emissions_and_water_scenario(self):
        inputs = {"scope1Emissions": 15000, "waterWithdrawal": 150000}
        env = score_domain(ESG_RISK_DOMAINS["environmental"], inputs)
        assert env == 55
        assert classify_level(env) == "medium"

    def test_missing_metric_never_fires_comparison(self):
        assert score_domain(ESG_RISK_DOMAINS["social"], {}) == 0
        assert score_domain(ESG_RISK_DOMAINS["governance"], {"dataBreachIncidents": None}) == 0

    def test_points_clamped_to_100(self):
        domain = RiskDomain(
            name="test",
            rules=(RiskRule("a", ">", 0, 60), RiskRule("b", ">", 0, 60)),
        )
        assert score_domain(domain, {"a": 1, "b": 1}) == 100

    def test_all_social_rules(self):
        inputs = {"lostTimeInjuryRate": 6, "femaleEmployeesPercentage": 10, "employeeTurnoverRate": 25}
        assert score_domain(ESG_RISK_DOMAINS["social"], inputs) == 100

    @pytest.mark.parametrize(
        "domain,rule",
        [
            (name, rule)
            for name, domain in ESG_RISK_DOMAINS.items()
            for rule in domain.rules
            if rule.op == ">"
        ],
    )
    def test_raising_metric_past_threshold_never_lowers_risk(self, domain, rule):
        base = {"femaleEmployeesPercentage": 50, "independentDirectorsPercentage": 50}
        below = score_domain(ESG_RISK_DOMAINS[domain], {**base, rule.metric: rule.threshold})
        above = score_domain(ESG_RISK_DOMAINS[domain], {**base, rule.metric: rule.threshold + 1})
        assert above >= below
        assert above - below == rule.points

    def test_numeric_strings_are_compared_as_numbers(self):
        assert score_domain(ESG_RISK_DOMAINS["environmental"], {"scope1Emissions": "15000"}) == 30

    def test_non_numeric_input_treated_as_zero(self):
        with pytest.warns(UserWarning, match="femaleEmployeesPercentage"):
            score = score_domain(ESG_RISK_DOMAINS["social"], {"femaleEmployeesPercentage": "n/a"})
        assert score == 30

    def test_ratio_rule_needs_non_zero_denominator(self):
        env = MINING_RISK_DOMAINS["environmental"]
        assert score_domain(env, {"water_recycled": 10, "water_withdrawal": 100}) == 10
        assert score_domain(env, {"water_recycled": 10, "water_withdrawal": 0}) == 0
        assert score_domain(env, {"water_withdrawal": 100}) == 0

    def test_unknown_operator_rejected(self):
        with pytest.raises(ValueError):
            RiskRule("a", "~", 1, 10)

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError):
            RiskRule("a", ">", 1, -10)

    def test_ratio_rule_requires_denominator(self):
        with pytest.raises(ValueError):
            RiskRule("a", "ratio_below", 0.3, 10)

    @pytest.mark.parametrize(
        "cfg",
        [
            {"metric": "m", "op": ">", "points": 10},
            {"metric": "m", "op": "ratio_below", "denominator": "d", "points": 10},
        ],
    )
    def test_configured_rule_requires_threshold(self, cfg):
        with pytest.raises(ValueError, match="threshold"):
            RiskDomain.from_config("custom", {"rules": [cfg]})

    def test_falsy_rule_needs_no_threshold(self):
        domain = RiskDomain.from_config("custom", {"rules": [{"metric": "m", "op": "falsy", "points": 10}]})
        assert score_domain(domain, {}) == 10

    @pytest.mark.parametrize(
        "score,level",
        [(0, "low"), (40, "low"), (41, "medium"), (70, "medium"), (70.5, "high"), (100, "high")],
    )
    def test_classify_level(self, score, level):
        assert classify_level(score) == level


class TestEsgRisk:
    def test_breakdown_and_overall(self):
        result = assess_esg_risk({"scope1Emissions": 15000, "waterWithdrawal": 150000})
        assert result.breakdown == {"environmental": 55, "social": 0, "governance": 0}
        assert result.overall == 22
        assert result.level == "low"

    def test_json_shape(self):
        data = assess_esg_risk({"dataBreachIncidents": 3}).to_dict()
        assert set(data) == {"overall", "breakdown", "level"}
        assert data["breakdown"]["governance"] == 40

    def test_high_risk_company(self):
        metrics = {
            "scope1Emissions": 20000,
            "scope2Emissions": 9000,
            "waterWithdrawal": 200000,
            "wasteGenerated": 5000,
            "lostTimeInjuryRate": 7,
            "femaleEmployeesPercentage": 12,
            "employeeTurnoverRate": 30,
            "independentDirectorsPercentage": 10,
            "dataBreachIncidents": 2,
            "ethicsTrainingCompletion": 50,
        }
        result = assess_esg_risk(metrics)
        assert result.overall == 100
        assert result.level == "high"

    def test_rule_override_from_config(self):
        config = {
            "risk_rules": {
                "esg": {
                    "environmental": {
                        "rules": [{"metric": "scope1Emissions", "op": ">", "threshold": 8000, "points": 50}]
                    }
                }
            }
        }
        result = assess_esg_risk({"scope1Emissions": 9000}, config=config)
        assert result.breakdown["environmental"] == 50

    def test_weights_from_config(self):
        config = {"category_weights": {"environmental": 1.0, "social": 0.0, "governance": 0.0}}
        result = assess_esg_risk({"scope1Emissions": 15000}, config=config)
        assert result.overall == 30


class TestMiningRisk:
    def test_no_records_use_default_risks(self):
        result = assess_mining_risk()
        assert result.breakdown == {"tailings": 50, "environmental": 0, "social": 30, "operational": 0}
        assert result.overall == 20
        assert result.level == "low"
        assert result.recommendations == []

    def test_high_risk_site(self):
        tailings = {
            "risk_classification": "extreme",
            "emergency_preparedness": False,
            "monitoring_frequency": "annual",
            "facility_count": 7,
        }
        water = {"water_withdrawal": 2_000_000, "water_recycled": 100_000, "water_quality_incidents": 3}
        community = {
            "local_employment_rate": 10,
            "resettlement_households": 12,
            "indigenous_consultation": False,
            "grievance_mechanism": "not_implemented",
            "consultation_meetings": 4,
        }
        result = assess_mining_risk(tailings=tailings, community=community, water=water)

        assert result.breakdown == {"tailings": 100, "environmental": 45, "social": 100, "operational": 45}
        assert result.overall == 73
        assert result.level == "high"
        assert result.recommendations == [
            "Implement enhanced tailings monitoring and emergency response procedures",
            "Strengthen community engagement and indigenous consultation processes",
        ]
        assert "recommendations" in result.to_dict()

    def test_well_managed_tailings_score_zero(self):
        tailings = {
            "risk_classification": "low",
            "emergency_preparedness": True,
            "monitoring_frequency": "monthly",
        }
        result = assess_mining_risk(tailings=tailings)
        assert result.breakdown["tailings"] == 0

    def test_kpis(self):
        kpis = mining_kpis(
            biodiversity={"total_land_disturbed": 200, "land_rehabilitated": 50},
            water={"water_withdrawal": 1000, "water_recycled": 250},
        )
        assert kpis["biodiversity"]["rehabilitationRate"] == 25
        assert kpis["water"]["recyclingRate"] == 25
        assert kpis["tailingsManagement"]["riskLevel"] == "unknown"
        assert kpis["community"]["grievances"] == "not_implemented"
