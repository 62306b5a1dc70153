import pytest

from esg_scoring.validation.expressions import (
    BinOp,
    Call,
    Compare,
    Const,
    FormulaError,
    Var,
    evaluate,
    parse_expression,
    variables,
)
from esg_scoring.validation.validator import (
    ValidationRule,
    load_validation_rules,
    validate_cross_metrics,
    validate_esg_data,
)


class TestExpressions:
    def test_parse_comparison(self):
        node = parse_expression({"op": ">=", "args": ["value", 0]})
        assert node == Compare(">=", Var("value"), Const(0.0))

    def test_parse_nested_call(self):
        node = parse_expression({"op": "abs", "args": [{"op": "-", "args": ["value", 100]}]})
        assert node == Call("abs", (BinOp("-", Var("value"), Const(100.0)),))
        assert evaluate(node, {"value": 40}) == 60

    def test_boolean_operators(self):
        node = parse_expression({
            "op": "and",
            "args": [{"op": ">", "args": ["value", 0]}, {"op": "not", "args": [{"op": ">", "args": ["value", 10]}]}],
        })
        assert evaluate(node, {"value": 5}) is True
        assert evaluate(node, {"value": 50}) is False

    def test_round_is_half_up(self):
        node = parse_expression({"op": "round", "args": [2.5]})
        assert evaluate(node, {}) == 3

    @pytest.mark.parametrize(
        "func,args,expected",
        [("min", ["value"], 5), ("max", ["value"], 5), ("min", ["value", 2, 9], 2), ("max", ["value", 2, 9], 9)],
    )
    def test_min_max_accept_any_argument_count(self, func, args, expected):
        node = parse_expression({"op": func, "args": args})
        assert evaluate(node, {"value": 5}) == expected

    def test_single_argument_min_in_rule(self):
        rule = ValidationRule(
            "scope1Emissions",
            formula=parse_expression({"op": ">=", "args": [{"op": "min", "args": ["value"]}, 0]}),
        )
        result = validate_esg_data({"scope1Emissions": 5}, [rule])
        assert result.is_valid is True
        assert result.warnings == []

    def test_variables(self):
        node = parse_expression({"op": "<=", "args": ["value", {"op": "+", "args": ["scope1Emissions", "scope2Emissions"]}]})
        assert variables(node) == {"value", "scope1Emissions", "scope2Emissions"}

    @pytest.mark.parametrize(
        "expr",
        [
            {"op": "__import__", "args": ["os"]},
            {"op": ">", "args": ["value"]},
            {"op": "not", "args": [1, 2]},
            {"op": "abs", "args": [1, 2]},
            {"args": [1]},
            [1, 2],
        ],
    )
    def test_rejects_invalid_expressions(self, expr):
        with pytest.raises(ValueError):
            parse_expression(expr)

    def test_unknown_variable(self):
        with pytest.raises(FormulaError):
            evaluate(Var("missing"), {"value": 1})

    def test_division_by_zero(self):
        node = parse_expression({"op": "/", "args": ["value", 0]})
        with pytest.raises(FormulaError):
            evaluate(node, {"value": 1})


class TestValidateEsgData:
    def test_shipped_rules(self, config):
        rules = load_validation_rules(config)
        assert len(rules) == 5
        assert {r.metric_name for r in rules} >= {"femaleEmployeesPercentage", "scope3Emissions"}

    def test_inactive_rules_skipped(self):
        config = {
            "validation_rules": [
                {"metric_name": "scope1Emissions", "min_value": 0},
                {"metric_name": "scope2Emissions", "min_value": 0, "active": False},
            ]
        }
        assert [r.metric_name for r in load_validation_rules(config)] == ["scope1Emissions"]

    def test_out_of_range(self, config):
        result = validate_esg_data({"femaleEmployeesPercentage": 120}, load_validation_rules(config))
        assert result.is_valid is False
        assert result.errors == ["femaleEmployeesPercentage: Value 120 above maximum 100"]
        assert result.data_quality_score == 90

    def test_below_minimum(self, config):
        result = validate_esg_data({"scope1Emissions": -5}, load_validation_rules(config))
        assert result.errors == ["scope1Emissions: Value -5 below minimum 0"]

    def test_valid_data(self, config):
        data = {"scope1Emissions": 1000, "scope2Emissions": 500, "scope3Emissions": 4000, "totalEmployees": 250}
        result = validate_esg_data(data, load_validation_rules(config))
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.data_quality_score == 100

    def test_formula_failure_uses_rule_message(self, config):
        data = {"scope1Emissions": 1000, "scope3Emissions": 500}
        result = validate_esg_data(data, load_validation_rules(config))
        assert "scope3Emissions: Scope 3 emissions below Scope 1" in result.errors

    def test_formula_failure_default_message(self):
        rule = ValidationRule("totalEmployees", formula=parse_expression({"op": ">", "args": ["value", 100]}))
        result = validate_esg_data({"totalEmployees": 50}, [rule])
        assert result.errors == ["totalEmployees: Failed validation"]

    def test_whole_number_rule(self, config):
        result = validate_esg_data({"totalEmployees": 12.5}, load_validation_rules(config))
        assert result.errors == ["totalEmployees: Employee count must be a whole number"]

    def test_formula_error_is_a_warning(self):
        rule = ValidationRule("scope1Emissions", formula=parse_expression({"op": ">", "args": ["unknownMetric", 0]}))
        with pytest.warns(UserWarning):
            result = validate_esg_data({"scope1Emissions": 5}, [rule])
        assert result.is_valid is True
        assert result.warnings == ["scope1Emissions: Validation formula error"]
        assert result.data_quality_score == 100

    def test_metrics_without_rule_not_checked(self):
        result = validate_esg_data({"anything": -100}, [])
        assert result.is_valid is True

    def test_json_shape(self):
        data = validate_esg_data({}, []).to_dict()
        assert data == {"isValid": True, "errors": [], "warnings": [], "dataQualityScore": 100}


class TestCrossMetrics:
    def test_low_scope3(self):
        found = validate_cross_metrics({"scope1Emissions": 1000, "scope2Emissions": 1000, "scope3Emissions": 100})
        assert found == ["Scope 3 emissions seem unusually low compared to Scope 1+2"]

    def test_small_workforce(self):
        found = validate_cross_metrics({"femaleEmployeesPercentage": 40, "totalEmployees": 5})
        assert found == ["Small employee count may affect diversity metrics reliability"]

    def test_warnings_reduce_quality_score(self):
        data = {
            "scope1Emissions": 1000,
            "scope2Emissions": 1000,
            "scope3Emissions": 100,
            "femaleEmployeesPercentage": 40,
            "totalEmployees": 5,
            "ethicsTrainingCompletion": None,
        }
        result = validate_esg_data(data, [])
        assert result.is_valid is True
        assert len(result.warnings) == 2
        # 100 - 2 * 5 + 10 * 5/6
        assert result.data_quality_score == 98
