"""ESG data validation against operator-configured rules."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ..data_collection.data_quality import to_number
from ..scoring.weighted_scorer import round_half_up
from .expressions import Expr, FormulaError, evaluate, parse_expression

FORMULA_VARIABLES = [
    "scope1Emissions",
    "scope2Emissions",
    "scope3Emissions",
    "totalEmployees",
    "femaleEmployeesPercentage",
]

ERROR_PENALTY = 20
WARNING_PENALTY = 5
COMPLETENESS_BONUS = 10


@dataclass(frozen=True)
class ValidationRule:
    metric_name: str
    min_value: float | None = None
    max_value: float | None = None
    formula: Expr | None = None
    error_message: str | None = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> ValidationRule:
        formula = cfg.get("formula")
        return cls(
            metric_name=cfg["metric_name"],
            min_value=cfg.get("min_value"),
            max_value=cfg.get("max_value"),
            formula=parse_expression(formula) if formula is not None else None,
            error_message=cfg.get("error_message"),
        )


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    data_quality_score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "dataQualityScore": self.data_quality_score,
        }


def load_validation_rules(config: Mapping[str, Any] | None) -> list[ValidationRule]:
    """Rules from the ``validation_rules`` section of the scoring config."""
    return [
        ValidationRule.from_config(r)
        for r in (config or {}).get("validation_rules", [])
        if r.get("active", True)
    ]


def formula_context(value: Any, data: Mapping[str, Any]) -> dict[str, float]:
    context = {"value": to_number(value)}
    for name in FORMULA_VARIABLES:
        context[name] = to_number(data.get(name))
    return context


def _fmt(number: Any) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def validate_cross_metrics(data: Mapping[str, Any]) -> list[str]:
    found = []
    scope3 = to_number(data.get("scope3Emissions"))
    total = to_number(data.get("scope1Emissions")) + to_number(data.get("scope2Emissions")) + scope3
    if total > 0 and scope3 and scope3 < total * 0.1:
        found.append("Scope 3 emissions seem unusually low compared to Scope 1+2")

    total_employees = to_number(data.get("totalEmployees"))
    if to_number(data.get("femaleEmployeesPercentage")) > 0 and total_employees and total_employees < 10:
        found.append("Small employee count may affect diversity metrics reliability")
    return found


def data_quality_score(data: Mapping[str, Any], errors: list[str], warns: list[str]) -> int:
    """100, minus 20 per error and 5 per warning, plus up to 10 for completeness."""
    score = 100.0 - len(errors) * ERROR_PENALTY - len(warns) * WARNING_PENALTY
    if data:
        filled = sum(1 for v in data.values() if v is not None and v != "")
        score += filled / len(data) * COMPLETENESS_BONUS
    return max(0, min(100, round_half_up(score)))


def validate_esg_data(data: Mapping[str, Any], rules: Iterable[ValidationRule]) -> ValidationResult:
    """Check reported metrics against range rules, rule formulas and cross-metric checks.

    Parameters
    ----------
    data : Mapping[str, Any]
        Metric name -> reported value
    rules : Iterable[ValidationRule]
        Active rules; metrics without a rule are not checked

    Returns
    -------
    ValidationResult
        Range and formula failures are errors. Formulas that cannot be
        evaluated (unknown variable, division by zero) and cross-metric
        plausibility checks are warnings.
    """
    by_metric = {}
    for rule in rules:
        by_metric.setdefault(rule.metric_name, rule)

    errors: list[str] = []
    warns: list[str] = []

    for metric_name, raw in data.items():
        rule = by_metric.get(metric_name)
        if rule is None:
            continue
        value = to_number(raw)

        if rule.min_value is not None and value < rule.min_value:
            errors.append(f"{metric_name}: Value {_fmt(value)} below minimum {_fmt(rule.min_value)}")
        if rule.max_value is not None and value > rule.max_value:
            errors.append(f"{metric_name}: Value {_fmt(value)} above maximum {_fmt(rule.max_value)}")

        if rule.formula is not None:
            try:
                passed = bool(evaluate(rule.formula, formula_context(raw, data)))
            except FormulaError as e:
                warnings.warn(f"Validation formula for {metric_name} failed: {e}", UserWarning)
                warns.append(f"{metric_name}: Validation formula error")
                continue
            if not passed:
                errors.append(rule.error_message or f"{metric_name}: Failed validation")

    warns.extend(validate_cross_metrics(data))

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warns,
        data_quality_score=data_quality_score(data, errors, warns),
    )
