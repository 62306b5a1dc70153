"""Metric validation with data-defined rule expressions."""

from .expressions import FormulaError, evaluate, parse_expression
from .validator import (
    ValidationResult,
    ValidationRule,
    load_validation_rules,
    validate_esg_data,
)

__all__ = [
    "FormulaError",
    "ValidationResult",
    "ValidationRule",
    "evaluate",
    "load_validation_rules",
    "parse_expression",
    "validate_esg_data",
]
