"""Rule-based risk scoring.

A risk domain is a list of ``(metric, condition, points)`` rules. The domain
score is the sum of points for every rule whose condition holds, clamped to
[0, 100]. A domain may name the input record it depends on; when that record
is absent the domain scores a fixed default instead of 0.
"""

from __future__ import annotations

import math
import operator
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..data_collection.data_quality import to_number

NUMERIC_OPS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}
EQUALITY_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
}
SPECIAL_OPS = {"falsy", "ratio_below"}

HIGH_CUTOFF = 70
MEDIUM_CUTOFF = 40


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class RiskRule:
    metric: str
    op: str
    threshold: Any = None
    points: float = 0
    denominator: str | None = None

    def __post_init__(self):
        if self.op not in NUMERIC_OPS and self.op not in EQUALITY_OPS and self.op not in SPECIAL_OPS:
            raise ValueError(f"Unknown risk rule operator: {self.op}")
        if self.points < 0:
            raise ValueError(f"Risk rule points must be non-negative: {self.metric} {self.points}")
        if self.threshold is None and (self.op in NUMERIC_OPS or self.op == "ratio_below"):
            raise ValueError(f"'{self.op}' rule on '{self.metric}' needs a threshold")
        if self.op == "ratio_below" and not self.denominator:
            raise ValueError(f"ratio_below rule on '{self.metric}' needs a denominator")

    def fires(self, inputs: Mapping[str, Any]) -> bool:
        value = inputs.get(self.metric)

        if self.op == "falsy":
            return _is_missing(value) or not value

        if _is_missing(value):
            return False

        if self.op == "ratio_below":
            denominator = inputs.get(self.denominator)
            if _is_missing(denominator):
                return False
            den = to_number(denominator)
            if den == 0:
                return False
            return to_number(value) / den < self.threshold

        if self.op in EQUALITY_OPS:
            if isinstance(self.threshold, str) or isinstance(value, str):
                return EQUALITY_OPS[self.op](value, self.threshold)
            return EQUALITY_OPS[self.op](to_number(value), to_number(self.threshold))

        return NUMERIC_OPS[self.op](to_number(value), self.threshold)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> RiskRule:
        return cls(
            metric=cfg["metric"],
            op=cfg["op"],
            threshold=cfg.get("threshold"),
            points=cfg.get("points", 0),
            denominator=cfg.get("denominator"),
        )


@dataclass(frozen=True)
class RiskDomain:
    name: str
    rules: tuple[RiskRule, ...]
    default_when_missing: int | None = None
    source: str | None = None

    @classmethod
    def from_config(cls, name: str, cfg: Mapping[str, Any]) -> RiskDomain:
        return cls(
            name=name,
            rules=tuple(RiskRule.from_config(r) for r in cfg.get("rules", [])),
            default_when_missing=cfg.get("default_when_missing"),
            source=cfg.get("source"),
        )


def score_domain(
    domain: RiskDomain,
    inputs: Mapping[str, Any],
    *,
    present_sources: set[str] | None = None,
) -> int:
    """Sum the points of every firing rule, clamped to [0, 100].

    Parameters
    ----------
    domain : RiskDomain
        Rule table for one risk domain
    inputs : Mapping[str, Any]
        Named metric values; missing metrics never trigger comparison rules
    present_sources : set[str] | None, optional
        Input records that were supplied. If the domain's ``source`` is not
        among them the domain's default risk is returned.
    """
    if domain.source is not None and present_sources is not None:
        if domain.source not in present_sources and domain.default_when_missing is not None:
            return domain.default_when_missing

    non_numeric = [
        r.metric
        for r in domain.rules
        if r.op in NUMERIC_OPS
        and not _is_missing(inputs.get(r.metric))
        and isinstance(inputs.get(r.metric), str)
        and _not_a_number(inputs.get(r.metric))
    ]
    if non_numeric:
        warnings.warn(
            f"Non-numeric {domain.name} risk inputs treated as 0: {', '.join(sorted(set(non_numeric)))}",
            UserWarning,
        )

    risk = sum(rule.points for rule in domain.rules if rule.fires(inputs))
    return int(min(100, max(0, risk)))


def _not_a_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return True
    return False


def classify_level(score: float) -> str:
    """Map a 0-100 risk score to ``high`` (> 70), ``medium`` (> 40) or ``low``."""
    if score > HIGH_CUTOFF:
        return "high"
    if score > MEDIUM_CUTOFF:
        return "medium"
    return "low"
