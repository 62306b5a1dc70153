"""Validation rule expressions.

Rules are stored as data (YAML or JSON) and parsed into a small closed set of
expression nodes. Only the operators and functions listed here can be
evaluated, so no rule text is ever executed as code.

Syntax accepted by :func:`parse_expression`::

    5                               -> Const(5)
    "value"                         -> Var("value")
    {"op": ">", "args": ["value", 0]}
    {"op": "and", "args": [{...}, {...}]}
    {"op": "abs", "args": [{"op": "-", "args": ["value", 100]}]}
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union


class FormulaError(ValueError):
    """A rule expression could not be evaluated against the supplied data."""


ARITHMETIC_OPS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}
COMPARISON_OPS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}
BOOLEAN_OPS = {"and", "or"}
FUNCTIONS: dict[str, Callable[..., float]] = {
    "abs": abs,
    "min": lambda *args: min(args),
    "max": lambda *args: max(args),
    "round": lambda x: math.floor(x + 0.5),
    "floor": math.floor,
    "ceil": math.ceil,
}


@dataclass(frozen=True)
class Const:
    value: float


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class BinOp:
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Compare:
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class BoolOp:
    op: str
    operands: tuple[Expr, ...]


@dataclass(frozen=True)
class Not:
    operand: Expr


@dataclass(frozen=True)
class Call:
    func: str
    args: tuple[Expr, ...]


Expr = Union[Const, Var, BinOp, Compare, BoolOp, Not, Call]


def parse_expression(obj: Any) -> Expr:
    """Build an expression tree from its data form.

    Raises
    ------
    ValueError
        For unknown operators or functions and for wrong argument counts
    """
    if isinstance(obj, bool):
        return Const(float(obj))
    if isinstance(obj, (int, float)):
        return Const(float(obj))
    if isinstance(obj, str):
        return Var(obj)
    if not isinstance(obj, Mapping) or "op" not in obj:
        raise ValueError(f"Cannot parse rule expression: {obj!r}")

    op = obj["op"]
    args = [parse_expression(a) for a in obj.get("args", [])]

    if op in ARITHMETIC_OPS or op in COMPARISON_OPS:
        if len(args) != 2:
            raise ValueError(f"Operator '{op}' takes 2 arguments, got {len(args)}")
        node_type = BinOp if op in ARITHMETIC_OPS else Compare
        return node_type(op, args[0], args[1])
    if op in BOOLEAN_OPS:
        if len(args) < 2:
            raise ValueError(f"Operator '{op}' takes at least 2 arguments")
        return BoolOp(op, tuple(args))
    if op == "not":
        if len(args) != 1:
            raise ValueError("Operator 'not' takes 1 argument")
        return Not(args[0])
    if op in FUNCTIONS:
        if not args or (op in ("abs", "round", "floor", "ceil") and len(args) != 1):
            raise ValueError(f"Wrong number of arguments for '{op}'")
        return Call(op, tuple(args))
    raise ValueError(f"Unknown rule operator: {op}")


def evaluate(node: Expr, context: Mapping[str, float]) -> float | bool:
    """Evaluate an expression tree against numeric variables.

    Raises
    ------
    FormulaError
        On an unknown variable or a division by zero
    """
    if isinstance(node, Const):
        return node.value
    if isinstance(node, Var):
        if node.name not in context:
            raise FormulaError(f"Unknown variable in rule expression: {node.name}")
        return context[node.name]
    if isinstance(node, BinOp):
        left = evaluate(node.left, context)
        right = evaluate(node.right, context)
        if node.op == "/" and right == 0:
            raise FormulaError("Division by zero in rule expression")
        return ARITHMETIC_OPS[node.op](left, right)
    if isinstance(node, Compare):
        return COMPARISON_OPS[node.op](evaluate(node.left, context), evaluate(node.right, context))
    if isinstance(node, BoolOp):
        if node.op == "and":
            return all(bool(evaluate(o, context)) for o in node.operands)
        return any(bool(evaluate(o, context)) for o in node.operands)
    if isinstance(node, Not):
        return not evaluate(node.operand, context)
    if isinstance(node, Call):
        return FUNCTIONS[node.func](*(evaluate(a, context) for a in node.args))
    raise TypeError(f"Not a rule expression node: {node!r}")


def variables(node: Expr) -> set[str]:
    """Names of all variables referenced by ``node``."""
    if isinstance(node, Var):
        return {node.name}
    if isinstance(node, (BinOp, Compare)):
        return variables(node.left) | variables(node.right)
    if isinstance(node, BoolOp):
        return set().union(*(variables(o) for o in node.operands))
    if isinstance(node, Not):
        return variables(node.operand)
    if isinstance(node, Call):
        return set().union(*(variables(a) for a in node.args))
    return set()
