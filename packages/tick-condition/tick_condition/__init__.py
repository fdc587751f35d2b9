"""Declarative condition trees for the tick engine."""
from tick_condition.evaluator import compile_condition, evaluate
from tick_condition.paths import read_path
from tick_condition.types import (
    MISSING,
    OPERATORS,
    AllOf,
    AnyOf,
    Atom,
    Condition,
    ConditionError,
    Not,
    parse_condition,
)

__all__ = [
    "AllOf",
    "AnyOf",
    "Atom",
    "Condition",
    "ConditionError",
    "MISSING",
    "Not",
    "OPERATORS",
    "compile_condition",
    "evaluate",
    "parse_condition",
    "read_path",
]
