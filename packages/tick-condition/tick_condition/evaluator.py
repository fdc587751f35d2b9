"""Condition evaluation — pure functions, no side effects on the context."""
from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

from tick_condition.paths import read_path
from tick_condition.types import (
    MISSING,
    NUMERIC_OPERATORS,
    AllOf,
    AnyOf,
    Atom,
    Condition,
    Not,
)


def evaluate(condition: Condition, context: Mapping[str, Any]) -> bool:
    """Evaluate a condition tree against a nested context mapping.

    Never raises for absent or mistyped data: an unresolved path makes
    every comparison False, including ``!=``.
    """
    if isinstance(condition, Atom):
        return _eval_atom(condition, context)
    if isinstance(condition, AllOf):
        return all(evaluate(c, context) for c in condition.conditions)
    if isinstance(condition, AnyOf):
        return any(evaluate(c, context) for c in condition.conditions)
    if isinstance(condition, Not):
        return not evaluate(condition.condition, context)
    return False


def compile_condition(
    condition: Condition,
) -> Callable[[Mapping[str, Any]], bool]:
    """Return a predicate bound to ``condition``."""

    def predicate(context: Mapping[str, Any]) -> bool:
        return evaluate(condition, context)

    return predicate


# --- Atom comparison ---


def _eval_atom(atom: Atom, context: Mapping[str, Any]) -> bool:
    left = read_path(context, atom.path)
    if left is MISSING:
        return False

    if atom.op == "==":
        return _strict_equal(left, atom.value)
    if atom.op == "!=":
        return not _strict_equal(left, atom.value)
    if atom.op in NUMERIC_OPERATORS:
        return _compare_numeric(atom.op, left, atom.value)
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equal(left: Any, right: Any) -> bool:
    """Equality that keeps booleans apart from numbers."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right) and not (
        isinstance(left, str) and isinstance(right, str)
    ):
        return False
    return left == right


def _compare_numeric(op: str, left: Any, right: Any) -> bool:
    if not _is_number(left):
        return False
    try:
        bound = float(right)
    except (TypeError, ValueError):
        return False
    if math.isnan(bound):
        return False

    if op == ">":
        return left > bound
    if op == ">=":
        return left >= bound
    if op == "<":
        return left < bound
    return left <= bound
