"""Condition tree types and the dict-form parser."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

OPERATORS = frozenset({"==", "!=", ">", ">=", "<", "<="})
NUMERIC_OPERATORS = frozenset({">", ">=", "<", "<="})


class ConditionError(ValueError):
    """Raised when condition data does not describe a valid condition tree."""


class _Missing:
    """Sentinel type for a path that does not resolve."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class Atom:
    """Compare the value at a dot-separated path against a literal."""

    path: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if not self.path:
            raise ConditionError("Atom path must be non-empty")
        if self.op not in OPERATORS:
            raise ConditionError(f"Unknown operator: {self.op!r}")


@dataclass(frozen=True)
class AllOf:
    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class AnyOf:
    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class Not:
    condition: Condition


Condition = Union[Atom, AllOf, AnyOf, Not]


def parse_condition(data: Any) -> Condition:
    """Build a condition tree from its dict form.

    Accepted shapes::

        {"path": "entity.state", "op": "==", "value": "idle"}
        {"all": [...]}   {"any": [...]}   {"not": {...}}

    Already-built condition objects are returned unchanged. A group dict
    must declare exactly one combinator. Raises ConditionError otherwise.
    """
    if isinstance(data, (Atom, AllOf, AnyOf, Not)):
        return data
    if not isinstance(data, dict):
        raise ConditionError(
            f"Condition must be a dict, got {type(data).__name__}"
        )

    combinators = [key for key in ("all", "any", "not") if key in data]
    if len(combinators) > 1:
        raise ConditionError(
            f"Condition group declares several combinators: {combinators}"
        )
    if combinators:
        if "path" in data:
            raise ConditionError("Condition mixes an atom with a group")
        key = combinators[0]
        if key == "not":
            return Not(parse_condition(data["not"]))
        children = data[key]
        if not isinstance(children, (list, tuple)):
            raise ConditionError(f"'{key}' expects a list of conditions")
        parsed = tuple(parse_condition(child) for child in children)
        return AllOf(parsed) if key == "all" else AnyOf(parsed)

    try:
        return Atom(path=data["path"], op=data["op"], value=data.get("value"))
    except KeyError as exc:
        raise ConditionError(f"Condition atom missing field {exc}") from None
