"""Core data types for stat modifiers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TARGETS = frozenset({"city", "building", "worker", "visitor"})
MODES = frozenset({"additive", "multiplicative"})


@dataclass(frozen=True)
class Effect:
    """One numeric contribution to a stat.

    Attributes:
        target: Entity category the effect applies to.
        stat: Free-form stat key (e.g. "income", "interval").
        value: Amount added, or fraction added to the multiplier.
        mode: "additive" or "multiplicative".
    """

    target: str
    stat: str
    value: float
    mode: str = "additive"

    def __post_init__(self) -> None:
        if self.target not in TARGETS:
            raise ValueError(f"Unknown effect target: {self.target!r}")
        if self.mode not in MODES:
            raise ValueError(f"Unknown effect mode: {self.mode!r}")
        if not self.stat:
            raise ValueError("Effect stat must be non-empty")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"Effect value must be a number, got {self.value!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Effect:
        return cls(
            target=data["target"],
            stat=data["stat"],
            value=data["value"],
            mode=data.get("mode", "additive"),
        )


@dataclass(frozen=True)
class PassiveDef:
    """Definition of a permanently-active effect bundle. Not serialized."""

    id: str
    effects: tuple[Effect, ...] = ()
    description_key: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("PassiveDef id must be non-empty")


@dataclass(frozen=True)
class PassiveInstance:
    """Reference to an unlocked passive. Level is carried, never auto-scaled."""

    passive_id: str
    level: int = 1


@dataclass
class Bucket:
    """Per-stat additive and multiplicative totals."""

    additive: dict[str, float] = field(default_factory=dict)
    multiplicative: dict[str, float] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.additive and not self.multiplicative
