"""Core data types for chance-and-cooldown gated procs."""
from __future__ import annotations

import random as _random_mod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tick_condition import Condition, parse_condition
from tick_modifier import Effect

TRIGGERS = frozenset({
    "onAssign",
    "onShiftStart",
    "onShiftEnd",
    "onTask",
    "onVisitorArrive",
    "onVisitorConsume",
    "onIncomeTick",
    "onDamage",
    "onLowResource",
    "manual",
})

WINDOWS = frozenset({"shift", "day", "visitor", "building"})


@dataclass(frozen=True)
class WindowLimit:
    """Declared per-window fire cap. Recorded, not enforced."""

    window: str
    count: int

    def __post_init__(self) -> None:
        if self.window not in WINDOWS:
            raise ValueError(f"Unknown proc window: {self.window!r}")
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")


@dataclass(frozen=True)
class ProcSpec:
    """Gating parameters of a proc.

    Attributes:
        chance: Fire probability in [0.0, 1.0]. None means always.
        cooldown_ticks: Ticks before the proc may fire again.
        max_per_window: Optional window cap (bookkeeping only).
    """

    chance: float | None = None
    cooldown_ticks: int | None = None
    max_per_window: WindowLimit | None = None

    def __post_init__(self) -> None:
        if self.chance is not None and not 0.0 <= self.chance <= 1.0:
            raise ValueError(f"chance must be in [0, 1], got {self.chance}")
        if self.cooldown_ticks is not None and self.cooldown_ticks < 0:
            raise ValueError(
                f"cooldown_ticks must be >= 0, got {self.cooldown_ticks}"
            )


@dataclass(frozen=True)
class ProcDef:
    """Definition of a triggered effect bundle. Not serialized."""

    id: str
    trigger: str
    effects: tuple[Effect, ...] = ()
    conditions: Condition | None = None
    spec: ProcSpec = field(default_factory=ProcSpec)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ProcDef id must be non-empty")
        if self.trigger not in TRIGGERS:
            raise ValueError(f"Unknown proc trigger: {self.trigger!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProcDef:
        """Build a proc from its authored form (camelCase spec keys)."""
        raw_spec = data.get("spec") or {}
        raw_window = raw_spec.get("maxPerWindow")
        spec = ProcSpec(
            chance=raw_spec.get("chance"),
            cooldown_ticks=raw_spec.get("cooldownTicks"),
            max_per_window=(
                WindowLimit(raw_window["window"], raw_window["count"])
                if raw_window else None
            ),
        )
        conditions = data.get("conditions")
        return cls(
            id=data["id"],
            trigger=data["trigger"],
            effects=tuple(Effect.from_dict(e) for e in data.get("effects", [])),
            conditions=parse_condition(conditions) if conditions else None,
            spec=spec,
        )


@dataclass
class ProcState:
    """Runtime state of one proc. Mutable, serializable."""

    proc_id: str
    cooldown_until_tick: int | None = None
    window_start_tick: int | None = None
    window_count: int = 0


@dataclass(frozen=True)
class ProcContext:
    """Per-call inputs to proc resolution.

    Attributes:
        tick: Current simulation tick. Must not decrease between calls.
        rng: Source for chance rolls. Falls back to the resolver's own.
        subject: Mapping that proc conditions are evaluated against.
    """

    tick: int
    rng: _random_mod.Random | None = None
    subject: Mapping[str, Any] | None = None
