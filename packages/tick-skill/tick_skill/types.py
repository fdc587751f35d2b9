"""Core data types for skills, traits and the buildings they staff."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tick_modifier import Effect, PassiveInstance
from tick_proc import ProcDef


@dataclass(frozen=True)
class Trait:
    """Innate worker trait. Its effects always apply while the worker is staffed."""

    id: str
    effects: tuple[Effect, ...] = ()
    description_key: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Trait id must be non-empty")


@dataclass(frozen=True)
class SkillNode:
    """One node of a skill tree.

    Attributes:
        id: Unique within its tree.
        cost: Skill points spent per rank. Not enforced here.
        max_rank: Highest rank the node can reach (>= 1).
        effects: Permanent effects, scaled by rank.
        prerequisites: Node ids in the same tree that must be unlocked first.
        procs: Triggered effect bundles, scaled by rank.
        requirements: Opaque unlock requirements (money, reputation)
            checked by the caller's economy.
    """

    id: str
    cost: int
    max_rank: int
    effects: tuple[Effect, ...] = ()
    prerequisites: tuple[str, ...] = ()
    procs: tuple[ProcDef, ...] = ()
    requirements: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("SkillNode id must be non-empty")
        for name in ("cost", "max_rank"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int, got {value!r}")
        if self.cost < 0:
            raise ValueError(f"cost must be >= 0, got {self.cost}")
        if self.max_rank < 1:
            raise ValueError(f"max_rank must be >= 1, got {self.max_rank}")


@dataclass(frozen=True)
class SkillTree:
    id: str
    job_id: str
    nodes: dict[str, SkillNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("SkillTree id must be non-empty")


@dataclass
class Worker:
    """Staff member view.

    ``skill_trees`` maps tree id to ``{node_id: rank}``; rank 0 or an
    absent node means locked.
    """

    id: str
    traits: tuple[Trait, ...] = ()
    skill_trees: dict[str, dict[str, int]] = field(default_factory=dict)

    def rank(self, tree_id: str, node_id: str) -> int:
        return self.skill_trees.get(tree_id, {}).get(node_id, 0)


@dataclass
class Building:
    """Income-producing building view."""

    instance_id: str
    type_id: str
    base_income: float
    base_interval_ms: float
    unlocked_passives: tuple[PassiveInstance, ...] = ()
    staff: tuple[Worker, ...] = ()
    visitor_count: int = 0


@dataclass(frozen=True)
class BuildingSnapshot:
    """Income for one income tick.

    Attributes:
        income_per_tick: Whole, non-negative income after passives and procs.
        interval_ms: Income interval after passives, never below the floor.
        triggered_effects: Effects of every proc that fired, building or not.
    """

    income_per_tick: int
    interval_ms: float
    triggered_effects: tuple[Effect, ...] = ()
