"""Skill engine configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SkillConfig:
    """Immutable configuration for SkillEngine.

    Attributes:
        min_interval_ms: Floor for the passive-adjusted income interval.
        multiplicative_rank_step: Extra multiplier fraction per rank above 1.
        income_trigger: Proc trigger evaluated on each income tick.
        income_stat: Stat key the income formula reads.
        interval_stat: Stat key the interval formula reads.
        target: Effect target aggregated for buildings.
    """

    min_interval_ms: float = 250
    multiplicative_rank_step: float = 0.5
    income_trigger: str = "onIncomeTick"
    income_stat: str = "income"
    interval_stat: str = "interval"
    target: str = "building"

    def __post_init__(self) -> None:
        if self.min_interval_ms < 0:
            raise ValueError(
                f"min_interval_ms must be >= 0, got {self.min_interval_ms}"
            )
