"""Skill-node rank scaling."""
from __future__ import annotations

import dataclasses

from tick_modifier.types import Effect

DEFAULT_MULTIPLICATIVE_STEP = 0.5


def scale_effect(
    effect: Effect,
    rank: int,
    multiplicative_step: float = DEFAULT_MULTIPLICATIVE_STEP,
) -> Effect:
    """Scale an effect for a skill-node rank.

    Rank 1 (or lower) returns the effect unchanged. Additive effects grow
    linearly (``value * rank``); multiplicative effects grow by
    ``multiplicative_step`` per extra rank (``value * (1 + 0.5 * (rank - 1))``
    with the default step).
    """
    if rank <= 1:
        return effect
    if effect.mode == "multiplicative":
        value = effect.value * (1 + multiplicative_step * (rank - 1))
    else:
        value = effect.value * rank
    return dataclasses.replace(effect, value=value)


def scale_effects(
    effects: tuple[Effect, ...] | list[Effect],
    rank: int,
    multiplicative_step: float = DEFAULT_MULTIPLICATIVE_STEP,
) -> tuple[Effect, ...]:
    return tuple(scale_effect(e, rank, multiplicative_step) for e in effects)
