"""Effect aggregation and the two-stage stat formula."""
from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from tick_modifier.types import Bucket, Effect, PassiveDef, PassiveInstance


@dataclass(frozen=True)
class PassiveSources:
    """Everything that may contribute effects to one aggregation.

    Attributes:
        instances: Unlocked passives, resolved through ``definitions``.
        definitions: Passive definitions keyed by id.
        inline_effects: Loose effects (traits, skill nodes, procs).
    """

    instances: tuple[PassiveInstance, ...] = ()
    definitions: Mapping[str, PassiveDef] = field(default_factory=dict)
    inline_effects: tuple[Effect, ...] = ()


def add_effect(bucket: Bucket, effect: Effect) -> None:
    """Sum one effect into the bucket map matching its mode."""
    totals = (
        bucket.multiplicative if effect.mode == "multiplicative"
        else bucket.additive
    )
    totals[effect.stat] = totals.get(effect.stat, 0.0) + effect.value


def aggregate(target: str, sources: PassiveSources) -> Bucket:
    """Collect every ``target`` effect from ``sources`` into a new bucket.

    Instances whose definition is unknown contribute nothing. Multiplicative
    values are summed, not chained.
    """
    bucket = Bucket()
    for instance in sources.instances:
        definition = sources.definitions.get(instance.passive_id)
        if definition is None:
            continue
        _add_matching(bucket, target, definition.effects)
    _add_matching(bucket, target, sources.inline_effects)
    return bucket


def aggregate_effects(target: str, effects: Iterable[Effect]) -> Bucket:
    """Aggregate a loose effect list with no passive instances."""
    bucket = Bucket()
    _add_matching(bucket, target, effects)
    return bucket


def apply(base: float, bucket: Bucket, stat: str) -> float:
    """Return ``(base + additive) * (1 + multiplicative)`` for ``stat``.

    A non-finite result (overflowing or NaN content) yields ``base``.
    """
    additive = bucket.additive.get(stat, 0.0)
    multiplicative = bucket.multiplicative.get(stat, 0.0)
    if not additive and not multiplicative:
        return base
    result = (base + additive) * (1 + multiplicative)
    if not math.isfinite(result):
        return base
    return result


def merge(*buckets: Bucket) -> Bucket:
    """Sum buckets key-wise into a new bucket."""
    merged = Bucket()
    for bucket in buckets:
        for stat, value in bucket.additive.items():
            merged.additive[stat] = merged.additive.get(stat, 0.0) + value
        for stat, value in bucket.multiplicative.items():
            merged.multiplicative[stat] = (
                merged.multiplicative.get(stat, 0.0) + value
            )
    return merged


def _add_matching(bucket: Bucket, target: str, effects: Iterable[Effect]) -> None:
    for effect in effects:
        if effect.target == target:
            add_effect(bucket, effect)
