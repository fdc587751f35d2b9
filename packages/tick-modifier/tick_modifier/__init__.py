"""Additive/multiplicative stat modifiers for the tick engine."""
from tick_modifier.bucket import (
    PassiveSources,
    add_effect,
    aggregate,
    aggregate_effects,
    apply,
    merge,
)
from tick_modifier.scaling import scale_effect, scale_effects
from tick_modifier.types import (
    MODES,
    TARGETS,
    Bucket,
    Effect,
    PassiveDef,
    PassiveInstance,
)

__all__ = [
    "Bucket",
    "Effect",
    "MODES",
    "PassiveDef",
    "PassiveInstance",
    "PassiveSources",
    "TARGETS",
    "add_effect",
    "aggregate",
    "aggregate_effects",
    "apply",
    "merge",
    "scale_effect",
    "scale_effects",
]
