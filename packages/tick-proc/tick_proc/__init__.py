"""Chance-and-cooldown gated effect procs for the tick engine."""
from tick_proc.resolver import ProcResolver
from tick_proc.types import (
    TRIGGERS,
    ProcContext,
    ProcDef,
    ProcSpec,
    ProcState,
    WindowLimit,
)

__all__ = [
    "ProcContext",
    "ProcDef",
    "ProcResolver",
    "ProcSpec",
    "ProcState",
    "TRIGGERS",
    "WindowLimit",
]
