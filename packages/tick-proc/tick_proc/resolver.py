"""ProcResolver — per-session proc gating with cooldown bookkeeping."""
from __future__ import annotations

import logging
import random as _random_mod
from collections.abc import Iterable
from typing import Any, Callable

from tick_condition import evaluate

from tick_proc.types import ProcContext, ProcDef, ProcState

logger = logging.getLogger(__name__)


class ProcResolver:
    """Decides which procs fire for a trigger and records their state.

    One resolver belongs to one simulation session. Its state map is
    mutated on every accepted proc and is not safe for concurrent use.
    Chance rolls are random by nature; pass a seeded ``random.Random``
    (here or per call) when reproducibility matters.
    """

    def __init__(self, rng: _random_mod.Random | None = None) -> None:
        self._rng = rng if rng is not None else _random_mod.Random()
        self._states: dict[str, ProcState] = {}
        self._on_fire: list[Callable[[ProcDef, int], None]] = []

    # --- Resolution ---

    def ready_procs(
        self,
        trigger: str,
        procs: Iterable[ProcDef],
        ctx: ProcContext,
    ) -> list[ProcDef]:
        """Return the procs that fire this call, in input order.

        Gates, in order: trigger match, conditions against ``ctx.subject``,
        cooldown, chance. Each accepted proc has its state recorded before
        the next one is considered. Effects are returned unscaled.
        """
        subject = ctx.subject if ctx.subject is not None else {}
        rng = ctx.rng if ctx.rng is not None else self._rng
        ready: list[ProcDef] = []

        for proc in procs:
            # 0. Malformed: nothing to apply
            if not proc.effects:
                logger.debug("skipping proc %s: no effects", proc.id)
                continue

            # 1. Trigger
            if proc.trigger != trigger:
                continue

            # 2. Conditions
            if proc.conditions is not None and not evaluate(
                proc.conditions, subject
            ):
                continue

            # 3. Cooldown
            if not self._is_off_cooldown(proc, ctx.tick):
                continue

            # 4. Chance
            if proc.spec.chance is not None and rng.random() > proc.spec.chance:
                continue

            self._mark_triggered(proc, ctx.tick)
            ready.append(proc)

        for proc in ready:
            logger.debug("proc %s fired at tick %d", proc.id, ctx.tick)
            for cb in self._on_fire:
                cb(proc, ctx.tick)
        return ready

    # --- Queries ---

    def state(self, proc_id: str) -> ProcState | None:
        """Direct access to runtime state. None if the proc never fired."""
        return self._states.get(proc_id)

    def is_off_cooldown(self, proc: ProcDef, tick: int) -> bool:
        """Would the cooldown gate pass at ``tick``? Purely informational."""
        return self._is_off_cooldown(proc, tick)

    def tracked_procs(self) -> list[str]:
        """Ids of all procs with recorded state, in first-fire order."""
        return list(self._states)

    # --- Callback registration ---

    def on_fire(self, cb: Callable[[ProcDef, int], None]) -> None:
        """Register callback fired for each accepted proc.

        Signature: (proc, tick_number) -> None.
        """
        self._on_fire.append(cb)

    # --- Lifecycle ---

    def reset(self) -> None:
        """Forget all cooldown and window state."""
        self._states.clear()

    # --- Internal helpers ---

    def _is_off_cooldown(self, proc: ProcDef, tick: int) -> bool:
        if not proc.spec.cooldown_ticks:
            return True
        state = self._states.get(proc.id)
        if state is None or state.cooldown_until_tick is None:
            return True
        return tick >= state.cooldown_until_tick

    def _mark_triggered(self, proc: ProcDef, tick: int) -> None:
        state = self._states.get(proc.id)
        if state is None:
            state = ProcState(proc_id=proc.id)
            self._states[proc.id] = state

        if proc.spec.cooldown_ticks:
            state.cooldown_until_tick = tick + proc.spec.cooldown_ticks

        if proc.spec.max_per_window is not None:
            # One-tick window: a new tick always opens a fresh window.
            start = state.window_start_tick
            same_window = start is not None and tick - start < 1
            if same_window:
                state.window_count += 1
            else:
                state.window_start_tick = tick
                state.window_count = 1

    # --- Serialization ---

    def snapshot(self) -> dict[str, Any]:
        """Serialize runtime state (not definitions)."""
        return {
            "procs": [
                {
                    "proc_id": s.proc_id,
                    "cooldown_until_tick": s.cooldown_until_tick,
                    "window_start_tick": s.window_start_tick,
                    "window_count": s.window_count,
                }
                for s in self._states.values()
            ],
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Replace runtime state with snapshot data."""
        self._states.clear()
        for proc_data in data.get("procs", []):
            state = ProcState(**proc_data)
            self._states[state.proc_id] = state
