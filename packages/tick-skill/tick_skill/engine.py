"""SkillEngine — building income from passives, traits, skills and procs."""
from __future__ import annotations

import dataclasses
import logging
import math
import random as _random_mod

from tick_modifier import (
    Effect,
    PassiveInstance,
    PassiveSources,
    aggregate,
    aggregate_effects,
    apply,
    scale_effects,
)
from tick_proc import ProcContext, ProcDef, ProcResolver

from tick_skill.catalog import SkillCatalog
from tick_skill.config import SkillConfig
from tick_skill.types import Building, BuildingSnapshot, Worker

logger = logging.getLogger(__name__)


class SkillEngine:
    """Computes per-tick building income.

    Holds one ProcResolver, so proc cooldowns persist across calls until
    ``reset``. Results are deterministic except for proc chance rolls,
    which draw from ``rng`` (per call) or the resolver's generator.
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        config: SkillConfig | None = None,
        procs: ProcResolver | None = None,
    ) -> None:
        self._catalog = catalog
        self._config = config if config is not None else SkillConfig()
        self._procs = procs if procs is not None else ProcResolver()

    @property
    def catalog(self) -> SkillCatalog:
        return self._catalog

    @property
    def config(self) -> SkillConfig:
        return self._config

    @property
    def procs(self) -> ProcResolver:
        """The proc resolver, for ``on_fire`` hooks and snapshot/restore."""
        return self._procs

    # --- Income ---

    def compute_building_snapshot(
        self,
        building: Building,
        tick: int,
        rng: _random_mod.Random | None = None,
    ) -> BuildingSnapshot:
        """Income and interval for ``building`` at ``tick``.

        Passives, traits and skill effects adjust both stats; fired procs
        adjust income only. Proc state is updated as a side effect.
        """
        cfg = self._config

        # 1. Permanent modifiers
        passive_bucket = aggregate(cfg.target, self._passive_sources(building))
        income = apply(building.base_income, passive_bucket, cfg.income_stat)
        interval = apply(
            building.base_interval_ms, passive_bucket, cfg.interval_stat
        )
        if not math.isfinite(interval):
            logger.debug(
                "non-finite interval for building %s", building.instance_id
            )
            interval = cfg.min_interval_ms
        interval = max(cfg.min_interval_ms, interval)

        # 2. Procs
        fired = self._ready_procs(building, tick, rng)
        triggered = tuple(effect for proc in fired for effect in proc.effects)
        proc_bucket = aggregate_effects(cfg.target, triggered)
        income = apply(income, proc_bucket, cfg.income_stat)

        if not math.isfinite(income):
            logger.debug(
                "non-finite income for building %s", building.instance_id
            )
            income = 0
        return BuildingSnapshot(
            income_per_tick=max(0, math.floor(income)),
            interval_ms=interval,
            triggered_effects=triggered,
        )

    # --- Worker contributions ---

    def worker_effects(self, worker: Worker) -> tuple[Effect, ...]:
        """Trait effects followed by rank-scaled effects of unlocked nodes."""
        effects: list[Effect] = []
        for trait in worker.traits:
            effects.extend(trait.effects)
        for node, rank in self._unlocked_nodes(worker):
            effects.extend(
                scale_effects(node.effects, rank, self._config.multiplicative_rank_step)
            )
        return tuple(effects)

    def worker_procs(self, worker: Worker) -> list[ProcDef]:
        """Procs of unlocked nodes, with effects scaled by node rank."""
        procs: list[ProcDef] = []
        for node, rank in self._unlocked_nodes(worker):
            for proc in node.procs:
                procs.append(dataclasses.replace(
                    proc,
                    effects=scale_effects(
                        proc.effects, rank, self._config.multiplicative_rank_step
                    ),
                ))
        return procs

    # --- Lifecycle ---

    def reset(self) -> None:
        """Forget proc cooldowns, as a fresh session would."""
        self._procs.reset()

    # --- Internal helpers ---

    def _passive_sources(self, building: Building) -> PassiveSources:
        inline: list[Effect] = []
        for worker in building.staff:
            inline.extend(self.worker_effects(worker))
        return PassiveSources(
            instances=self._building_passives(building),
            definitions=self._catalog.passive_definitions(),
            inline_effects=tuple(inline),
        )

    def _building_passives(
        self, building: Building
    ) -> tuple[PassiveInstance, ...]:
        if building.unlocked_passives:
            return tuple(building.unlocked_passives)
        return self._catalog.default_passives(building.type_id)

    def _unlocked_nodes(self, worker: Worker):
        for tree_id, progress in worker.skill_trees.items():
            tree = self._catalog.tree(tree_id)
            if tree is None:
                logger.debug(
                    "worker %s has progress in unknown tree %s", worker.id, tree_id
                )
                continue
            for node_id, rank in progress.items():
                node = tree.nodes.get(node_id)
                if node is None or rank <= 0:
                    continue
                yield node, rank

    def _ready_procs(
        self,
        building: Building,
        tick: int,
        rng: _random_mod.Random | None,
    ) -> list[ProcDef]:
        candidates: list[ProcDef] = []
        for worker in building.staff:
            candidates.extend(self.worker_procs(worker))
        if not candidates:
            return []
        ctx = ProcContext(
            tick=tick,
            rng=rng,
            subject={
                "buildingId": building.instance_id,
                "staffCount": len(building.staff),
                "visitors": building.visitor_count,
            },
        )
        return self._procs.ready_procs(self._config.income_trigger, candidates, ctx)
