"""Tests for tick_skill.engine — SkillEngine."""
from __future__ import annotations

import random

import pytest

from tick_condition import Atom
from tick_modifier import Effect, PassiveDef, PassiveInstance
from tick_proc import ProcDef, ProcResolver, ProcSpec

from tick_skill import (
    Building,
    SkillCatalog,
    SkillConfig,
    SkillEngine,
    SkillNode,
    SkillTree,
    Trait,
    Worker,
)


def income(value: float, mode: str = "additive") -> Effect:
    return Effect(target="building", stat="income", value=value, mode=mode)


def make_catalog(*nodes: SkillNode) -> SkillCatalog:
    catalog = SkillCatalog()
    catalog.define_passive(PassiveDef(id="leanOps", effects=(income(0.12, "multiplicative"),)))
    catalog.define_passive(PassiveDef(id="fastService", effects=(
        Effect(target="building", stat="interval", value=-0.1, mode="multiplicative"),
    )))
    catalog.set_default_passives("restaurant", [PassiveInstance("leanOps")])
    catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={n.id: n for n in nodes}))
    return catalog


def restaurant(*staff: Worker, **kwargs) -> Building:
    return Building(
        instance_id="restaurant-01",
        type_id="restaurant",
        base_income=140,
        base_interval_ms=2200,
        staff=staff,
        **kwargs,
    )


def worker_with(node_id: str, rank: int = 1, **kwargs) -> Worker:
    return Worker(id="w1", skill_trees={"concierge_tree": {node_id: rank}}, **kwargs)


class TestPassiveIncome:
    def test_end_to_end_income(self) -> None:
        catalog = make_catalog(SkillNode(id="upsell", cost=1, max_rank=3, effects=(income(8),)))
        engine = SkillEngine(catalog)
        snap = engine.compute_building_snapshot(restaurant(worker_with("upsell")), tick=1)
        assert snap.income_per_tick == 165
        assert snap.interval_ms == 2200
        assert snap.triggered_effects == ()

    def test_no_modifiers_returns_base(self) -> None:
        engine = SkillEngine(SkillCatalog())
        snap = engine.compute_building_snapshot(restaurant(), tick=0)
        assert snap.income_per_tick == 140
        assert snap.interval_ms == 2200

    def test_default_passives_by_type(self) -> None:
        engine = SkillEngine(make_catalog())
        snap = engine.compute_building_snapshot(restaurant(), tick=0)
        assert snap.income_per_tick == 156  # floor(140 * 1.12)

    def test_unlocked_passives_replace_defaults(self) -> None:
        engine = SkillEngine(make_catalog())
        building = restaurant(unlocked_passives=(PassiveInstance("fastService"),))
        snap = engine.compute_building_snapshot(building, tick=0)
        assert snap.income_per_tick == 140
        assert snap.interval_ms == pytest.approx(1980)

    def test_unknown_passive_ignored(self) -> None:
        engine = SkillEngine(make_catalog())
        building = restaurant(unlocked_passives=(PassiveInstance("ghost"),))
        assert engine.compute_building_snapshot(building, tick=0).income_per_tick == 140

    def test_trait_effects_apply(self) -> None:
        engine = SkillEngine(SkillCatalog())
        worker = Worker(id="w", traits=(Trait(id="charmer", effects=(income(10),)),))
        assert engine.compute_building_snapshot(restaurant(worker), tick=0).income_per_tick == 150

    def test_skill_effects_scale_with_rank(self) -> None:
        catalog = SkillCatalog()
        catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "upsell": SkillNode(id="upsell", cost=1, max_rank=3, effects=(income(10),)),
        }))
        engine = SkillEngine(catalog)
        snap = engine.compute_building_snapshot(restaurant(worker_with("upsell", rank=2)), tick=0)
        assert snap.income_per_tick == 160

    def test_locked_and_unknown_nodes_ignored(self) -> None:
        catalog = make_catalog(SkillNode(id="upsell", cost=1, max_rank=3, effects=(income(8),)))
        engine = SkillEngine(catalog)
        worker = Worker(id="w", skill_trees={
            "concierge_tree": {"upsell": 0, "ghost": 2},
            "unknown_tree": {"x": 1},
        })
        assert engine.compute_building_snapshot(restaurant(worker), tick=0).income_per_tick == 156

    def test_other_targets_ignored(self) -> None:
        engine = SkillEngine(SkillCatalog())
        worker = Worker(id="w", traits=(Trait(id="t", effects=(
            Effect(target="visitor", stat="income", value=99),
        )),))
        assert engine.compute_building_snapshot(restaurant(worker), tick=0).income_per_tick == 140

    def test_interval_floor(self) -> None:
        catalog = SkillCatalog()
        catalog.define_passive(PassiveDef(id="rush", effects=(
            Effect(target="building", stat="interval", value=-0.95, mode="multiplicative"),
        )))
        engine = SkillEngine(catalog)
        building = restaurant(unlocked_passives=(PassiveInstance("rush"),))
        assert engine.compute_building_snapshot(building, tick=0).interval_ms == 250

    def test_configured_interval_floor(self) -> None:
        catalog = SkillCatalog()
        catalog.define_passive(PassiveDef(id="rush", effects=(
            Effect(target="building", stat="interval", value=-0.95, mode="multiplicative"),
        )))
        engine = SkillEngine(catalog, SkillConfig(min_interval_ms=500))
        building = restaurant(unlocked_passives=(PassiveInstance("rush"),))
        assert engine.compute_building_snapshot(building, tick=0).interval_ms == 500

    def test_income_clamped_at_zero(self) -> None:
        engine = SkillEngine(SkillCatalog())
        worker = Worker(id="w", traits=(Trait(id="clumsy", effects=(income(-500),)),))
        assert engine.compute_building_snapshot(restaurant(worker), tick=0).income_per_tick == 0

    def test_non_finite_base_income(self) -> None:
        engine = SkillEngine(SkillCatalog())
        building = Building(
            instance_id="b", type_id="casino", base_income=float("nan"), base_interval_ms=1800,
        )
        assert engine.compute_building_snapshot(building, tick=0).income_per_tick == 0

    @pytest.mark.parametrize("interval", [float("inf"), float("nan")])
    def test_non_finite_base_interval_uses_floor(self, interval: float) -> None:
        engine = SkillEngine(SkillCatalog())
        building = Building(
            instance_id="b", type_id="casino", base_income=100, base_interval_ms=interval,
        )
        snap = engine.compute_building_snapshot(building, tick=0)
        assert snap.interval_ms == 250
        assert snap.income_per_tick == 100


def bonus_node(proc: ProcDef, max_rank: int = 3) -> SkillNode:
    return SkillNode(id="tipJar", cost=1, max_rank=max_rank, procs=(proc,))


class TestProcs:
    def test_proc_adjusts_income_only_and_respects_cooldown(self) -> None:
        proc = ProcDef(
            id="tips", trigger="onIncomeTick", effects=(income(10),),
            spec=ProcSpec(cooldown_ticks=3),
        )
        engine = SkillEngine(make_catalog(bonus_node(proc)))
        building = Building(
            instance_id="hotel-01", type_id="hotel", base_income=140, base_interval_ms=2200,
            staff=(worker_with("tipJar"),),
        )
        results = [engine.compute_building_snapshot(building, tick=t) for t in (10, 11, 12, 13)]
        assert [r.income_per_tick for r in results] == [150, 140, 140, 150]
        assert results[0].triggered_effects == (income(10),)
        assert results[1].triggered_effects == ()
        assert all(r.interval_ms == 2200 for r in results)

    def test_proc_bucket_applies_after_passives(self) -> None:
        proc = ProcDef(id="surge", trigger="onIncomeTick", effects=(income(0.5, "multiplicative"),))
        engine = SkillEngine(make_catalog(bonus_node(proc)))
        snap = engine.compute_building_snapshot(restaurant(worker_with("tipJar")), tick=0)
        # floor(140 * 1.12 * 1.5)
        assert snap.income_per_tick == 235

    def test_proc_effects_scale_with_rank(self) -> None:
        proc = ProcDef(id="tips", trigger="onIncomeTick", effects=(income(10),))
        engine = SkillEngine(SkillCatalog())
        engine.catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "tipJar": bonus_node(proc),
        }))
        snap = engine.compute_building_snapshot(restaurant(worker_with("tipJar", rank=3)), tick=0)
        assert snap.income_per_tick == 170
        assert snap.triggered_effects == (income(30),)

    def test_other_triggers_ignored(self) -> None:
        proc = ProcDef(id="greet", trigger="onVisitorArrive", effects=(income(10),))
        engine = SkillEngine(make_catalog(bonus_node(proc)))
        assert engine.compute_building_snapshot(restaurant(worker_with("tipJar")), tick=0).income_per_tick == 156

    def test_proc_conditions_see_building_subject(self) -> None:
        proc = ProcDef(
            id="crowd", trigger="onIncomeTick", effects=(income(10),),
            conditions=Atom("visitors", ">=", 5),
        )
        engine = SkillEngine(SkillCatalog())
        engine.catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "tipJar": bonus_node(proc),
        }))
        quiet = restaurant(worker_with("tipJar"), visitor_count=2)
        busy = restaurant(worker_with("tipJar"), visitor_count=7)
        assert engine.compute_building_snapshot(quiet, tick=0).income_per_tick == 140
        assert engine.compute_building_snapshot(busy, tick=0).income_per_tick == 150

    def test_non_building_proc_effects_reported_not_applied(self) -> None:
        city_effect = Effect(target="city", stat="reputation", value=1)
        proc = ProcDef(id="buzz", trigger="onIncomeTick", effects=(city_effect,))
        engine = SkillEngine(SkillCatalog())
        engine.catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "tipJar": bonus_node(proc),
        }))
        snap = engine.compute_building_snapshot(restaurant(worker_with("tipJar")), tick=0)
        assert snap.income_per_tick == 140
        assert snap.triggered_effects == (city_effect,)

    def test_chance_uses_call_rng(self) -> None:
        class AlwaysHigh(random.Random):
            def random(self) -> float:
                return 0.99

        proc = ProcDef(
            id="lucky", trigger="onIncomeTick", effects=(income(10),), spec=ProcSpec(chance=0.5),
        )
        engine = SkillEngine(SkillCatalog())
        engine.catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "tipJar": bonus_node(proc),
        }))
        snap = engine.compute_building_snapshot(restaurant(worker_with("tipJar")), tick=0, rng=AlwaysHigh())
        assert snap.income_per_tick == 140

    def test_reset_clears_cooldowns(self) -> None:
        proc = ProcDef(
            id="tips", trigger="onIncomeTick", effects=(income(10),),
            spec=ProcSpec(cooldown_ticks=100),
        )
        resolver = ProcResolver()
        engine = SkillEngine(SkillCatalog(), procs=resolver)
        engine.catalog.define_tree(SkillTree(id="concierge_tree", job_id="concierge", nodes={
            "tipJar": bonus_node(proc),
        }))
        building = restaurant(worker_with("tipJar"))
        assert engine.compute_building_snapshot(building, tick=0).income_per_tick == 150
        assert engine.compute_building_snapshot(building, tick=1).income_per_tick == 140
        engine.reset()
        assert resolver.tracked_procs() == []
        assert engine.compute_building_snapshot(building, tick=2).income_per_tick == 150

    def test_on_fire_hook(self) -> None:
        proc = ProcDef(id="tips", trigger="onIncomeTick", effects=(income(10),))
        engine = SkillEngine(make_catalog(bonus_node(proc)))
        fired: list[tuple[str, int]] = []
        engine.procs.on_fire(lambda p, tick: fired.append((p.id, tick)))
        engine.compute_building_snapshot(restaurant(worker_with("tipJar")), tick=4)
        assert fired == [("tips", 4)]


class TestWorkerContributions:
    def test_worker_effects_order(self) -> None:
        trait_effect = income(1)
        node = SkillNode(id="upsell", cost=1, max_rank=3, effects=(income(0.1, "multiplicative"),))
        engine = SkillEngine(make_catalog(node))
        worker = worker_with("upsell", rank=3, traits=(Trait(id="t", effects=(trait_effect,)),))
        effects = engine.worker_effects(worker)
        assert effects[0] == trait_effect
        assert effects[1].value == pytest.approx(0.2)

    def test_custom_rank_step(self) -> None:
        node = SkillNode(id="upsell", cost=1, max_rank=3, effects=(income(0.1, "multiplicative"),))
        engine = SkillEngine(make_catalog(node), SkillConfig(multiplicative_rank_step=1.0))
        (effect,) = engine.worker_effects(worker_with("upsell", rank=2))
        assert effect.value == pytest.approx(0.2)

    def test_worker_procs_do_not_mutate_definitions(self) -> None:
        proc = ProcDef(id="tips", trigger="onIncomeTick", effects=(income(10),))
        engine = SkillEngine(make_catalog(bonus_node(proc)))
        (scaled,) = engine.worker_procs(worker_with("tipJar", rank=2))
        assert scaled.effects == (income(20),)
        assert proc.effects == (income(10),)
