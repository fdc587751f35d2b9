"""SkillCatalog — static passive, trait and skill-tree definitions."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from tick_modifier import Effect, PassiveDef, PassiveInstance
from tick_proc import ProcDef

from tick_skill.types import SkillNode, SkillTree, Trait, Worker


class SkillCatalog:
    """Definitions loaded once per session and read by SkillEngine.

    Lookups named after the definition return None for unknown ids;
    ``get_*`` accessors raise KeyError.
    """

    def __init__(self) -> None:
        self._passives: dict[str, PassiveDef] = {}
        self._default_passives: dict[str, tuple[PassiveInstance, ...]] = {}
        self._trees: dict[str, SkillTree] = {}
        self._traits: dict[str, Trait] = {}

    # --- Registration ---

    def define_passive(self, passive: PassiveDef) -> None:
        self._passives[passive.id] = passive

    def define_tree(self, tree: SkillTree) -> None:
        self._trees[tree.id] = tree

    def define_trait(self, trait: Trait) -> None:
        self._traits[trait.id] = trait

    def set_default_passives(
        self, building_type: str, instances: Iterable[PassiveInstance]
    ) -> None:
        """Passives a building of ``building_type`` gets while it has none unlocked."""
        self._default_passives[building_type] = tuple(instances)

    # --- Queries ---

    def passive(self, passive_id: str) -> PassiveDef | None:
        return self._passives.get(passive_id)

    def passive_definitions(self) -> Mapping[str, PassiveDef]:
        return self._passives

    def default_passives(self, building_type: str) -> tuple[PassiveInstance, ...]:
        return self._default_passives.get(building_type, ())

    def tree(self, tree_id: str) -> SkillTree | None:
        return self._trees.get(tree_id)

    def get_tree(self, tree_id: str) -> SkillTree:
        if tree_id not in self._trees:
            raise KeyError(f"Unknown skill tree: {tree_id!r}")
        return self._trees[tree_id]

    def trees(self) -> list[str]:
        return list(self._trees)

    def trait(self, trait_id: str) -> Trait | None:
        return self._traits.get(trait_id)

    def get_trait(self, trait_id: str) -> Trait:
        if trait_id not in self._traits:
            raise KeyError(f"Unknown trait: {trait_id!r}")
        return self._traits[trait_id]

    def node(self, tree_id: str, node_id: str) -> SkillNode | None:
        tree = self._trees.get(tree_id)
        if tree is None:
            return None
        return tree.nodes.get(node_id)

    # --- Progression ---

    def can_unlock(self, worker: Worker, tree_id: str, node_id: str) -> bool:
        """True if ``worker`` may gain one rank in the node.

        The node must exist, be below ``max_rank`` and have every
        prerequisite unlocked. Cost and requirements are left to the caller.
        """
        node = self.node(tree_id, node_id)
        if node is None:
            return False
        if worker.rank(tree_id, node_id) >= node.max_rank:
            return False
        return all(worker.rank(tree_id, req) > 0 for req in node.prerequisites)

    def unlock_node(self, worker: Worker, tree_id: str, node_id: str) -> int:
        """Add one rank to the node and return the new rank.

        Raises ValueError if ``can_unlock`` is False.
        """
        if not self.can_unlock(worker, tree_id, node_id):
            raise ValueError(
                f"Cannot unlock {tree_id}/{node_id} for worker {worker.id!r}"
            )
        progress = worker.skill_trees.setdefault(tree_id, {})
        progress[node_id] = progress.get(node_id, 0) + 1
        return progress[node_id]


# --- Loading ---


def _sequence(data: dict[str, Any], key: str) -> tuple[Any, ...]:
    """Read a list field. A bare string is rejected rather than split."""
    raw = data.get(key)
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{key!r} must be a list, got {raw!r}")
    return tuple(raw)


def _effects(data: dict[str, Any]) -> tuple[Effect, ...]:
    return tuple(Effect.from_dict(e) for e in _sequence(data, "effects"))


def _values(raw: Any) -> list[Any]:
    if isinstance(raw, Mapping):
        return list(raw.values())
    return list(raw or ())


def passive_from_dict(data: dict[str, Any]) -> PassiveDef:
    return PassiveDef(
        id=data["id"],
        effects=_effects(data),
        description_key=data.get("descriptionKey", ""),
    )


def trait_from_dict(data: dict[str, Any]) -> Trait:
    return Trait(
        id=data["id"],
        effects=_effects(data),
        description_key=data.get("descriptionKey", ""),
    )


def node_from_dict(data: dict[str, Any]) -> SkillNode:
    return SkillNode(
        id=data["id"],
        cost=data.get("cost", 0),
        max_rank=data.get("maxRank", 1),
        effects=_effects(data),
        prerequisites=_sequence(data, "prerequisites"),
        procs=tuple(ProcDef.from_dict(p) for p in _sequence(data, "procs")),
        requirements=data.get("requirements"),
    )


def tree_from_dict(data: dict[str, Any]) -> SkillTree:
    nodes = [node_from_dict(raw) for raw in _values(data.get("nodes"))]
    return SkillTree(
        id=data["id"],
        job_id=data.get("jobId", ""),
        nodes={node.id: node for node in nodes},
    )


def load_catalog(
    data: dict[str, Any], catalog: SkillCatalog | None = None
) -> SkillCatalog:
    """Populate a catalog from authored content.

    Keys: ``passives``, ``traits``, ``skillTrees`` (each a list or an
    id-keyed dict) and ``buildingPassives`` (building type to a list of
    ``{"passiveId", "level"}``). Malformed entries raise ValueError or
    KeyError here, never during computation.
    """
    catalog = catalog if catalog is not None else SkillCatalog()
    for raw in _values(data.get("passives")):
        catalog.define_passive(passive_from_dict(raw))
    for raw in _values(data.get("traits")):
        catalog.define_trait(trait_from_dict(raw))
    for raw in _values(data.get("skillTrees")):
        catalog.define_tree(tree_from_dict(raw))
    for building_type, raw in (data.get("buildingPassives") or {}).items():
        catalog.set_default_passives(building_type, (
            PassiveInstance(passive_id=item["passiveId"], level=item.get("level", 1))
            for item in raw
        ))
    return catalog
