"""Skill trees, traits and building income for the tick engine."""
from tick_skill.catalog import (
    SkillCatalog,
    load_catalog,
    node_from_dict,
    passive_from_dict,
    trait_from_dict,
    tree_from_dict,
)
from tick_skill.config import SkillConfig
from tick_skill.engine import SkillEngine
from tick_skill.types import (
    Building,
    BuildingSnapshot,
    SkillNode,
    SkillTree,
    Trait,
    Worker,
)

__all__ = [
    "Building",
    "BuildingSnapshot",
    "SkillCatalog",
    "SkillConfig",
    "SkillEngine",
    "SkillNode",
    "SkillTree",
    "Trait",
    "Worker",
    "load_catalog",
    "node_from_dict",
    "passive_from_dict",
    "trait_from_dict",
    "tree_from_dict",
]
