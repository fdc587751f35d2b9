"""Rule-driven visual asset resolution for the tick engine."""
from tick_sprite.content import (
    asset_from_dict,
    load_registry,
    pack_from_dict,
    rule_from_dict,
)
from tick_sprite.hashing import hash_string, pick_index, stable_json
from tick_sprite.registry import AssetRegistry
from tick_sprite.resolver import SpriteResolver
from tick_sprite.types import (
    Animation,
    AssetDef,
    AssetPack,
    ResolvedSprite,
    ResolveRequest,
    SpriteRule,
)

__all__ = [
    "Animation",
    "AssetDef",
    "AssetPack",
    "AssetRegistry",
    "ResolveRequest",
    "ResolvedSprite",
    "SpriteResolver",
    "SpriteRule",
    "asset_from_dict",
    "hash_string",
    "load_registry",
    "pack_from_dict",
    "pick_index",
    "rule_from_dict",
    "stable_json",
]
