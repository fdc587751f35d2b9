"""Build an AssetRegistry from authored content dicts."""
from __future__ import annotations

from typing import Any

from tick_condition import parse_condition

from tick_sprite.registry import AssetRegistry
from tick_sprite.types import Animation, AssetDef, AssetPack, SpriteRule


def _sequence(data: dict[str, Any], key: str) -> tuple[Any, ...]:
    """Read a list field. A bare string is rejected rather than split."""
    raw = data.get(key)
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"{key!r} must be a list, got {raw!r}")
    return tuple(raw)


def asset_from_dict(data: dict[str, Any], pack_id: str | None = None) -> AssetDef:
    """Parse one asset. ``pack_id`` fills ``source_pack_id`` when absent."""
    raw_animation = data.get("animation")
    animation = None
    if raw_animation:
        animation = Animation(
            frames=_sequence(raw_animation, "frames"),
            fps=raw_animation["fps"],
            loop=raw_animation.get("loop", True),
        )
    return AssetDef(
        id=data["id"],
        kind=data["kind"],
        uri=data["uri"],
        tags=_sequence(data, "tags"),
        meta=dict(data.get("meta") or {}),
        animation=animation,
        fallbacks=_sequence(data, "fallbacks"),
        source_pack_id=data.get("sourcePackId", pack_id),
    )


def rule_from_dict(data: dict[str, Any]) -> SpriteRule:
    conditions = data.get("conditions")
    weights = data.get("weights")
    return SpriteRule(
        id=data["id"],
        kind=data["kind"],
        target=data["target"],
        priority=data.get("priority", 0),
        candidates=_sequence(data, "candidates"),
        mode=data.get("mode") or "first",
        conditions=parse_condition(conditions) if conditions else None,
        variant=data.get("variant"),
        facing=data.get("facing"),
        weights=_sequence(data, "weights") if weights is not None else None,
        deterministic_key_paths=_sequence(data, "deterministicKeyPaths"),
        fallback_rule_id=data.get("fallbackRuleId"),
        tags=_sequence(data, "tags"),
    )


def pack_from_dict(data: dict[str, Any]) -> AssetPack:
    pack_id = data["id"]
    return AssetPack(
        id=pack_id,
        name=data.get("name", ""),
        description=data.get("description", ""),
        assets={
            asset_id: asset_from_dict(raw, pack_id)
            for asset_id, raw in (data.get("assets") or {}).items()
        },
        rules={
            rule_id: rule_from_dict(raw)
            for rule_id, raw in (data.get("rules") or {}).items()
        },
    )


def load_registry(
    data: dict[str, Any], registry: AssetRegistry | None = None
) -> AssetRegistry:
    """Populate a registry from ``{"assets", "rules", "packs", "activePackIds"}``.

    Validation errors (unknown kind, mode, operator...) raise ValueError
    here, at load time, rather than during resolution.
    """
    registry = registry if registry is not None else AssetRegistry()
    for raw in (data.get("assets") or {}).values():
        registry.define_asset(asset_from_dict(raw))
    for raw in (data.get("rules") or {}).values():
        registry.define_rule(rule_from_dict(raw))
    for raw in (data.get("packs") or {}).values():
        registry.define_pack(pack_from_dict(raw))
    if "activePackIds" in data:
        registry.set_active_packs(data["activePackIds"] or ())
    return registry
