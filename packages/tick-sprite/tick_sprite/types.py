"""Core data types for visual asset selection."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tick_condition import Condition

KINDS = frozenset({"sprite", "portrait", "icon", "effect", "tileset"})
TARGETS = frozenset({
    "visitor", "worker", "building", "upgrade", "skill", "city", "effect",
})
MODES = frozenset({"first", "random", "deterministic"})


@dataclass(frozen=True)
class Animation:
    frames: tuple[str, ...]
    fps: float
    loop: bool = True


@dataclass(frozen=True)
class AssetDef:
    """Immutable visual asset definition.

    Attributes:
        id: Unique, stable identifier.
        kind: Visual category ("sprite", "portrait", "icon", ...).
        uri: Path, URL, data URI or atlas frame reference.
        tags: Free-form tags for tooling.
        meta: Rendering hints (width, height, scale, pivot, zIndex).
        animation: Frame list for animated assets.
        fallbacks: Alternative asset ids. Informational; resolution does
            not walk them.
        source_pack_id: Pack that supplied this definition, if any.
    """

    id: str
    kind: str
    uri: str
    tags: tuple[str, ...] = ()
    meta: dict[str, Any] = field(default_factory=dict)
    animation: Animation | None = None
    fallbacks: tuple[str, ...] = ()
    source_pack_id: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("AssetDef id must be non-empty")
        if self.kind not in KINDS:
            raise ValueError(f"Unknown visual kind: {self.kind!r}")


@dataclass(frozen=True)
class SpriteRule:
    """Declarative matcher selecting an asset for a request.

    Higher ``priority`` wins. ``variant``/``facing`` left as None match any
    request value. ``weights`` only affect ``random`` mode.
    """

    id: str
    kind: str
    target: str
    priority: int
    candidates: tuple[str, ...]
    mode: str = "first"
    conditions: Condition | None = None
    variant: str | None = None
    facing: str | None = None
    weights: tuple[float, ...] | None = None
    deterministic_key_paths: tuple[str, ...] = ()
    fallback_rule_id: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("SpriteRule id must be non-empty")
        if self.kind not in KINDS:
            raise ValueError(f"Unknown visual kind: {self.kind!r}")
        if self.target not in TARGETS:
            raise ValueError(f"Unknown rule target: {self.target!r}")
        if self.mode not in MODES:
            raise ValueError(f"Unknown selection mode: {self.mode!r}")
        if not _is_number(self.priority):
            raise ValueError(f"priority must be a number, got {self.priority!r}")
        if self.weights is not None and not all(_is_number(w) for w in self.weights):
            raise ValueError(f"weights must be numbers, got {self.weights!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class AssetPack:
    """A named set of asset and rule overrides."""

    id: str
    name: str = ""
    description: str = ""
    assets: dict[str, AssetDef] = field(default_factory=dict)
    rules: dict[str, SpriteRule] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolveRequest:
    """What the renderer asks for: an asset for ``entity`` in a given state."""

    kind: str
    target: str
    entity: Any = None
    context: dict[str, Any] | None = None
    variant: str | None = None
    facing: str | None = None
    seed_key: str | None = None


@dataclass(frozen=True)
class ResolvedSprite:
    """The chosen asset, still engine-agnostic."""

    asset_id: str
    uri: str
    kind: str
    variant: str | None = None
    facing: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    animation: Animation | None = None
    resolved_by_rule_id: str | None = None
    source_pack_id: str | None = None
