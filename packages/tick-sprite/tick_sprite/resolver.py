"""SpriteResolver — rule matching, candidate selection and result caching."""
from __future__ import annotations

import logging
import math
import random as _random_mod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from tick_condition import MISSING, evaluate, read_path

from tick_sprite.hashing import pick_index, stable_json
from tick_sprite.registry import AssetRegistry
from tick_sprite.types import AssetDef, ResolvedSprite, ResolveRequest, SpriteRule

logger = logging.getLogger(__name__)


class SpriteResolver:
    """Resolves visual requests against an AssetRegistry.

    Results, including misses, are cached per request until the registry
    changes or ``clear_cache`` is called. The cache is unbounded: it holds
    one entry per distinct request, so callers with unbounded entity sets
    should call ``clear_cache`` periodically. ``deterministic`` rules give the
    same asset for the same request in every process; ``random`` rules
    draw from ``rng`` once per distinct request and are not reproducible
    unless ``rng`` is seeded.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        rng: _random_mod.Random | None = None,
    ) -> None:
        self._registry = registry
        self._rng = rng if rng is not None else _random_mod.Random()
        self._cache: dict[str, ResolvedSprite | None] = {}
        self._seen_gen: int = registry.generation

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    # --- Resolution ---

    def resolve(self, request: ResolveRequest) -> ResolvedSprite | None:
        """Return the asset to draw for ``request``, or None."""
        if self._registry.generation != self._seen_gen:
            self._seen_gen = self._registry.generation
            self._cache.clear()

        key = self._cache_key(request)
        if key in self._cache:
            return self._cache[key]

        for rule in self._matching_rules(request):
            candidate_id = self._pick_candidate(rule, request)
            if candidate_id is None:
                logger.debug("rule %s has no candidates, skipped", rule.id)
                continue

            asset = self._registry.asset(candidate_id)
            if asset is None and rule.fallback_rule_id:
                fallback = self._resolve_by_rule_id(
                    rule.fallback_rule_id, request, {rule.id}
                )
                if fallback is not None:
                    self._cache[key] = fallback
                    return fallback

            if asset is None:
                continue

            resolved = self._build(asset, request, rule.id)
            self._cache[key] = resolved
            return resolved

        logger.debug("no asset for %s/%s", request.kind, request.target)
        self._cache[key] = None
        return None

    def clear_cache(self) -> None:
        """Drop all cached results."""
        self._cache.clear()

    def cache_size(self) -> int:
        return len(self._cache)

    # --- Matching ---

    def _matching_rules(self, request: ResolveRequest) -> list[SpriteRule]:
        """Matching rules by priority, highest first. Stable on ties."""
        context: dict[str, Any] | None = None
        matches: list[SpriteRule] = []
        for rule in self._registry.rules():
            if rule.kind != request.kind or rule.target != request.target:
                continue
            if rule.variant is not None and rule.variant != request.variant:
                continue
            if rule.facing is not None and rule.facing != request.facing:
                continue
            if rule.conditions is not None:
                if context is None:
                    context = self._condition_context(request)
                if not evaluate(rule.conditions, context):
                    continue
            matches.append(rule)
        matches.sort(key=lambda r: r.priority, reverse=True)
        return matches

    def _condition_context(self, request: ResolveRequest) -> dict[str, Any]:
        context: dict[str, Any] = {
            "kind": request.kind,
            "target": request.target,
            "variant": request.variant,
            "facing": request.facing,
            "entity": request.entity,
        }
        if request.context:
            context.update(request.context)
        return context

    # --- Candidate selection ---

    def _pick_candidate(
        self, rule: SpriteRule, request: ResolveRequest
    ) -> str | None:
        candidates = rule.candidates
        if not candidates:
            return None

        if rule.mode == "first":
            return candidates[0]

        if rule.mode == "random":
            weights = rule.weights
            if (
                weights is not None
                and len(weights) == len(candidates)
                and all(w >= 0 and math.isfinite(w) for w in weights)
                and sum(weights) > 0
            ):
                return self._rng.choices(candidates, weights=weights)[0]
            return candidates[self._rng.randrange(len(candidates))]

        return candidates[pick_index(self._seed(rule, request), len(candidates))]

    def _seed(self, rule: SpriteRule, request: ResolveRequest) -> str:
        """Seed string: seed_key, then values at the rule's key paths.

        With neither, a mapping or list entity seeds by its canonical JSON.
        """
        parts: list[str] = []
        if request.seed_key:
            parts.append(str(request.seed_key))

        if rule.deterministic_key_paths:
            root = {
                "entity": request.entity,
                "context": request.context or {},
                "variant": request.variant,
                "facing": request.facing,
                "target": request.target,
                "kind": request.kind,
            }
            for path in rule.deterministic_key_paths:
                value = read_path(root, path)
                if value is not MISSING:
                    parts.append(_seed_part(value))

        if not parts and isinstance(request.entity, (Mapping, list, tuple)):
            parts.append(stable_json(request.entity))
        return "|".join(parts)

    # --- Fallbacks ---

    def _resolve_by_rule_id(
        self,
        rule_id: str,
        request: ResolveRequest,
        visited: set[str],
    ) -> ResolvedSprite | None:
        """Resolve through a named rule, following its own fallbacks.

        Conditions and variant/facing filters of the named rule are not
        re-checked. A fallback cycle ends the chain with None.
        """
        if rule_id in visited:
            logger.debug("fallback cycle at rule %s", rule_id)
            return None
        visited.add(rule_id)

        rule = self._registry.rule(rule_id)
        if rule is None:
            return None

        logger.debug("falling back to rule %s", rule_id)
        candidate_id = self._pick_candidate(rule, request)
        asset = (
            self._registry.asset(candidate_id)
            if candidate_id is not None else None
        )
        if asset is None:
            if rule.fallback_rule_id:
                return self._resolve_by_rule_id(
                    rule.fallback_rule_id, request, visited
                )
            return None
        return self._build(asset, request, rule.id)

    # --- Helpers ---

    def _build(
        self, asset: AssetDef, request: ResolveRequest, rule_id: str
    ) -> ResolvedSprite:
        return ResolvedSprite(
            asset_id=asset.id,
            uri=asset.uri,
            kind=asset.kind,
            variant=request.variant,
            facing=request.facing,
            meta=MappingProxyType(dict(asset.meta)),
            animation=asset.animation,
            resolved_by_rule_id=rule_id,
            source_pack_id=asset.source_pack_id,
        )

    def _cache_key(self, request: ResolveRequest) -> str:
        return stable_json([
            request.kind,
            request.target,
            request.variant,
            request.facing,
            request.entity,
            request.seed_key,
            request.context,
        ])


def _seed_part(value: Any) -> str:
    """Render a key-path value the way it reads in JSON content."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return stable_json(value)
