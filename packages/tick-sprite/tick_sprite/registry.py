"""AssetRegistry — base assets and rules plus prioritized override packs."""
from __future__ import annotations

from collections.abc import Iterable

from tick_sprite.types import AssetDef, AssetPack, SpriteRule


class AssetRegistry:
    """Stores asset, rule and pack definitions.

    Active packs are consulted in priority order (first wins) before the
    base definitions, for both assets and rules. Every change bumps
    ``generation`` so resolvers can drop stale cache entries.
    """

    def __init__(self) -> None:
        self._assets: dict[str, AssetDef] = {}
        self._rules: dict[str, SpriteRule] = {}
        self._packs: dict[str, AssetPack] = {}
        self._active_pack_ids: list[str] = []
        self._generation: int = 0

    @property
    def generation(self) -> int:
        """Counter incremented on every definition or activation change."""
        return self._generation

    # --- Registration ---

    def define_asset(self, asset: AssetDef) -> None:
        """Register a base asset. Overwrites if id exists."""
        self._assets[asset.id] = asset
        self._generation += 1

    def define_rule(self, rule: SpriteRule) -> None:
        """Register a base rule. Insertion order preserved on overwrite."""
        self._rules[rule.id] = rule
        self._generation += 1

    def define_pack(self, pack: AssetPack) -> None:
        """Register an override pack. Does not activate it."""
        self._packs[pack.id] = pack
        self._generation += 1

    def set_active_packs(self, pack_ids: Iterable[str]) -> None:
        """Replace the active pack list. Earlier ids take precedence.

        Unknown and repeated ids are dropped.
        """
        active: list[str] = []
        for pack_id in pack_ids:
            if pack_id in self._packs and pack_id not in active:
                active.append(pack_id)
        self._active_pack_ids = active
        self._generation += 1

    # --- Queries ---

    def active_packs(self) -> list[str]:
        """Active pack ids in precedence order."""
        return list(self._active_pack_ids)

    def pack(self, pack_id: str) -> AssetPack | None:
        return self._packs.get(pack_id)

    def packs(self) -> list[str]:
        """All defined pack ids."""
        return list(self._packs)

    def asset(self, asset_id: str) -> AssetDef | None:
        """Effective asset: first active pack override, else base, else None."""
        for pack_id in self._active_pack_ids:
            override = self._packs[pack_id].assets.get(asset_id)
            if override is not None:
                return override
        return self._assets.get(asset_id)

    def base_asset(self, asset_id: str) -> AssetDef | None:
        """Base asset, ignoring packs."""
        return self._assets.get(asset_id)

    def has_asset(self, asset_id: str) -> bool:
        return self.asset(asset_id) is not None

    def rule(self, rule_id: str) -> SpriteRule | None:
        """Effective rule: first active pack override, else base, else None."""
        for pack_id in self._active_pack_ids:
            override = self._packs[pack_id].rules.get(rule_id)
            if override is not None:
                return override
        return self._rules.get(rule_id)

    def has_rule(self, rule_id: str) -> bool:
        return self.rule(rule_id) is not None

    def rules(self) -> list[SpriteRule]:
        """Effective rules: base order first, then pack-only rule ids."""
        ids = list(self._rules)
        for pack_id in self._active_pack_ids:
            for rule_id in self._packs[pack_id].rules:
                if rule_id not in ids:
                    ids.append(rule_id)
        result: list[SpriteRule] = []
        for rule_id in ids:
            rule = self.rule(rule_id)
            if rule is not None:
                result.append(rule)
        return result

    def asset_ids(self) -> list[str]:
        """Base asset ids in definition order."""
        return list(self._assets)
