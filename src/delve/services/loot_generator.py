"""Loot generation: rarity, blueprint, stats and affixes for enemy drops.

Generation is pure with respect to the session: it reads definitions and
draws from the RNG it is given, and returns new :class:`Item` objects owned
by ``LootContext.character_id``. Persisting and announcing drops is the
caller's job.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import FrozenSet, List, Sequence

from delve.core.rng import RNG, pick_index
from delve.core.types import DropSource, EnemyRarity, ItemCategory
from delve.data.repositories import AffixesRepository, LootBlueprintsRepository, RarityTablesRepository
from delve.domain.defs import LootBlueprintDef, RarityTableDef
from delve.domain.entities import Affix, Item, SetBonus
from delve.domain.rarity import (
    AFFIX_COUNTS,
    ITEM_RARITIES,
    RARITY_MULTIPLIERS,
    clamp_rarity,
    lower_rarities,
    rarity_rank,
)
from delve.services.factories import make_instance_id

logger = logging.getLogger(__name__)

WEAPON_SHARE = 0.60
POTION_SHARE = 0.12

WEAPON_LEVEL_COEFFICIENT = 2.0
WEAPON_JITTER = 10
WEAPON_VALUE_COEFFICIENT = 5
ARMOR_LEVEL_COEFFICIENT = 1.5
ARMOR_JITTER = 5
ARMOR_VALUE_COEFFICIENT = 8
AFFIX_INDEX_STEP = 0.25

# How strongly full heat tilts the table toward the top tiers.
HEAT_TIER_BIAS = 1.0
HEAT_SET_BONUS = 0.01

BOSS_MIN_RARITY = "rare"
MIMIC_MIN_RARITY = "magic"

FALLBACK_ITEM_NAME = "Tarnished Trinket"
FALLBACK_ITEM_TYPE = "trinket"
FALLBACK_ITEM_ARMOR = 1
FALLBACK_ITEM_VALUE = 5


@dataclass(frozen=True, slots=True)
class LootContext:
    """The kill a drop is being generated for."""

    character_id: str
    enemy_level: int
    enemy_rarity: EnemyRarity = "normal"
    source: DropSource = "standard"
    zone_heat: int = 0
    excluded_rarities: FrozenSet[str] = field(default_factory=frozenset)


class LootGenerator:
    """Rolls drops from the blueprint, affix and rarity-table definitions."""

    def __init__(
        self,
        blueprints_repo: LootBlueprintsRepository,
        affixes_repo: AffixesRepository,
        rarity_tables_repo: RarityTablesRepository,
        *,
        boss_drop_count: int = 3,
        mimic_second_drop_chance: float = 0.5,
    ) -> None:
        self._blueprints_repo = blueprints_repo
        self._affixes_repo = affixes_repo
        self._rarity_tables_repo = rarity_tables_repo
        self._boss_drop_count = max(1, boss_drop_count)
        self._mimic_second_drop_chance = mimic_second_drop_chance

    # ------------------------------------------------------------- Policies
    def generate(self, context: LootContext, rng: RNG) -> List[Item]:
        """Apply the drop policy for ``context.source``; never returns an empty list."""
        if context.source == "boss":
            drops = [
                self.roll_item(context, rng, minimum_rarity=BOSS_MIN_RARITY, guaranteed=True)
                for _ in range(self._boss_drop_count)
            ]
        elif context.source == "mimic":
            drops = [self.roll_item(context, rng, minimum_rarity=MIMIC_MIN_RARITY, guaranteed=True)]
            if rng.random() < self._mimic_second_drop_chance:
                drops.append(self.roll_item(context, rng))
        else:
            drops = [self.roll_item(context, rng)]

        kept = self._apply_exclusions([drop for drop in drops if drop is not None], context.excluded_rarities)
        if not kept:
            kept = [self.fallback_item(context.character_id, rng)]
        logger.debug(
            "Rolled %d drop(s) for %s kill: %s",
            len(kept),
            context.source,
            ", ".join(f"{item.rarity} {item.name}" for item in kept),
        )
        return kept

    @staticmethod
    def _apply_exclusions(drops: Sequence[Item], excluded: FrozenSet[str]) -> List[Item]:
        kept = []
        for item in drops:
            if item.rarity in excluded:
                logger.debug("Dropped %s %s filtered by rarity exclusion", item.rarity, item.name)
                continue
            kept.append(item)
        return kept

    def fallback_item(self, character_id: str, rng: RNG) -> Item:
        return Item(
            id=make_instance_id("item", rng),
            character_id=character_id,
            name=FALLBACK_ITEM_NAME,
            type=FALLBACK_ITEM_TYPE,
            rarity="common",
            value=FALLBACK_ITEM_VALUE,
            armor=FALLBACK_ITEM_ARMOR,
        )

    # --------------------------------------------------------------- Rolls
    def rarity_table(self, enemy_rarity: str, zone_heat: int = 0) -> RarityTableDef:
        """The enemy tier's table with heat tilting weight toward higher tiers."""
        try:
            base = self._rarity_tables_repo.get(enemy_rarity)
        except KeyError:
            base = self._rarity_tables_repo.get("normal")
        heat = max(0, min(100, zone_heat)) / 100
        top_rank = len(ITEM_RARITIES) - 1
        weights = {}
        for rarity, weight in base.weights.items():
            shifted = weight * (1 + heat * HEAT_TIER_BIAS * rarity_rank(rarity) / top_rank)
            if rarity == "set":
                shifted += heat * HEAT_SET_BONUS
            weights[rarity] = shifted
        return RarityTableDef(id=base.id, weights=weights)

    def roll_rarity(self, enemy_rarity: str, zone_heat: int, rng: RNG) -> str:
        roll = rng.random()
        steps = self.rarity_table(enemy_rarity, zone_heat).cumulative()
        for rarity, threshold in steps:
            if roll < threshold:
                return rarity
        return steps[-1][0]

    @staticmethod
    def roll_category(rng: RNG, *, guaranteed: bool = False) -> ItemCategory:
        """Weapon/potion/armor split; guaranteed rolls never yield potions."""
        roll = rng.random()
        if guaranteed:
            return "weapon" if roll < WEAPON_SHARE / (1 - POTION_SHARE) else "armor"
        if roll < WEAPON_SHARE:
            return "weapon"
        if roll < WEAPON_SHARE + POTION_SHARE:
            return "potion"
        return "armor"

    def pick_blueprint(self, category: str, rarity: str, rng: RNG) -> LootBlueprintDef | None:
        """Weighted pick at ``rarity``, descending the ladder when a tier is empty."""
        for tier in lower_rarities(rarity):
            pool = self._blueprints_repo.pool(category, tier)
            if not pool:
                continue
            total = sum(blueprint.weight for blueprint in pool)
            roll = rng.random() * total
            running = 0
            for blueprint in pool:
                running += blueprint.weight
                if roll < running:
                    return blueprint
            return pool[-1]
        return None

    def roll_item(
        self,
        context: LootContext,
        rng: RNG,
        *,
        minimum_rarity: str | None = None,
        guaranteed: bool = False,
    ) -> Item | None:
        rarity = self.roll_rarity(context.enemy_rarity, context.zone_heat, rng)
        if minimum_rarity is not None:
            rarity = clamp_rarity(rarity, minimum_rarity)
        category = self.roll_category(rng, guaranteed=guaranteed)
        blueprint = self.pick_blueprint(category, rarity, rng)
        if blueprint is None:
            logger.warning("No %s blueprint at or below %s", category, rarity)
            return None
        return self.build_item(blueprint, context, rng)

    # ---------------------------------------------------------------- Build
    def build_item(self, blueprint: LootBlueprintDef, context: LootContext, rng: RNG) -> Item:
        """Scale ``blueprint`` by enemy level and its tier, then roll affixes."""
        multiplier = RARITY_MULTIPLIERS[blueprint.rarity]
        level = max(1, context.enemy_level)
        damage: int | None = None
        armor: int | None = None
        value = blueprint.base_value
        if blueprint.category == "weapon":
            base = blueprint.base_damage or 0
            damage = math.floor((base + level * WEAPON_LEVEL_COEFFICIENT + rng.random() * WEAPON_JITTER) * multiplier)
            value = math.floor(damage * WEAPON_VALUE_COEFFICIENT * multiplier)
        elif blueprint.category == "armor":
            base = blueprint.base_armor or 0
            armor = math.floor((base + level * ARMOR_LEVEL_COEFFICIENT + rng.random() * ARMOR_JITTER) * multiplier)
            value = math.floor(armor * ARMOR_VALUE_COEFFICIENT * multiplier)

        return Item(
            id=make_instance_id("item", rng),
            character_id=context.character_id,
            name=blueprint.name,
            type=blueprint.type,
            rarity=blueprint.rarity,
            value=value,
            damage=damage,
            armor=armor,
            affixes=self.roll_affixes(blueprint.category, blueprint.rarity, rng),
            two_handed=blueprint.two_handed,
            set_name=blueprint.set_name,
            set_bonuses=[
                SetBonus(
                    pieces_required=bonus.pieces_required,
                    damage=bonus.damage,
                    armor=bonus.armor,
                    strength=bonus.strength,
                    dexterity=bonus.dexterity,
                    intelligence=bonus.intelligence,
                    mana=bonus.mana,
                )
                for bonus in blueprint.set_bonuses
            ],
        )

    def roll_affixes(self, category: str, rarity: str, rng: RNG) -> List[Affix]:
        """Draw the tier's affix count without replacement; later picks roll larger."""
        candidates = list(self._affixes_repo.pool_for(category))
        count = min(AFFIX_COUNTS.get(rarity, 0), len(candidates))
        multiplier = RARITY_MULTIPLIERS.get(rarity, 1.0)
        affixes: List[Affix] = []
        for index in range(count):
            affix_def = candidates.pop(pick_index(len(candidates), rng))
            magnitude = math.floor(affix_def.value * multiplier * (1 + AFFIX_INDEX_STEP * index))
            affixes.append(Affix(name=affix_def.name, stat=affix_def.stat, value=max(1, magnitude)))
        return affixes
