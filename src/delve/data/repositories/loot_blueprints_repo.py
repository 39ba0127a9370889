"""Repository for item blueprints that loot drops are scaled from."""
from __future__ import annotations

from typing import Dict, List

from delve.data.errors import DataValidationError
from delve.data.repositories.base import RepositoryBase
from delve.domain.defs import LootBlueprintDef
from delve.domain.entities import SetBonus

_CATEGORIES = ("weapon", "armor", "potion")
_SET_BONUS_STATS = ("damage", "armor", "strength", "dexterity", "intelligence", "mana")


class LootBlueprintsRepository(RepositoryBase[LootBlueprintDef]):
    """Loads and validates loot blueprint definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("loot_blueprints.json", base_path)

    def pool(self, category: str, rarity: str) -> List[LootBlueprintDef]:
        """Blueprints of one category at exactly one rarity tier, sorted by id."""
        return [bp for bp in self.all() if bp.category == category and bp.rarity == rarity]

    def _build(self, raw: dict[str, object]) -> Dict[str, LootBlueprintDef]:
        blueprints: Dict[str, LootBlueprintDef] = {}
        for blueprint_id, payload in raw.items():
            context = f"blueprint '{blueprint_id}'"
            data = self._require_mapping(payload, context)
            category = self._require_str(data.get("category"), f"{context}.category")
            if category not in _CATEGORIES:
                raise DataValidationError(f"{context}.category must be one of {', '.join(_CATEGORIES)}.")
            rarity = self._require_rarity(data.get("rarity"), f"{context}.rarity")
            weight = self._require_int(data.get("weight"), f"{context}.weight", minimum=1)
            base_value = self._require_int(data.get("base_value", 0), f"{context}.base_value", minimum=0)
            base_damage = data.get("base_damage")
            if base_damage is not None:
                base_damage = self._require_int(base_damage, f"{context}.base_damage", minimum=0)
            base_armor = data.get("base_armor")
            if base_armor is not None:
                base_armor = self._require_int(base_armor, f"{context}.base_armor", minimum=0)
            if category == "weapon" and base_damage is None:
                raise DataValidationError(f"{context} is a weapon and needs base_damage.")
            if category == "armor" and base_armor is None:
                raise DataValidationError(f"{context} is armor and needs base_armor.")

            set_name = data.get("set_name")
            if set_name is not None:
                set_name = self._require_str(set_name, f"{context}.set_name")
            set_bonuses = self._build_set_bonuses(data.get("set_bonuses", []), context)
            if set_bonuses and set_name is None:
                raise DataValidationError(f"{context} declares set_bonuses without a set_name.")

            blueprints[blueprint_id] = LootBlueprintDef(
                id=blueprint_id,
                name=self._require_str(data.get("name"), f"{context}.name"),
                category=category,  # type: ignore[arg-type]
                type=self._require_str(data.get("type"), f"{context}.type"),
                rarity=rarity,  # type: ignore[arg-type]
                weight=weight,
                base_value=base_value,
                base_damage=base_damage,
                base_armor=base_armor,
                two_handed=bool(data.get("two_handed", False)),
                set_name=set_name,
                set_bonuses=set_bonuses,
            )
        return blueprints

    def _build_set_bonuses(self, value: object, context: str) -> List[SetBonus]:
        entries = self._require_list(value, f"{context}.set_bonuses")
        bonuses: List[SetBonus] = []
        for index, entry in enumerate(entries):
            entry_ctx = f"{context}.set_bonuses[{index}]"
            data = self._require_mapping(entry, entry_ctx)
            unknown = set(data) - set(_SET_BONUS_STATS) - {"pieces_required"}
            if unknown:
                raise DataValidationError(f"{entry_ctx} has unknown stats: {', '.join(sorted(unknown))}.")
            bonuses.append(
                SetBonus(
                    pieces_required=self._require_int(
                        data.get("pieces_required"), f"{entry_ctx}.pieces_required", minimum=1
                    ),
                    **{stat: self._require_int(data.get(stat, 0), f"{entry_ctx}.{stat}") for stat in _SET_BONUS_STATS},
                )
            )
        return bonuses
