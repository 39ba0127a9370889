"""Item, affix and set-bonus models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from delve.core.types import ItemRarity


@dataclass(slots=True)
class Affix:
    """Named stat modifier rolled onto an item."""

    name: str
    stat: str
    value: int


@dataclass(slots=True)
class SetBonus:
    """Stat deltas unlocked once ``pieces_required`` set items are equipped."""

    pieces_required: int
    damage: int = 0
    armor: int = 0
    strength: int = 0
    dexterity: int = 0
    intelligence: int = 0
    mana: int = 0


@dataclass(slots=True)
class Item:
    """An owned item instance."""

    id: str
    character_id: str
    name: str
    type: str
    rarity: ItemRarity
    value: int = 0
    damage: int | None = None
    armor: int | None = None
    affixes: List[Affix] = field(default_factory=list)
    two_handed: bool = False
    set_name: str | None = None
    set_bonuses: List[SetBonus] = field(default_factory=list)
    equipped: bool = False
    equipped_slot: str | None = None

    @property
    def is_consumable(self) -> bool:
        return self.type == "potion"

    def to_row(self) -> Dict[str, Any]:
        """Flat mapping handed to the persistence collaborator."""
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "type": self.type,
            "rarity": self.rarity,
            "value": self.value,
            "damage": self.damage,
            "armor": self.armor,
            "affixes": [{"name": a.name, "stat": a.stat, "value": a.value} for a in self.affixes],
            "two_handed": self.two_handed,
            "set_name": self.set_name,
            "set_bonuses": [
                {
                    "pieces_required": b.pieces_required,
                    "damage": b.damage,
                    "armor": b.armor,
                    "strength": b.strength,
                    "dexterity": b.dexterity,
                    "intelligence": b.intelligence,
                    "mana": b.mana,
                }
                for b in self.set_bonuses
            ],
            "equipped": self.equipped,
            "equipped_slot": self.equipped_slot,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Item":
        return cls(
            id=str(row["id"]),
            character_id=str(row["character_id"]),
            name=str(row["name"]),
            type=str(row["type"]),
            rarity=row.get("rarity", "common"),
            value=int(row.get("value") or 0),
            damage=row.get("damage"),
            armor=row.get("armor"),
            affixes=[Affix(**entry) for entry in row.get("affixes") or []],
            two_handed=bool(row.get("two_handed", False)),
            set_name=row.get("set_name"),
            set_bonuses=[SetBonus(**entry) for entry in row.get("set_bonuses") or []],
            equipped=bool(row.get("equipped", False)),
            equipped_slot=row.get("equipped_slot"),
        )
