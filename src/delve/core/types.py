"""Shared type aliases for the core and domain layers."""
from typing import Literal

EnemyRarity = Literal["normal", "rare", "elite", "boss"]
ItemRarity = Literal["common", "magic", "rare", "epic", "legendary", "mythic", "radiant", "set"]
RoomType = Literal["enemy", "rareEnemy", "miniBoss", "mimic", "boss", "ladder", "empty"]
DamageType = Literal["physical", "fire", "ice", "lightning", "poison", "shadow"]
ItemCategory = Literal["weapon", "armor", "potion"]
DropSource = Literal["standard", "boss", "mimic"]
EquipmentSlot = Literal[
    "helmet",
    "chest",
    "legs",
    "boots",
    "gloves",
    "weapon",
    "shield",
    "amulet",
    "ring1",
    "ring2",
    "belt",
    "trinket",
]

ENEMY_RARITIES: tuple[EnemyRarity, ...] = ("normal", "rare", "elite", "boss")
COMBAT_ROOM_TYPES: frozenset[str] = frozenset({"enemy", "rareEnemy", "miniBoss", "mimic", "boss"})

__all__ = [
    "COMBAT_ROOM_TYPES",
    "DamageType",
    "DropSource",
    "ENEMY_RARITIES",
    "EnemyRarity",
    "EquipmentSlot",
    "ItemCategory",
    "ItemRarity",
    "RoomType",
]
