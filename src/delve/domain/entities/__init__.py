"""Runtime entity exports."""

from .character import CHARACTER_FIELDS, Character
from .enemy import Enemy
from .floor import FloorMap, FloorRoom
from .item import Affix, Item, SetBonus
from .stats import STAT_NAMES, StatDeltas
from .zone_heat import HEAT_MAX, HEAT_MIN, ZoneHeat

__all__ = [
    "Affix",
    "CHARACTER_FIELDS",
    "Character",
    "Enemy",
    "FloorMap",
    "FloorRoom",
    "HEAT_MAX",
    "HEAT_MIN",
    "Item",
    "STAT_NAMES",
    "SetBonus",
    "StatDeltas",
    "ZoneHeat",
]
