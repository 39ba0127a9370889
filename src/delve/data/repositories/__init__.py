"""Repository exports."""

from .affixes_repo import AffixesRepository
from .enemies_repo import EnemiesRepository
from .loot_blueprints_repo import LootBlueprintsRepository
from .rarity_tables_repo import RarityTablesRepository

__all__ = [
    "AffixesRepository",
    "EnemiesRepository",
    "LootBlueprintsRepository",
    "RarityTablesRepository",
]
