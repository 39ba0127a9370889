"""Domain definition exports."""

from .enemy_def import EnemyVariantDef
from .loot_def import AffixDef, AffixPoolDef, LootBlueprintDef, RarityTableDef

__all__ = [
    "AffixDef",
    "AffixPoolDef",
    "EnemyVariantDef",
    "LootBlueprintDef",
    "RarityTableDef",
]
