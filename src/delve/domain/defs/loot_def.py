"""Loot definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from delve.core.types import ItemCategory, ItemRarity
from delve.domain.entities import SetBonus


@dataclass(slots=True)
class LootBlueprintDef:
    """Template an item drop is scaled from."""

    id: str
    name: str
    category: ItemCategory
    type: str
    rarity: ItemRarity
    weight: int
    base_value: int
    base_damage: int | None = None
    base_armor: int | None = None
    two_handed: bool = False
    set_name: str | None = None
    set_bonuses: List[SetBonus] = field(default_factory=list)


@dataclass(slots=True)
class AffixDef:
    name: str
    stat: str
    value: int


@dataclass(slots=True)
class AffixPoolDef:
    """Affix candidates for one category (offensive, defensive, utility)."""

    id: str
    affixes: Tuple[AffixDef, ...]


@dataclass(slots=True)
class RarityTableDef:
    """Item-rarity probabilities for one enemy rarity tier."""

    id: str
    weights: Dict[str, float]

    def cumulative(self) -> List[Tuple[str, float]]:
        total = sum(self.weights.values())
        running = 0.0
        steps: List[Tuple[str, float]] = []
        for rarity, weight in self.weights.items():
            running += weight / total
            steps.append((rarity, running))
        return steps
