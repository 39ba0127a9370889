"""Enemy runtime models."""
from __future__ import annotations

from dataclasses import dataclass

from delve.core.types import EnemyRarity


@dataclass(slots=True)
class Enemy:
    """Represents a spawned enemy for a single encounter."""

    id: str
    name: str
    level: int
    health: int
    max_health: int
    damage: int
    experience: int
    gold: int
    rarity: EnemyRarity = "normal"

    @property
    def is_alive(self) -> bool:
        return self.health > 0
