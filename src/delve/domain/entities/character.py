"""Persistent player character model."""
from __future__ import annotations

from dataclasses import dataclass

# Columns the persistence collaborator may receive in a partial update.
CHARACTER_FIELDS: tuple[str, ...] = (
    "level",
    "experience",
    "health",
    "max_health",
    "mana",
    "max_mana",
    "strength",
    "dexterity",
    "intelligence",
    "gold",
)


@dataclass(slots=True)
class Character:
    """Represents the player's character record."""

    id: str
    name: str
    level: int = 1
    experience: int = 0
    health: int = 100
    max_health: int = 100
    mana: int = 50
    max_mana: int = 50
    strength: int = 10
    dexterity: int = 10
    intelligence: int = 10
    gold: int = 0
    crit_chance: float = 5.0  # percent
    crit_damage: float = 50.0  # percent bonus on crit

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def snapshot(self, keys: tuple[str, ...] = CHARACTER_FIELDS) -> dict[str, int]:
        return {key: getattr(self, key) for key in keys}

    def apply(self, updates: dict[str, int]) -> None:
        """Assign persisted columns, clamping resources into their valid ranges."""
        for key, value in updates.items():
            if key not in CHARACTER_FIELDS:
                raise KeyError(key)
            setattr(self, key, value)
        self.level = max(1, self.level)
        self.experience = max(0, self.experience)
        self.max_health = max(1, self.max_health)
        self.max_mana = max(0, self.max_mana)
        self.health = max(0, min(self.health, self.max_health))
        self.mana = max(0, min(self.mana, self.max_mana))
        self.strength = max(0, self.strength)
        self.dexterity = max(0, self.dexterity)
        self.intelligence = max(0, self.intelligence)
        self.gold = max(0, self.gold)
