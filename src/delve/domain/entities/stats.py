"""Aggregated stat deltas contributed by sets and affixes."""
from __future__ import annotations

from dataclasses import dataclass, fields

STAT_NAMES: tuple[str, ...] = ("damage", "armor", "strength", "dexterity", "intelligence", "mana", "health")


@dataclass(slots=True)
class StatDeltas:
    """Flat stat totals; every field defaults to zero."""

    damage: int = 0
    armor: int = 0
    strength: int = 0
    dexterity: int = 0
    intelligence: int = 0
    mana: int = 0
    health: int = 0

    def add(self, stat: str, amount: int) -> None:
        if stat not in STAT_NAMES:
            raise KeyError(stat)
        setattr(self, stat, getattr(self, stat) + amount)

    def merge(self, other: "StatDeltas") -> "StatDeltas":
        merged = StatDeltas()
        for stat_field in fields(StatDeltas):
            name = stat_field.name
            setattr(merged, name, getattr(self, name) + getattr(other, name))
        return merged

    @property
    def is_zero(self) -> bool:
        return all(getattr(self, name) == 0 for name in STAT_NAMES)
