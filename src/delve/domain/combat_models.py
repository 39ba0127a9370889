"""Transient value objects passed into and out of attack resolution."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from delve.core.types import DamageType


@dataclass(frozen=True, slots=True)
class CombatStats:
    """Defensive and offensive ratings of one combatant."""

    life: int
    armor: float = 0.0
    evasion_chance: float = 0.0
    crit_chance: float = 0.0  # 0-1 or 0-100
    crit_multiplier: float = 1.5  # 1.5 or 150
    resistances: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CombatantSnapshot:
    """Immutable view of a combatant at the moment of an attack."""

    id: str
    name: str
    level: int
    stats: CombatStats
    current_life: int


@dataclass(frozen=True, slots=True)
class WeaponSnapshot:
    min_damage: int
    max_damage: int
    damage_type: DamageType = "physical"


@dataclass(frozen=True, slots=True)
class AttackResult:
    """Outcome of a single attack; never persisted."""

    hit: bool
    evaded: bool
    crit: bool
    damage_rolled: int
    damage_after_armor: int
    damage_final: int
    defender_life_before: int
    defender_life_after: int
    killed: bool
    damage_type: DamageType
