"""Pure attack resolution.

Nothing here mutates its inputs or touches I/O: the same snapshots and the
same sequence of ``rng.random()`` draws always produce the same result.
"""
from __future__ import annotations

import math

from delve.core.rng import RandomSource, roll_between
from delve.core.types import DamageType
from delve.domain.combat_models import AttackResult, CombatantSnapshot, CombatStats, WeaponSnapshot
from delve.domain.entities import Character, Enemy, Item

MIN_HIT_CHANCE = 0.05
MAX_HIT_CHANCE = 0.98
MAX_CRIT_CHANCE = 0.9
ARMOR_HALF_POINT = 50
MAX_ARMOR_MITIGATION = 0.9
MIN_ARMOR_MULTIPLIER = 0.1
MAX_RESISTANCE = 0.9
COUNTER_ATTACK_SPREAD = 5

UNARMED_MIN_DAMAGE = 1
UNARMED_MAX_DAMAGE = 2

# Player evasion per point of dexterity, capped.
EVASION_PER_DEX = 0.002
MAX_PLAYER_EVASION = 0.5
MAX_PLAYER_CRIT = 0.8

ENEMY_EVASION = 0.02
ENEMY_CRIT_CHANCE = 0.05
ENEMY_CRIT_MULTIPLIER = 1.5


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hit_chance(defender: CombatantSnapshot) -> float:
    return clamp(1 - defender.stats.evasion_chance, MIN_HIT_CHANCE, MAX_HIT_CHANCE)


def armor_multiplier(armor: float) -> float:
    """Share of damage that gets through ``armor``; never below 0.1."""
    if armor <= 0:
        return 1.0
    mitigation = clamp(armor / (armor + ARMOR_HALF_POINT), 0.0, MAX_ARMOR_MITIGATION)
    return clamp(1 - mitigation, MIN_ARMOR_MULTIPLIER, 1.0)


def resistance_multiplier(damage_type: str, defender: CombatantSnapshot) -> float:
    resist = defender.stats.resistances.get(damage_type, 0.0)
    return 1 - clamp(resist, -MAX_RESISTANCE, MAX_RESISTANCE)


def normalize_crit_chance(raw: float) -> float:
    chance = raw / 100 if raw > 1 else raw
    return clamp(chance, 0.0, MAX_CRIT_CHANCE)


def normalize_crit_multiplier(raw: float) -> float:
    return raw / 100 if raw > 5 else raw


def resolve_attack(
    attacker: CombatantSnapshot,
    defender: CombatantSnapshot,
    weapon: WeaponSnapshot | None = None,
    *,
    flat_bonus: float = 0,
    percent_bonus: float = 0,
    rng: RandomSource,
) -> AttackResult:
    """Resolve one attack from ``attacker`` against ``defender``."""
    damage_type: DamageType = weapon.damage_type if weapon else "physical"
    life_before = defender.current_life

    if rng.random() > hit_chance(defender):
        return AttackResult(
            hit=False,
            evaded=True,
            crit=False,
            damage_rolled=0,
            damage_after_armor=0,
            damage_final=0,
            defender_life_before=life_before,
            defender_life_after=life_before,
            killed=False,
            damage_type=damage_type,
        )

    low = weapon.min_damage if weapon else UNARMED_MIN_DAMAGE
    high = weapon.max_damage if weapon else UNARMED_MAX_DAMAGE
    rolled = (roll_between(low, high, rng) + flat_bonus) * (1 + percent_bonus)

    crit = rng.random() < normalize_crit_chance(attacker.stats.crit_chance)
    after_crit = rolled * normalize_crit_multiplier(attacker.stats.crit_multiplier) if crit else rolled

    after_armor = after_crit * armor_multiplier(defender.stats.armor)
    final_raw = after_armor * resistance_multiplier(damage_type, defender)
    damage_final = max(1, math.floor(final_raw))

    life_after = max(0, life_before - damage_final)
    return AttackResult(
        hit=True,
        evaded=False,
        crit=crit,
        damage_rolled=_round_half_up(rolled),
        damage_after_armor=_round_half_up(after_armor),
        damage_final=damage_final,
        defender_life_before=life_before,
        defender_life_after=life_after,
        killed=life_after <= 0,
        damage_type=damage_type,
    )


def resolve_counter_attack(enemy_damage: int, armor: int, rng: RandomSource) -> int:
    """Enemy basic attack: damage plus a [0, 5) spread, minus flat armor, at least 1."""
    raw = math.floor(enemy_damage + rng.random() * COUNTER_ATTACK_SPREAD)
    return max(1, raw - max(0, armor))


# ------------------------------------------------------------------ Snapshots
def player_snapshot(character: Character, *, armor: float = 0.0) -> CombatantSnapshot:
    crit_chance = clamp(character.crit_chance / 100, 0.0, MAX_PLAYER_CRIT)
    return CombatantSnapshot(
        id=character.id,
        name=character.name,
        level=character.level,
        current_life=character.health,
        stats=CombatStats(
            life=character.max_health,
            armor=armor,
            evasion_chance=clamp(character.dexterity * EVASION_PER_DEX, 0.0, MAX_PLAYER_EVASION),
            crit_chance=crit_chance,
            crit_multiplier=1 + character.crit_damage / 100,
        ),
    )


def enemy_snapshot(enemy: Enemy) -> CombatantSnapshot:
    return CombatantSnapshot(
        id=enemy.id,
        name=enemy.name,
        level=enemy.level,
        current_life=enemy.health,
        stats=CombatStats(
            life=enemy.max_health,
            evasion_chance=ENEMY_EVASION,
            crit_chance=ENEMY_CRIT_CHANCE,
            crit_multiplier=ENEMY_CRIT_MULTIPLIER,
        ),
    )


def _damage_type_for(item: Item) -> DamageType:
    if item.type == "mage_weapon":
        return "fire"
    return "physical"


def weapon_snapshot_from_item(item: Item | None) -> WeaponSnapshot | None:
    """Spread an item's flat damage into a +/-20% roll range."""
    if item is None or not item.damage or item.damage <= 0:
        return None
    return WeaponSnapshot(
        min_damage=max(1, math.floor(item.damage * 0.8)),
        max_damage=max(1, math.ceil(item.damage * 1.2)),
        damage_type=_damage_type_for(item),
    )
