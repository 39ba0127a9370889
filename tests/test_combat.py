from delve.core.rng import RNG
from delve.domain.combat import (
    armor_multiplier,
    enemy_snapshot,
    player_snapshot,
    resolve_attack,
    resolve_counter_attack,
    weapon_snapshot_from_item,
)
from delve.domain.combat_models import CombatantSnapshot, CombatStats, WeaponSnapshot
from delve.domain.entities import Character, Enemy, Item
from tests.helpers.fakes import ScriptedRNG


def _make_combatant(
    *,
    life: int = 100,
    armor: float = 0.0,
    evasion: float = 0.0,
    crit_chance: float = 0.0,
    crit_multiplier: float = 1.5,
    resistances: dict[str, float] | None = None,
    current_life: int | None = None,
) -> CombatantSnapshot:
    return CombatantSnapshot(
        id="c",
        name="Combatant",
        level=1,
        current_life=life if current_life is None else current_life,
        stats=CombatStats(
            life=life,
            armor=armor,
            evasion_chance=evasion,
            crit_chance=crit_chance,
            crit_multiplier=crit_multiplier,
            resistances=resistances or {},
        ),
    )


_SWORD = WeaponSnapshot(min_damage=10, max_damage=20)


def test_evaded_attack_deals_nothing_and_stops_drawing() -> None:
    rng = ScriptedRNG([0.9])
    defender = _make_combatant(evasion=0.5)

    result = resolve_attack(_make_combatant(), defender, _SWORD, rng=rng)

    assert result.evaded and not result.hit
    assert result.damage_final == 0
    assert result.defender_life_after == defender.current_life
    assert rng.consumed == 1


def test_hit_uses_base_roll_without_crit() -> None:
    rng = ScriptedRNG([0.1, 0.0, 0.99])

    result = resolve_attack(_make_combatant(), _make_combatant(), _SWORD, rng=rng)

    assert result.hit and not result.crit
    assert result.damage_final == 10
    assert result.defender_life_after == 90
    assert rng.consumed == 3


def test_flat_and_percent_bonuses_apply_before_crit() -> None:
    rng = ScriptedRNG([0.1, 0.0, 0.99])

    result = resolve_attack(
        _make_combatant(), _make_combatant(), _SWORD, flat_bonus=5, percent_bonus=0.5, rng=rng
    )

    assert result.damage_final == 22


def test_percent_crit_inputs_are_normalized() -> None:
    attacker = _make_combatant(crit_chance=50, crit_multiplier=200)
    rng = ScriptedRNG([0.1, 0.0, 0.2])

    result = resolve_attack(attacker, _make_combatant(), _SWORD, rng=rng)

    assert result.crit
    assert result.damage_final == 20


def test_armor_halves_damage_at_fifty() -> None:
    rng = ScriptedRNG([0.1, 0.0, 0.99])

    result = resolve_attack(_make_combatant(), _make_combatant(armor=50), _SWORD, rng=rng)

    assert result.damage_final == 5


def test_landed_hit_always_deals_at_least_one() -> None:
    rng = ScriptedRNG([0.1, 0.0, 0.99])

    result = resolve_attack(_make_combatant(), _make_combatant(armor=10_000), None, rng=rng)

    assert result.hit
    assert result.damage_final == 1


def test_resistance_and_vulnerability_are_clamped() -> None:
    fire = WeaponSnapshot(min_damage=10, max_damage=10, damage_type="fire")
    resistant = _make_combatant(resistances={"fire": 0.5})
    vulnerable = _make_combatant(resistances={"fire": -0.5})
    capped = _make_combatant(resistances={"fire": -2.0})
    at_cap = _make_combatant(resistances={"fire": -0.9})

    resisted = resolve_attack(_make_combatant(), resistant, fire, rng=ScriptedRNG([0.1, 0.99]))
    amplified = resolve_attack(_make_combatant(), vulnerable, fire, rng=ScriptedRNG([0.1, 0.99]))
    over_cap = resolve_attack(_make_combatant(), capped, fire, rng=ScriptedRNG([0.1, 0.99]))
    on_cap = resolve_attack(_make_combatant(), at_cap, fire, rng=ScriptedRNG([0.1, 0.99]))

    assert resisted.damage_final == 5
    assert amplified.damage_final == 15
    assert over_cap.damage_final == on_cap.damage_final
    assert amplified.damage_type == "fire"


def test_lethal_hit_clamps_life_and_flags_kill() -> None:
    rng = ScriptedRNG([0.1, 0.0, 0.99])

    result = resolve_attack(_make_combatant(), _make_combatant(current_life=5), _SWORD, rng=rng)

    assert result.killed
    assert result.defender_life_after == 0


def test_same_inputs_and_draws_give_same_result() -> None:
    attacker = _make_combatant(crit_chance=0.3)
    defender = _make_combatant(armor=12, evasion=0.1)
    draws = [0.42, 0.77, 0.05]

    first = resolve_attack(attacker, defender, _SWORD, flat_bonus=2, rng=ScriptedRNG(draws))
    second = resolve_attack(attacker, defender, _SWORD, flat_bonus=2, rng=ScriptedRNG(draws))

    assert first == second


def test_every_landed_hit_deals_positive_damage() -> None:
    rng = RNG(2024)
    for armor in (0, 1, 10, 50, 500, 100_000):
        for evasion in (0.0, 0.3, 0.9):
            defender = _make_combatant(armor=armor, evasion=evasion, resistances={"physical": 0.9})
            for _ in range(50):
                result = resolve_attack(_make_combatant(crit_chance=0.2), defender, None, rng=rng)
                if result.hit:
                    assert result.damage_final >= 1
                else:
                    assert result.damage_final == 0


def test_armor_multiplier_bounds() -> None:
    for armor in (0, 0.5, 1, 25, 50, 450, 1_000_000):
        assert 0.1 <= armor_multiplier(armor) <= 1.0
    assert armor_multiplier(0) == 1.0
    assert armor_multiplier(1_000_000) == 0.1


def test_counter_attack_subtracts_flat_armor_with_floor_of_one() -> None:
    assert resolve_counter_attack(10, 3, ScriptedRNG([0.5])) == 9
    assert resolve_counter_attack(10, 100, ScriptedRNG([0.99])) == 1


def test_player_snapshot_caps_evasion_and_converts_crit() -> None:
    character = Character(id="p", name="Hero", dexterity=300)

    snapshot = player_snapshot(character, armor=7)

    assert snapshot.stats.evasion_chance == 0.5
    assert snapshot.stats.crit_chance == 0.05
    assert snapshot.stats.crit_multiplier == 1.5
    assert snapshot.stats.armor == 7
    assert snapshot.current_life == character.health


def test_enemy_snapshot_uses_fixed_ratings() -> None:
    enemy = Enemy(id="e", name="Zombie", level=2, health=30, max_health=40, damage=5, experience=1, gold=1)

    snapshot = enemy_snapshot(enemy)

    assert snapshot.current_life == 30
    assert snapshot.stats.life == 40
    assert snapshot.stats.evasion_chance == 0.02


def test_weapon_snapshot_spreads_damage() -> None:
    sword = Item(id="i", character_id="p", name="Sword", type="melee_weapon", rarity="common", damage=10)
    staff = Item(id="j", character_id="p", name="Staff", type="mage_weapon", rarity="common", damage=10)

    assert weapon_snapshot_from_item(sword) == WeaponSnapshot(min_damage=8, max_damage=12)
    assert weapon_snapshot_from_item(staff).damage_type == "fire"
    assert weapon_snapshot_from_item(None) is None
