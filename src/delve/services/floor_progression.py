"""Floor generation, room exploration, combat orchestration and floor advancement."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import partial
from typing import List

from delve.config import EngineConfig
from delve.core.scheduler import Scheduler
from delve.core.types import EnemyRarity, RoomType
from delve.domain.combat import (
    enemy_snapshot,
    player_snapshot,
    resolve_attack,
    resolve_counter_attack,
    weapon_snapshot_from_item,
)
from delve.domain.combat_models import AttackResult
from delve.domain.entities import Enemy, FloorMap, FloorRoom, Item
from delve.domain.equipment import aggregate_affixes, compute_set_bonuses, equipped_armor, equipped_weapon
from delve.domain.progression import ProgressionLedger
from delve.domain.rarity import is_at_least
from delve.domain.state import SessionState
from delve.services.collaborators import DropNotifier, EncounterContext, EnemyFactory
from delve.services.loot_generator import LootContext, LootGenerator
from delve.services.persistence import CharacterWriter

logger = logging.getLogger(__name__)

ROOM_COUNT = 9
SPAWN_INDEX = 0
# Keeps the ladder away from the spawn room's immediate neighbours.
FORBIDDEN_LADDER_INDICES = frozenset({0, 1, 3})
BOSS_FLOOR_INTERVAL = 10
MIN_COMBAT_ROOMS = 5
MAX_COMBAT_ROOMS = 10

MIMIC_CHANCE = 0.05
EMPTY_ROLL_THRESHOLD = 0.85
MIMIC_AMBUSH_FRACTION = 0.2
STRENGTH_DAMAGE_FACTOR = 0.5


def mini_boss_chance(floor_number: int) -> float:
    return min(0.01 + 0.01 * (floor_number // 5), 0.08)


def rare_enemy_chance(floor_number: int) -> float:
    return min(0.15 + 0.01 * floor_number, 0.35)


def is_boss_floor(floor_number: int) -> bool:
    return floor_number % BOSS_FLOOR_INTERVAL == 0


def room_id_for(floor_number: int, index: int) -> str:
    return f"room-{floor_number}-{index}"


@dataclass(slots=True)
class FloorEvent:
    """Base class for floor and combat events."""


@dataclass(slots=True)
class RoomExploredEvent(FloorEvent):
    room_id: str
    room_type: RoomType
    first_visit: bool


@dataclass(slots=True)
class MimicAmbushEvent(FloorEvent):
    damage: int
    health: int


@dataclass(slots=True)
class EncounterStartedEvent(FloorEvent):
    room_id: str
    enemy_id: str
    enemy_name: str
    enemy_rarity: EnemyRarity


@dataclass(slots=True)
class AttackResolvedEvent(FloorEvent):
    enemy_id: str
    result: AttackResult


@dataclass(slots=True)
class EnemyDefeatedEvent(FloorEvent):
    enemy_id: str
    enemy_name: str
    enemy_rarity: EnemyRarity
    experience: int
    gold: int
    zone_heat: int


@dataclass(slots=True)
class LevelUpEvent(FloorEvent):
    level: int


@dataclass(slots=True)
class LootDroppedEvent(FloorEvent):
    items: List[Item] = field(default_factory=list)


@dataclass(slots=True)
class CounterAttackEvent(FloorEvent):
    enemy_id: str
    damage: int
    health: int


@dataclass(slots=True)
class PlayerDefeatedEvent(FloorEvent):
    gold_lost: int
    gold: int
    health: int


@dataclass(slots=True)
class FloorAdvancedEvent(FloorEvent):
    floor: int


@dataclass(slots=True)
class FloorAdvanceBlockedEvent(FloorEvent):
    reason: str
    message: str


class FloorProgressionManager:
    """Drives one session through rooms and floors."""

    def __init__(
        self,
        state: SessionState,
        *,
        enemy_factory: EnemyFactory,
        loot_generator: LootGenerator,
        writer: CharacterWriter,
        scheduler: Scheduler,
        notifier: DropNotifier | None = None,
        ledger: ProgressionLedger | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._state = state
        self._enemy_factory = enemy_factory
        self._loot_generator = loot_generator
        self._writer = writer
        self._scheduler = scheduler
        self._notifier = notifier
        self._ledger = ledger or ProgressionLedger()
        self._config = config or EngineConfig()
        self._deferred_events: List[object] = []

    # ----------------------------------------------------------- Generation
    def generate_floor_map(self, floor_number: int) -> FloorMap:
        """Roll a fresh room layout for ``floor_number``."""
        rng = self._state.rng
        rare_chance = rare_enemy_chance(floor_number)
        boss_chance = mini_boss_chance(floor_number)
        rooms: List[FloorRoom] = []
        for index in range(ROOM_COUNT):
            roll = rng.random()
            room_type: RoomType
            if roll < MIMIC_CHANCE:
                room_type = "mimic"
            elif roll < MIMIC_CHANCE + boss_chance:
                room_type = "miniBoss"
            elif roll < MIMIC_CHANCE + boss_chance + rare_chance:
                room_type = "rareEnemy"
            elif roll > EMPTY_ROLL_THRESHOLD:
                room_type = "empty"
            else:
                room_type = "enemy"
            rooms.append(
                FloorRoom(
                    id=room_id_for(floor_number, index),
                    index=index,
                    type=room_type,
                    explored=index == SPAWN_INDEX,
                )
            )

        ladder_index = rng.choice([index for index in range(ROOM_COUNT) if index not in FORBIDDEN_LADDER_INDICES])
        rooms[ladder_index].type = "ladder"

        boss_room_id = None
        if is_boss_floor(floor_number):
            boss_index = rng.randint(0, ROOM_COUNT - 1)
            while boss_index in (SPAWN_INDEX, ladder_index):
                boss_index = (boss_index + 1) % ROOM_COUNT
            rooms[boss_index].type = "boss"
            boss_room_id = rooms[boss_index].id

        self._balance_combat_rooms(rooms, ladder_index)
        floor_map = FloorMap(
            floor=floor_number,
            rooms=tuple(rooms),
            ladder_room_id=rooms[ladder_index].id,
            boss_room_id=boss_room_id,
        )
        logger.debug(
            "Generated floor %d: %s",
            floor_number,
            " ".join(room.type for room in floor_map.rooms),
        )
        return floor_map

    @staticmethod
    def _balance_combat_rooms(rooms: List[FloorRoom], ladder_index: int) -> None:
        movable = [room for room in rooms if room.index not in (SPAWN_INDEX, ladder_index)]
        combat = sum(1 for room in rooms if room.is_combat)
        for room in movable:
            if combat >= MIN_COMBAT_ROOMS:
                break
            if room.type == "empty":
                room.type = "enemy"
                combat += 1
        for room in movable:
            if combat <= MAX_COMBAT_ROOMS:
                break
            if room.type == "enemy":
                room.type = "empty"
                combat -= 1

    def enter_floor(self, floor_number: int) -> FloorMap:
        """Replace the current map and place the player in the spawn room."""
        state = self._state
        state.cancel_counter_attack()
        state.current_enemy = None
        state.floor = floor_number
        state.floor_map = self.generate_floor_map(floor_number)
        state.current_room_id = state.floor_map.spawn_room.id
        return state.floor_map

    # ---------------------------------------------------------- Exploration
    def explore_room(self, room_id: str) -> List[object]:
        state = self._state
        if state.floor_map is None:
            return []
        room = state.floor_map.get_room(room_id)
        if room is None:
            return []
        if room_id == state.current_room_id and state.current_enemy is not None:
            return []

        first_visit = not room.explored
        room.mark_explored()
        state.cancel_counter_attack()
        state.current_enemy = None
        state.current_room_id = room.id
        events: List[object] = [RoomExploredEvent(room_id=room.id, room_type=room.type, first_visit=first_visit)]

        if not room.is_combat:
            return events
        if room.type == "boss" and room.cleared:
            return events
        if room.type == "mimic" and not room.cleared and first_visit:
            events.extend(self._mimic_ambush())
        events.extend(self._spawn_encounter(room))
        return events

    def _mimic_ambush(self) -> List[object]:
        character = self._state.character
        damage = math.floor(character.max_health * MIMIC_AMBUSH_FRACTION)
        health = max(1, character.health - damage)
        events: List[object] = list(
            self._writer.update_character(character, {"health": health}, operation="mimic_ambush")
        )
        events.insert(0, MimicAmbushEvent(damage=damage, health=character.health))
        return events

    @staticmethod
    def _variant_for(room: FloorRoom) -> RoomType:
        if room.type == "boss":
            return "boss"
        if room.cleared:
            return "enemy"
        return room.type

    def _spawn_encounter(self, room: FloorRoom) -> List[object]:
        state = self._state
        context = EncounterContext(
            room_type=self._variant_for(room),
            floor=state.floor,
            player_level=state.character.level,
            zone_heat=state.zone_heat.value,
        )
        enemy = self._enemy_factory.generate(context)
        state.current_enemy = enemy
        return [
            EncounterStartedEvent(
                room_id=room.id,
                enemy_id=enemy.id,
                enemy_name=enemy.name,
                enemy_rarity=enemy.rarity,
            )
        ]

    # --------------------------------------------------------------- Combat
    def attack(self) -> List[object]:
        """Resolve one player attack against the current enemy."""
        state = self._state
        enemy = state.current_enemy
        if enemy is None or not enemy.is_alive:
            return []
        if state.pending_counter_attack is not None:
            logger.debug("Attack ignored while a counter-attack is pending")
            return []

        equipped = state.equipped_items
        set_bonus = compute_set_bonuses(equipped)
        affixes = aggregate_affixes(equipped)
        strength = state.character.strength + set_bonus.strength + affixes.strength
        flat_bonus = strength * STRENGTH_DAMAGE_FACTOR + set_bonus.damage + affixes.damage

        result = resolve_attack(
            player_snapshot(state.character),
            enemy_snapshot(enemy),
            weapon_snapshot_from_item(equipped_weapon(equipped)),
            flat_bonus=flat_bonus,
            rng=state.rng,
        )
        enemy.health = result.defender_life_after
        events: List[object] = [AttackResolvedEvent(enemy_id=enemy.id, result=result)]
        if result.killed:
            events.extend(self._resolve_kill(enemy))
        else:
            state.pending_counter_attack = self._scheduler.call_later(
                self._config.counter_attack_delay, partial(self._counter_attack, enemy.id)
            )
        return events

    def _drop_source(self, room: FloorRoom | None) -> str:
        if room is not None and room.type == "boss":
            return "boss"
        if room is not None and room.type == "mimic" and not room.cleared:
            return "mimic"
        return "standard"

    def _resolve_kill(self, enemy: Enemy) -> List[object]:
        state = self._state
        room = state.current_room
        events: List[object] = []

        rewards = self._ledger.apply_enemy_defeat(state.character, enemy)
        events.extend(self._writer.update_character(state.character, rewards.updates, operation="enemy_defeat"))
        heat = self._ledger.record_kill(state.zone_heat, enemy.rarity)
        events.append(
            EnemyDefeatedEvent(
                enemy_id=enemy.id,
                enemy_name=enemy.name,
                enemy_rarity=enemy.rarity,
                experience=rewards.experience_gained,
                gold=rewards.gold_gained,
                zone_heat=heat,
            )
        )
        if rewards.leveled_up:
            logger.info("Character %s reached level %d", state.character.id, state.character.level)
            events.append(LevelUpEvent(level=state.character.level))

        context = LootContext(
            character_id=state.character.id,
            enemy_level=enemy.level,
            enemy_rarity=enemy.rarity,
            source=self._drop_source(room),  # type: ignore[arg-type]
            zone_heat=heat,
            excluded_rarities=frozenset(state.excluded_rarities),
        )
        drops = self._loot_generator.generate(context, state.rng)
        failures = self._writer.insert_items(state.items, drops, operation="loot_drop")
        events.append(LootDroppedEvent(items=list(drops)))
        events.extend(failures)
        if not failures:
            self._announce(drops)

        if room is not None and room.is_combat:
            room.mark_cleared()
        state.current_enemy = None
        return events

    def _announce(self, drops: List[Item]) -> None:
        for item in drops:
            if not is_at_least(item.rarity, self._config.notify_min_rarity):
                continue
            logger.info("Notable drop: %s %s", item.rarity, item.name)
            if self._notifier is not None:
                self._notifier.notify_drop(item.rarity, item.name)

    def _counter_attack(self, enemy_id: str) -> None:
        state = self._state
        state.pending_counter_attack = None
        enemy = state.current_enemy
        if enemy is None or enemy.id != enemy_id or not enemy.is_alive:
            return

        equipped = state.equipped_items
        armor = equipped_armor(equipped) + compute_set_bonuses(equipped).armor
        damage = resolve_counter_attack(enemy.damage, armor, state.rng)
        character = state.character
        health = max(0, character.health - damage)
        if health > 0:
            failures = self._writer.update_character(character, {"health": health}, operation="counter_attack")
            self._deferred_events.append(CounterAttackEvent(enemy_id=enemy.id, damage=damage, health=character.health))
            self._deferred_events.extend(failures)
            return

        kept_gold = character.gold // 2
        gold_lost = character.gold - kept_gold
        failures = self._writer.update_character(
            character,
            {"health": character.max_health, "gold": kept_gold},
            operation="defeat_penalty",
        )
        logger.info("Character %s was defeated and lost %d gold", character.id, gold_lost)
        self._deferred_events.append(CounterAttackEvent(enemy_id=enemy.id, damage=damage, health=0))
        self._deferred_events.append(
            PlayerDefeatedEvent(gold_lost=gold_lost, gold=character.gold, health=character.health)
        )
        self._deferred_events.extend(failures)
        room = state.current_room
        if room is not None and room.is_combat:
            self._deferred_events.extend(self._spawn_encounter(room))
        else:
            state.current_enemy = None

    def drain_deferred_events(self) -> List[object]:
        """Events produced by scheduled callbacks since the last drain."""
        events, self._deferred_events = self._deferred_events, []
        return events

    # ------------------------------------------------------------ Advancing
    def can_advance(self) -> bool:
        floor_map = self._state.floor_map
        if floor_map is None or not floor_map.ladder_room.explored:
            return False
        boss_room = floor_map.boss_room
        return boss_room is None or boss_room.cleared

    def next_floor(self) -> List[object]:
        state = self._state
        floor_map = state.floor_map
        if floor_map is None:
            return []
        if not floor_map.ladder_room.explored:
            return [FloorAdvanceBlockedEvent(reason="ladder_unexplored", message="Find the ladder first.")]
        boss_room = floor_map.boss_room
        if boss_room is not None and not boss_room.cleared:
            return [FloorAdvanceBlockedEvent(reason="boss_alive", message="The floor boss still guards the way.")]

        self.enter_floor(state.floor + 1)
        logger.info("Character %s advanced to floor %d", state.character.id, state.floor)
        return [FloorAdvancedEvent(floor=state.floor)]

