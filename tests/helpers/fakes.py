"""Test doubles for the engine's injected collaborators."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from delve.core.rng import RNG
from delve.domain.entities import Enemy
from delve.services.collaborators import EncounterContext
from delve.services.errors import PersistenceError


class ScriptedRNG(RNG):
    """RNG whose ``random()`` replays a fixed script; other helpers stay seeded."""

    def __init__(self, draws: Iterable[float], seed: int = 7) -> None:
        super().__init__(seed)
        self._draws = list(draws)
        self.consumed = 0

    def random(self) -> float:
        if self.consumed >= len(self._draws):
            raise AssertionError("ScriptedRNG ran out of draws.")
        value = self._draws[self.consumed]
        self.consumed += 1
        return value


class InMemoryPersistence:
    """Records every call; ``fail_on`` names operations that raise PersistenceError."""

    def __init__(self, rows: Sequence[Mapping[str, Any]] = (), fail_on: Iterable[str] = ()) -> None:
        self.rows: Dict[str, Dict[str, Any]] = {str(row["id"]): dict(row) for row in rows}
        self.character_updates: List[Dict[str, int]] = []
        self.item_updates: List[Dict[str, Dict[str, Any]]] = []
        self.deleted: List[str] = []
        self.fail_on = set(fail_on)

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise PersistenceError(f"{operation} unavailable")

    def load_items(self, character_id: str) -> List[Dict[str, Any]]:
        self._check("load_items")
        return [dict(row) for row in self.rows.values() if row["character_id"] == character_id]

    def insert_items(self, rows: Sequence[Mapping[str, Any]]) -> None:
        self._check("insert_items")
        for row in rows:
            self.rows[str(row["id"])] = dict(row)

    def update_character(self, character_id: str, updates: Mapping[str, int]) -> None:
        self._check("update_character")
        self.character_updates.append(dict(updates))

    def update_items(self, updates: Mapping[str, Mapping[str, Any]]) -> None:
        self._check("update_items")
        self.item_updates.append({item_id: dict(values) for item_id, values in updates.items()})
        for item_id, values in updates.items():
            if item_id in self.rows:
                self.rows[item_id].update(values)

    def delete_items(self, item_ids: Sequence[str]) -> None:
        self._check("delete_items")
        for item_id in item_ids:
            self.rows.pop(item_id, None)
            self.deleted.append(item_id)


class RecordingNotifier:
    def __init__(self) -> None:
        self.drops: List[tuple[str, str]] = []

    def notify_drop(self, rarity: str, item_name: str) -> None:
        self.drops.append((rarity, item_name))


_STUB_RARITY = {
    "enemy": "normal",
    "rareEnemy": "rare",
    "miniBoss": "elite",
    "mimic": "elite",
    "boss": "boss",
}


class StubEnemyFactory:
    """Spawns fixed-stat enemies and remembers every context it was asked for."""

    def __init__(self, *, health: int = 10, damage: int = 3, experience: int = 10, gold: int = 5) -> None:
        self.health = health
        self.damage = damage
        self.experience = experience
        self.gold = gold
        self.contexts: List[EncounterContext] = []

    def generate(self, context: EncounterContext) -> Enemy:
        self.contexts.append(context)
        return Enemy(
            id=f"enemy_{len(self.contexts)}",
            name=f"Stub {context.room_type}",
            level=max(1, context.player_level),
            health=self.health,
            max_health=self.health,
            damage=self.damage,
            experience=self.experience,
            gold=self.gold,
            rarity=_STUB_RARITY[context.room_type],  # type: ignore[arg-type]
        )
