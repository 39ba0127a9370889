"""Interfaces of the collaborators the engine calls but does not implement."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Protocol, Sequence

from delve.core.types import RoomType
from delve.domain.entities import Enemy


@dataclass(frozen=True, slots=True)
class EncounterContext:
    """What an enemy factory needs to know to spawn one encounter."""

    room_type: RoomType
    floor: int
    player_level: int
    zone_heat: int


class EnemyFactory(Protocol):
    def generate(self, context: EncounterContext) -> Enemy:
        ...


class PersistenceGateway(Protocol):
    """Backing store for characters and items; failures raise PersistenceError."""

    def load_items(self, character_id: str) -> List[Dict[str, Any]]:
        ...

    def insert_items(self, rows: Sequence[Mapping[str, Any]]) -> None:
        ...

    def update_character(self, character_id: str, updates: Mapping[str, int]) -> None:
        ...

    def update_items(self, updates: Mapping[str, Mapping[str, Any]]) -> None:
        ...

    def delete_items(self, item_ids: Sequence[str]) -> None:
        ...


class DropNotifier(Protocol):
    def notify_drop(self, rarity: str, item_name: str) -> None:
        ...
