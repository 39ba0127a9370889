"""Floor map models; rooms are an indexed collection with no adjacency."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from delve.core.types import COMBAT_ROOM_TYPES, RoomType


@dataclass(slots=True)
class FloorRoom:
    """A single room; ``explored`` and ``cleared`` only ever flip to True."""

    id: str
    index: int
    type: RoomType
    explored: bool = False
    cleared: bool = False

    @property
    def is_combat(self) -> bool:
        return self.type in COMBAT_ROOM_TYPES

    def mark_explored(self) -> None:
        self.explored = True

    def mark_cleared(self) -> None:
        self.cleared = True


@dataclass(slots=True)
class FloorMap:
    """All rooms of one floor, ordered by index."""

    floor: int
    rooms: Tuple[FloorRoom, ...]
    ladder_room_id: str
    boss_room_id: str | None = None

    @property
    def spawn_room(self) -> FloorRoom:
        return self.rooms[0]

    @property
    def ladder_room(self) -> FloorRoom:
        return self.get_room(self.ladder_room_id)  # type: ignore[return-value]

    @property
    def boss_room(self) -> FloorRoom | None:
        if self.boss_room_id is None:
            return None
        return self.get_room(self.boss_room_id)

    def get_room(self, room_id: str) -> FloorRoom | None:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def combat_room_count(self) -> int:
        return sum(1 for room in self.rooms if room.is_combat)
