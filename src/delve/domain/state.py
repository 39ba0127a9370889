"""Per-session game state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from delve.core.rng import RNG
from delve.core.scheduler import ScheduledCall
from delve.domain.entities import Character, Enemy, FloorMap, FloorRoom, Item, ZoneHeat


@dataclass
class SessionState:
    """Everything one player's session owns; shared by the services by reference."""

    rng: RNG
    character: Character
    items: List[Item] = field(default_factory=list)
    floor: int = 1
    floor_map: FloorMap | None = None
    current_room_id: str | None = None
    current_enemy: Enemy | None = None
    zone_heat: ZoneHeat = field(default_factory=ZoneHeat)
    excluded_rarities: Set[str] = field(default_factory=set)
    pending_counter_attack: ScheduledCall | None = None
    potion_ready_at: float = 0.0

    @property
    def current_room(self) -> FloorRoom | None:
        if self.floor_map is None or self.current_room_id is None:
            return None
        return self.floor_map.get_room(self.current_room_id)

    @property
    def equipped_items(self) -> List[Item]:
        return [item for item in self.items if item.equipped]

    def find_item(self, item_id: str) -> Item | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def cancel_counter_attack(self) -> None:
        if self.pending_counter_attack is not None:
            self.pending_counter_attack.cancel()
            self.pending_counter_attack = None
