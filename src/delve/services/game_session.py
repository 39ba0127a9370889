"""Session façade wiring the state, scheduler and services for one character."""
from __future__ import annotations

import logging
from typing import List

from delve.config import EngineConfig
from delve.core.rng import RNG
from delve.core.scheduler import ScheduledCall, Scheduler
from delve.data.repositories import (
    AffixesRepository,
    EnemiesRepository,
    LootBlueprintsRepository,
    RarityTablesRepository,
)
from delve.domain.entities import Character, Item
from delve.domain.equipment import assign_missing_slots
from delve.domain.progression import ProgressionLedger
from delve.domain.state import SessionState
from delve.services.collaborators import DropNotifier, EnemyFactory, PersistenceGateway
from delve.services.errors import PersistenceError
from delve.services.factories import DefaultEnemyFactory
from delve.services.floor_progression import FloorProgressionManager
from delve.services.inventory_service import InventoryService
from delve.services.loot_generator import LootGenerator
from delve.services.persistence import CharacterWriter, PersistenceFailedEvent

logger = logging.getLogger(__name__)


class GameSession:
    """Owns one character's :class:`SessionState` and exposes the player actions.

    The host drives time by calling :meth:`tick` from its loop; scheduled
    counter-attacks and heat decay run inside that call. :meth:`close` stops
    both timers.
    """

    def __init__(
        self,
        character: Character,
        gateway: PersistenceGateway,
        *,
        seed: int,
        scheduler: Scheduler | None = None,
        enemy_factory: EnemyFactory | None = None,
        loot_generator: LootGenerator | None = None,
        notifier: DropNotifier | None = None,
        config: EngineConfig | None = None,
        items: List[Item] | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.scheduler = scheduler or Scheduler()
        self.state = SessionState(rng=RNG(seed), character=character, items=list(items or []))
        self._gateway = gateway
        self.writer = CharacterWriter(gateway, character.id)
        self.ledger = ProgressionLedger()
        self.floors = FloorProgressionManager(
            self.state,
            enemy_factory=enemy_factory or DefaultEnemyFactory(EnemiesRepository(), self.state.rng),
            loot_generator=loot_generator
            or LootGenerator(
                LootBlueprintsRepository(),
                AffixesRepository(),
                RarityTablesRepository(),
                boss_drop_count=self.config.boss_drop_count,
                mimic_second_drop_chance=self.config.mimic_second_drop_chance,
            ),
            writer=self.writer,
            scheduler=self.scheduler,
            notifier=notifier,
            ledger=self.ledger,
            config=self.config,
        )
        self.inventory = InventoryService(
            self.state,
            self.writer,
            clock=lambda: self.scheduler.now,
            config=self.config,
        )
        self._heat_decay: ScheduledCall | None = None

    @property
    def running(self) -> bool:
        return self._heat_decay is not None

    def start(self, floor: int = 1) -> List[object]:
        """Load items, enter ``floor`` and start the heat decay timer."""
        events = self.load_items()
        self.floors.enter_floor(max(1, floor))
        if self._heat_decay is None:
            self._heat_decay = self.ledger.start_heat_decay(
                self.scheduler,
                self.state.zone_heat,
                interval=self.config.heat_decay_interval,
                step=self.config.heat_decay_step,
            )
        logger.info("Session started for character %s on floor %d", self.state.character.id, self.state.floor)
        return events

    def load_items(self) -> List[object]:
        """Replace the in-memory items with the gateway's rows; keeps them on failure."""
        character_id = self.state.character.id
        try:
            rows = self._gateway.load_items(character_id)
        except PersistenceError as exc:
            logger.warning("Loading items for character %s failed: %s", character_id, exc)
            return [PersistenceFailedEvent(operation="load_items", message=str(exc))]
        self.state.items[:] = [Item.from_row(row) for row in rows]
        settled = assign_missing_slots(self.state.items)
        if settled:
            logger.debug("Settled slots for %d loaded items of character %s", len(settled), character_id)
        return []

    def tick(self) -> List[object]:
        """Run due timers and return the events they produced."""
        self.scheduler.run_due()
        return self.floors.drain_deferred_events()

    def close(self) -> None:
        self.state.cancel_counter_attack()
        if self._heat_decay is not None:
            self._heat_decay.cancel()
            self._heat_decay = None

    # ------------------------------------------------------------- Actions
    def explore_room(self, room_id: str) -> List[object]:
        return self.floors.explore_room(room_id)

    def attack(self) -> List[object]:
        return self.floors.attack()

    def next_floor(self) -> List[object]:
        return self.floors.next_floor()

    def toggle_equip(self, item_id: str) -> List[object]:
        return self.inventory.toggle_equip(item_id)

    def use_potion(self, item_id: str) -> List[object]:
        return self.inventory.use_potion(item_id)

    def sell_item(self, item_id: str) -> List[object]:
        return self.inventory.sell_item(item_id)

    def sell_all_items(self) -> List[object]:
        return self.inventory.sell_all_items()

    def buy_potion(self) -> List[object]:
        return self.inventory.buy_potion()

    def toggle_rarity_filter(self, rarity: str) -> List[object]:
        return self.inventory.toggle_rarity_filter(rarity)

    def reset_zone_heat(self) -> None:
        self.state.zone_heat.reset()
