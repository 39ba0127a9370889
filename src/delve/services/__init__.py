"""Service layer exports."""

from .errors import FactoryError, PersistenceError
from .collaborators import DropNotifier, EncounterContext, EnemyFactory, PersistenceGateway
from .persistence import CharacterWriter, PersistenceFailedEvent
from .loot_generator import LootContext, LootGenerator
from .floor_progression import FloorProgressionManager
from .inventory_service import InventoryService
from .game_session import GameSession

__all__ = [
    "CharacterWriter",
    "DropNotifier",
    "EncounterContext",
    "EnemyFactory",
    "FactoryError",
    "FloorProgressionManager",
    "GameSession",
    "InventoryService",
    "LootContext",
    "LootGenerator",
    "PersistenceError",
    "PersistenceFailedEvent",
    "PersistenceGateway",
]
