"""Factory helpers for runtime entities."""

from .character_factory import create_character, create_starter_weapon
from .enemy_factory import DefaultEnemyFactory
from .id_factory import make_instance_id

__all__ = [
    "DefaultEnemyFactory",
    "create_character",
    "create_starter_weapon",
    "make_instance_id",
]
