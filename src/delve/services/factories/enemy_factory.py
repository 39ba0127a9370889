"""Default enemy factory driven by the enemy roster definitions."""
from __future__ import annotations

import logging

from delve.core.rng import RNG
from delve.data.repositories import EnemiesRepository
from delve.domain.entities import Enemy
from delve.services.collaborators import EncounterContext
from delve.services.errors import FactoryError

from .id_factory import make_instance_id

logger = logging.getLogger(__name__)

FLOORS_PER_ENEMY_LEVEL = 3
# Full heat doubles enemy health and damage.
MAX_HEAT_TOUGHNESS = 1.0


def enemy_level(player_level: int, floor: int) -> int:
    return max(1, player_level) + max(0, floor) // FLOORS_PER_ENEMY_LEVEL


def heat_toughness(zone_heat: int) -> float:
    return 1 + MAX_HEAT_TOUGHNESS * max(0, min(100, zone_heat)) / 100


class DefaultEnemyFactory:
    """Spawns the room type's variant, scaled by level and zone heat."""

    def __init__(self, enemies_repo: EnemiesRepository, rng: RNG) -> None:
        self._enemies_repo = enemies_repo
        self._rng = rng

    def generate(self, context: EncounterContext) -> Enemy:
        try:
            variant = self._enemies_repo.get(context.room_type)
        except KeyError as exc:
            raise FactoryError(f"No enemy variant for room type '{context.room_type}'.") from exc

        level = enemy_level(context.player_level, context.floor)
        if variant.fixed_name:
            name = variant.fixed_name
        else:
            name = f"{variant.title_prefix}{self._rng.choice(self._enemies_repo.names())}"

        multiplier = variant.multiplier
        toughness = heat_toughness(context.zone_heat)
        max_health = max(1, int((30 + level * 15 + self._rng.random() * 20) * multiplier * toughness))
        damage = max(0, int((5 + level * 3) * multiplier * toughness))
        experience = max(0, int((20 + level * 10) * multiplier))
        gold = max(0, int((10 + level * 5 + self._rng.random() * 20) * multiplier))

        enemy = Enemy(
            id=make_instance_id("enemy", self._rng),
            name=name,
            level=level,
            health=max_health,
            max_health=max_health,
            damage=damage,
            experience=experience,
            gold=gold,
            rarity=variant.rarity,
        )
        logger.debug("Spawned %s (level %d, %s) for %s room", enemy.name, level, enemy.rarity, context.room_type)
        return enemy
