"""Experience, level and zone-heat bookkeeping for enemy defeats."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from delve.core.scheduler import ScheduledCall, Scheduler
from delve.domain.entities import Character, Enemy, ZoneHeat

XP_PER_LEVEL = 100

# Growth granted by one promotion.
LEVEL_UP_MAX_HEALTH = 10
LEVEL_UP_MAX_MANA = 5
LEVEL_UP_ATTRIBUTE = 2

HEAT_GAIN: Dict[str, int] = {
    "normal": 3,
    "rare": 8,
    "elite": 15,
    "boss": 30,
}
DEFAULT_HEAT_GAIN = 3


def experience_threshold(level: int) -> int:
    return max(1, level) * XP_PER_LEVEL


@dataclass(slots=True)
class DefeatRewards:
    """Partial character update produced by one enemy defeat."""

    experience_gained: int
    gold_gained: int
    leveled_up: bool
    updates: Dict[str, int] = field(default_factory=dict)

    @property
    def new_level(self) -> int | None:
        return self.updates.get("level")


class ProgressionLedger:
    """Turns kills into experience, gold and heat.

    Promotion is single-step: a kill that overshoots several thresholds still
    grants exactly one level, with the surplus carried as experience.
    """

    def apply_enemy_defeat(self, character: Character, enemy: Enemy) -> DefeatRewards:
        """Compute the update for ``character``; the caller applies and persists it."""
        threshold = experience_threshold(character.level)
        experience = character.experience + max(0, enemy.experience)
        updates: Dict[str, int] = {"gold": character.gold + max(0, enemy.gold)}
        leveled_up = experience >= threshold
        if leveled_up:
            max_health = character.max_health + LEVEL_UP_MAX_HEALTH
            max_mana = character.max_mana + LEVEL_UP_MAX_MANA
            updates.update(
                level=character.level + 1,
                experience=experience - threshold,
                max_health=max_health,
                health=max_health,
                max_mana=max_mana,
                mana=max_mana,
                strength=character.strength + LEVEL_UP_ATTRIBUTE,
                dexterity=character.dexterity + LEVEL_UP_ATTRIBUTE,
                intelligence=character.intelligence + LEVEL_UP_ATTRIBUTE,
            )
        else:
            updates["experience"] = experience
        return DefeatRewards(
            experience_gained=max(0, enemy.experience),
            gold_gained=max(0, enemy.gold),
            leveled_up=leveled_up,
            updates=updates,
        )

    @staticmethod
    def heat_gain_for(enemy_rarity: str) -> int:
        return HEAT_GAIN.get(enemy_rarity, DEFAULT_HEAT_GAIN)

    def record_kill(self, heat: ZoneHeat, enemy_rarity: str) -> int:
        """Raise ``heat`` for a kill of the given enemy rarity; returns the new value."""
        return heat.increase(self.heat_gain_for(enemy_rarity))

    @staticmethod
    def start_heat_decay(
        scheduler: Scheduler,
        heat: ZoneHeat,
        *,
        interval: float,
        step: int = 1,
    ) -> ScheduledCall:
        """Schedule the recurring decay; cancel the returned handle on teardown."""
        return scheduler.call_every(interval, lambda: heat.decay(step))
