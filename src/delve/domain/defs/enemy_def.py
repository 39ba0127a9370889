"""Enemy variant definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from delve.core.types import EnemyRarity


@dataclass(slots=True)
class EnemyVariantDef:
    """How a room type shapes the enemy spawned inside it."""

    id: str  # room type
    rarity: EnemyRarity
    multiplier: float
    title_prefix: str = ""
    fixed_name: str | None = None
