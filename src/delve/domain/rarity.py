"""Item rarity ladder and the per-tier scaling tables derived from it."""
from __future__ import annotations

from typing import Dict

from delve.core.types import ItemRarity

# Ordered lowest to highest; "set" is the top tier.
ITEM_RARITIES: tuple[ItemRarity, ...] = (
    "common",
    "magic",
    "rare",
    "epic",
    "legendary",
    "mythic",
    "radiant",
    "set",
)

RARITY_MULTIPLIERS: Dict[str, float] = {
    "common": 1.0,
    "magic": 1.3,
    "rare": 1.8,
    "epic": 2.2,
    "legendary": 2.5,
    "mythic": 3.5,
    "radiant": 5.0,
    "set": 3.0,
}

AFFIX_COUNTS: Dict[str, int] = {
    "common": 0,
    "magic": 1,
    "rare": 2,
    "epic": 2,
    "legendary": 3,
    "mythic": 4,
    "radiant": 4,
    "set": 5,
}


def rarity_rank(rarity: str) -> int:
    """Position of ``rarity`` on the ladder; unknown values rank lowest."""
    try:
        return ITEM_RARITIES.index(rarity)  # type: ignore[arg-type]
    except ValueError:
        return 0


def is_at_least(rarity: str, minimum: str) -> bool:
    return rarity_rank(rarity) >= rarity_rank(minimum)


def clamp_rarity(rarity: str, minimum: str) -> ItemRarity:
    """Raise ``rarity`` to ``minimum`` when it ranks below it."""
    return ITEM_RARITIES[max(rarity_rank(rarity), rarity_rank(minimum))]


def lower_rarities(rarity: str) -> tuple[ItemRarity, ...]:
    """``rarity`` followed by every lower tier, highest first."""
    return tuple(reversed(ITEM_RARITIES[: rarity_rank(rarity) + 1]))
