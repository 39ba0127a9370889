"""Instance ids for characters, items and enemies."""
from __future__ import annotations

from delve.core.rng import RNG

ID_SUFFIX_MIN = 100000
ID_SUFFIX_MAX = 999999


def make_instance_id(prefix: str, rng: RNG) -> str:
    """``<prefix>_<six digits>`` drawn from the session RNG, so seeded runs repeat their ids."""
    return f"{prefix}_{rng.randint(ID_SUFFIX_MIN, ID_SUFFIX_MAX)}"
