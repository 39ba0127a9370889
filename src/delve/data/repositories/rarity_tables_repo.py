"""Repository for item-rarity tables keyed by enemy rarity."""
from __future__ import annotations

from typing import Dict

from delve.core.types import ENEMY_RARITIES
from delve.data.errors import DataReferenceError, DataValidationError
from delve.data.repositories.base import RepositoryBase
from delve.domain.defs import RarityTableDef
from delve.domain.rarity import ITEM_RARITIES


class RarityTablesRepository(RepositoryBase[RarityTableDef]):
    """Loads one probability table per enemy rarity tier."""

    def __init__(self, base_path=None) -> None:
        super().__init__("rarity_tables.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, RarityTableDef]:
        tables: Dict[str, RarityTableDef] = {}
        for enemy_rarity, payload in raw.items():
            if enemy_rarity not in ENEMY_RARITIES:
                raise DataReferenceError(f"rarity_tables.{enemy_rarity} is not a known enemy rarity.")
            context = f"rarity_tables.{enemy_rarity}"
            data = self._require_mapping(payload, context)
            for rarity in data:
                self._require_rarity(rarity, f"{context} key")
            # Ladder order, not file order, so cumulative steps climb the ladder.
            weights = {
                rarity: self._require_number(data[rarity], f"{context}.{rarity}", minimum=0.0)
                for rarity in ITEM_RARITIES
                if rarity in data
            }
            if sum(weights.values()) <= 0:
                raise DataValidationError(f"{context} must have a positive total weight.")
            tables[enemy_rarity] = RarityTableDef(id=enemy_rarity, weights=weights)
        missing = set(ENEMY_RARITIES) - set(tables)
        if missing:
            raise DataReferenceError(f"rarity_tables.json is missing tiers: {', '.join(sorted(missing))}.")
        return tables
