"""Repository for affix pools keyed by affix category."""
from __future__ import annotations

from typing import Dict, Tuple

from delve.data.errors import DataReferenceError
from delve.data.repositories.base import RepositoryBase
from delve.domain.defs import AffixDef, AffixPoolDef
from delve.domain.entities import STAT_NAMES

# Which affix pools each item category draws from.
CATEGORY_POOLS: Dict[str, Tuple[str, ...]] = {
    "weapon": ("offensive",),
    "armor": ("defensive", "utility"),
    "potion": (),
}


class AffixesRepository(RepositoryBase[AffixPoolDef]):
    """Loads the offensive, defensive and utility affix pools."""

    def __init__(self, base_path=None) -> None:
        super().__init__("affixes.json", base_path)

    def pool_for(self, category: str) -> Tuple[AffixDef, ...]:
        """Concatenated affix candidates for an item category."""
        affixes: list[AffixDef] = []
        for pool_id in CATEGORY_POOLS.get(category, ()):
            affixes.extend(self.get(pool_id).affixes)
        return tuple(affixes)

    def _build(self, raw: dict[str, object]) -> Dict[str, AffixPoolDef]:
        pools: Dict[str, AffixPoolDef] = {}
        for pool_id, payload in raw.items():
            context = f"affixes.{pool_id}"
            entries = self._require_list(payload, context)
            affixes: list[AffixDef] = []
            for index, entry in enumerate(entries):
                entry_ctx = f"{context}[{index}]"
                data = self._require_mapping(entry, entry_ctx)
                stat = self._require_str(data.get("stat"), f"{entry_ctx}.stat")
                if stat not in STAT_NAMES:
                    raise DataReferenceError(f"{entry_ctx}.stat '{stat}' is not a known stat.")
                affixes.append(
                    AffixDef(
                        name=self._require_str(data.get("name"), f"{entry_ctx}.name"),
                        stat=stat,
                        value=self._require_int(data.get("value"), f"{entry_ctx}.value", minimum=1),
                    )
                )
            pools[pool_id] = AffixPoolDef(id=pool_id, affixes=tuple(affixes))
        missing = {pool for pools_for in CATEGORY_POOLS.values() for pool in pools_for} - set(pools)
        if missing:
            raise DataReferenceError(f"affixes.json is missing pools: {', '.join(sorted(missing))}.")
        return pools
