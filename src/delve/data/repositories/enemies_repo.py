"""Repository for enemy names and room-type variants."""
from __future__ import annotations

from typing import Dict, Tuple

from delve.core.types import COMBAT_ROOM_TYPES, ENEMY_RARITIES
from delve.data.errors import DataReferenceError, DataValidationError
from delve.data.repositories.base import RepositoryBase
from delve.domain.defs import EnemyVariantDef


class EnemiesRepository(RepositoryBase[EnemyVariantDef]):
    """Loads the enemy roster: base names plus one variant per combat room type."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)
        self._names: Tuple[str, ...] | None = None

    def names(self) -> Tuple[str, ...]:
        self._ensure_loaded()
        assert self._names is not None
        return self._names

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyVariantDef]:
        names = self._require_list(raw.get("names"), "enemies.names")
        if not names:
            raise DataValidationError("enemies.names must not be empty.")
        self._names = tuple(self._require_str(name, f"enemies.names[{idx}]") for idx, name in enumerate(names))

        variants_raw = self._require_mapping(raw.get("variants"), "enemies.variants")
        variants: Dict[str, EnemyVariantDef] = {}
        for room_type, payload in variants_raw.items():
            context = f"enemies.variants.{room_type}"
            if room_type not in COMBAT_ROOM_TYPES:
                raise DataReferenceError(f"{context} is not a combat room type.")
            data = self._require_mapping(payload, context)
            rarity = self._require_str(data.get("rarity"), f"{context}.rarity")
            if rarity not in ENEMY_RARITIES:
                raise DataReferenceError(f"{context}.rarity '{rarity}' is not a known enemy rarity.")
            fixed_name = data.get("fixed_name")
            if fixed_name is not None:
                fixed_name = self._require_str(fixed_name, f"{context}.fixed_name")
            title_prefix = data.get("title_prefix", "")
            if not isinstance(title_prefix, str):
                raise DataValidationError(f"{context}.title_prefix must be a string.")
            variants[room_type] = EnemyVariantDef(
                id=room_type,
                rarity=rarity,  # type: ignore[arg-type]
                multiplier=self._require_number(data.get("multiplier"), f"{context}.multiplier", minimum=0.1),
                title_prefix=title_prefix,
                fixed_name=fixed_name,
            )
        missing = set(COMBAT_ROOM_TYPES) - set(variants)
        if missing:
            raise DataReferenceError(f"enemies.variants is missing room types: {', '.join(sorted(missing))}.")
        return variants
