"""Factory for new player characters and their starting kit."""
from __future__ import annotations

from typing import List, Tuple

from delve.core.rng import RNG
from delve.domain.entities import Character, Item
from delve.services.errors import FactoryError

from .id_factory import make_instance_id

STARTER_WEAPON_NAME = "Rusty Sword"
STARTER_WEAPON_DAMAGE = 5
STARTER_WEAPON_VALUE = 10


def create_starter_weapon(character_id: str, rng: RNG) -> Item:
    return Item(
        id=make_instance_id("item", rng),
        character_id=character_id,
        name=STARTER_WEAPON_NAME,
        type="melee_weapon",
        rarity="common",
        value=STARTER_WEAPON_VALUE,
        damage=STARTER_WEAPON_DAMAGE,
        equipped=True,
        equipped_slot="weapon",
    )


def create_character(name: str, rng: RNG) -> Tuple[Character, List[Item]]:
    """Create a level 1 character with default stats and an equipped starter weapon."""
    cleaned = name.strip()
    if not cleaned:
        raise FactoryError("Character name must not be empty.")
    character = Character(id=make_instance_id("character", rng), name=cleaned)
    return character, [create_starter_weapon(character.id, rng)]
