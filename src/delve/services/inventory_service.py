"""Equip, potion and shop operations on the session's items."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

from delve.config import EngineConfig
from delve.domain.entities import Item
from delve.domain.equipment import apply_equip_plan, plan_equip, revert_equip_plan
from delve.domain.rarity import ITEM_RARITIES
from delve.domain.state import SessionState
from delve.services.factories import make_instance_id
from delve.services.persistence import CharacterWriter

logger = logging.getLogger(__name__)

POTION_NAME = "Health Potion"


@dataclass(slots=True)
class InventoryEvent:
    """Base class for inventory/equipment events."""


@dataclass(slots=True)
class ItemEquippedEvent(InventoryEvent):
    item_id: str
    item_name: str
    slot: str
    displaced_ids: List[str]


@dataclass(slots=True)
class ItemUnequippedEvent(InventoryEvent):
    item_id: str
    item_name: str
    slot: str


@dataclass(slots=True)
class EquipRejectedEvent(InventoryEvent):
    item_id: str
    reason: str
    message: str


@dataclass(slots=True)
class PotionUsedEvent(InventoryEvent):
    item_id: str
    healed: int
    health: int


@dataclass(slots=True)
class ItemsSoldEvent(InventoryEvent):
    item_ids: List[str]
    total_gain: int
    total_gold: int


@dataclass(slots=True)
class PotionPurchasedEvent(InventoryEvent):
    item_id: str
    cost: int
    total_gold: int


@dataclass(slots=True)
class InventoryActionFailedEvent(InventoryEvent):
    reason: str
    message: str


@dataclass(slots=True)
class RarityFilterChangedEvent(InventoryEvent):
    rarity: str
    excluded: bool


class InventoryService:
    """Service responsible for item, equipment and potion operations."""

    def __init__(
        self,
        state: SessionState,
        writer: CharacterWriter,
        *,
        clock: Callable[[], float],
        config: EngineConfig | None = None,
    ) -> None:
        self._state = state
        self._writer = writer
        self._clock = clock
        self._config = config or EngineConfig()

    def toggle_equip(self, item_id: str) -> List[object]:
        """Equip or unequip ``item_id``; consumables and unknown ids are no-ops."""
        item = self._state.find_item(item_id)
        if item is None:
            return []
        plan = plan_equip(item, self._state.items)
        if plan.rejected is not None:
            logger.warning("Equip of %s rejected: %s", item.id, plan.rejected)
            return [
                EquipRejectedEvent(
                    item_id=item.id,
                    reason=plan.rejected,
                    message="Unequip the two-handed weapon before using an off-hand item.",
                )
            ]
        if plan.is_noop:
            return []

        apply_equip_plan(plan)
        events: List[object] = []
        if plan.equip:
            events.append(
                ItemEquippedEvent(
                    item_id=item.id,
                    item_name=item.name,
                    slot=plan.slot or "",
                    displaced_ids=[other.id for other in plan.displaced],
                )
            )
        else:
            events.append(ItemUnequippedEvent(item_id=item.id, item_name=item.name, slot=plan.slot or ""))
        failures = self._writer.update_items(
            [item, *plan.displaced],
            lambda: revert_equip_plan(plan),
            operation="equip",
        )
        if failures:
            return list(failures)
        return events

    def use_potion(self, item_id: str) -> List[object]:
        state = self._state
        potion = state.find_item(item_id)
        if potion is None or not potion.is_consumable:
            return []
        now = self._clock()
        if now < state.potion_ready_at:
            return [InventoryActionFailedEvent(reason="potion_cooldown", message="The potion is not ready yet.")]

        character = state.character
        previous = character.health
        health = min(character.max_health, previous + self._config.potion_heal)
        failures = self._writer.update_character(character, {"health": health}, operation="use_potion")
        if failures:
            return list(failures)
        failures = self._writer.delete_items(state.items, [potion], operation="consume_potion")
        if failures:
            failures += self._writer.update_character(character, {"health": previous}, operation="use_potion_undo")
            return list(failures)
        healed = character.health - previous
        state.potion_ready_at = now + self._config.potion_cooldown
        return [PotionUsedEvent(item_id=potion.id, healed=healed, health=character.health)]

    def sell_item(self, item_id: str) -> List[object]:
        item = self._state.find_item(item_id)
        if item is None:
            return [InventoryActionFailedEvent(reason="not_owned", message="Item not available to sell.")]
        return self._sell([item])

    def sell_all_items(self) -> List[object]:
        """Sell every unequipped item that is not a potion."""
        sellable = [item for item in self._state.items if not item.equipped and not item.is_consumable]
        if not sellable:
            return []
        return self._sell(sellable)

    def _sell(self, items: List[Item]) -> List[object]:
        character = self._state.character
        total = sum(max(0, item.value) for item in items)
        failures = self._writer.update_character(character, {"gold": character.gold + total}, operation="sell")
        if failures:
            return list(failures)
        failures = self._writer.delete_items(self._state.items, items, operation="sell")
        if failures:
            # The items stay owned, so take the payment back.
            failures += self._writer.update_character(
                character, {"gold": character.gold - total}, operation="sell_refund"
            )
            return list(failures)
        return [ItemsSoldEvent(item_ids=[item.id for item in items], total_gain=total, total_gold=character.gold)]

    def buy_potion(self) -> List[object]:
        state = self._state
        character = state.character
        cost = self._config.potion_cost
        if character.gold < cost:
            return [InventoryActionFailedEvent(reason="insufficient_gold", message="Not enough gold.")]
        failures = self._writer.update_character(character, {"gold": character.gold - cost}, operation="buy_potion")
        if failures:
            return list(failures)
        potion = Item(
            id=make_instance_id("item", state.rng),
            character_id=character.id,
            name=POTION_NAME,
            type="potion",
            rarity="common",
            value=cost,
        )
        failures = self._writer.insert_items(state.items, [potion], operation="buy_potion")
        if failures:
            failures += self._writer.update_character(
                character, {"gold": character.gold + cost}, operation="buy_potion_refund"
            )
            return list(failures)
        return [PotionPurchasedEvent(item_id=potion.id, cost=cost, total_gold=character.gold)]

    def toggle_rarity_filter(self, rarity: str) -> List[object]:
        """Add or remove ``rarity`` from the loot exclusion set."""
        if rarity not in ITEM_RARITIES:
            return []
        excluded = self._state.excluded_rarities
        if rarity in excluded:
            excluded.discard(rarity)
        else:
            excluded.add(rarity)
        return [RarityFilterChangedEvent(rarity=rarity, excluded=rarity in excluded)]
