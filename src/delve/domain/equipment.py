"""Equipment slot resolution, equip planning and set-bonus aggregation.

Planning is pure: :func:`plan_equip` only inspects the items and returns an
:class:`EquipPlan`. :func:`apply_equip_plan` flips the ``equipped`` flags
described by a plan and :func:`revert_equip_plan` undoes it.
:func:`assign_missing_slots` repairs loaded items that are equipped without
a slot.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from delve.domain.entities import Item, SetBonus, StatDeltas

EQUIPMENT_SLOTS: tuple[str, ...] = (
    "helmet",
    "chest",
    "legs",
    "boots",
    "gloves",
    "weapon",
    "shield",
    "amulet",
    "ring1",
    "ring2",
    "belt",
    "trinket",
)
OFF_HAND_SLOT = "shield"

_TYPE_TO_SLOT: Dict[str, str] = {
    "helmet": "helmet",
    "chest": "chest",
    "armor": "chest",
    "melee_armor": "chest",
    "ranged_armor": "chest",
    "mage_armor": "chest",
    "legs": "legs",
    "boots": "boots",
    "gloves": "gloves",
    "weapon": "weapon",
    "melee_weapon": "weapon",
    "ranged_weapon": "weapon",
    "mage_weapon": "weapon",
    "shield": "shield",
    "amulet": "amulet",
    "belt": "belt",
    "trinket": "trinket",
}
_SET_BONUS_STATS = ("damage", "armor", "strength", "dexterity", "intelligence", "mana")


@dataclass(slots=True)
class EquipPlan:
    """What toggling one item would change; ``rejected`` plans change nothing."""

    item: Item
    slot: str | None
    equip: bool
    displaced: List[Item] = field(default_factory=list)
    displaced_slots: List[str] = field(default_factory=list)
    rejected: str | None = None

    @property
    def is_noop(self) -> bool:
        return self.rejected is not None or self.slot is None


def occupied_slots(items: Iterable[Item]) -> Dict[str, Item]:
    """Map each occupied slot to its equipped item."""
    return {item.equipped_slot: item for item in items if item.equipped and item.equipped_slot}


def slot_family(item: Item) -> str | None:
    """The slot an item type belongs to, with rings reported as ``ring``."""
    if item.is_consumable:
        return None
    if item.type == "ring":
        return "ring"
    return _TYPE_TO_SLOT.get(item.type)


def slot_of(item: Item, equipped: Iterable[Item] = ()) -> str | None:
    """Resolve the logical slot for ``item`` given what is already equipped."""
    family = slot_family(item)
    if family != "ring":
        return family
    if item.equipped and item.equipped_slot in ("ring1", "ring2"):
        return item.equipped_slot
    occupied = occupied_slots(other for other in equipped if other.id != item.id)
    return "ring2" if "ring1" in occupied else "ring1"


def equipped_two_hander(items: Iterable[Item]) -> Item | None:
    for item in items:
        if item.equipped and item.two_handed and item.equipped_slot == "weapon":
            return item
    return None


def plan_equip(item: Item, items: Sequence[Item]) -> EquipPlan:
    """Work out the toggle for ``item`` against the full owned item list."""
    if item.equipped:
        return EquipPlan(item=item, slot=item.equipped_slot, equip=False)

    slot = slot_of(item, items)
    if slot is None:
        return EquipPlan(item=item, slot=None, equip=True)

    others = [other for other in items if other.id != item.id]
    if slot == OFF_HAND_SLOT and equipped_two_hander(others) is not None:
        return EquipPlan(item=item, slot=slot, equip=True, rejected="two_handed_weapon_equipped")

    occupied = occupied_slots(others)
    plan = EquipPlan(item=item, slot=slot, equip=True)
    vacate = [slot]
    if item.two_handed and slot == "weapon":
        vacate.append(OFF_HAND_SLOT)
    for vacated in vacate:
        if vacated in occupied:
            plan.displaced.append(occupied[vacated])
            plan.displaced_slots.append(vacated)
    return plan


def apply_equip_plan(plan: EquipPlan) -> None:
    if plan.is_noop:
        return
    for other in plan.displaced:
        other.equipped = False
        other.equipped_slot = None
    if plan.equip:
        plan.item.equipped = True
        plan.item.equipped_slot = plan.slot
    else:
        plan.item.equipped = False
        plan.item.equipped_slot = None


def revert_equip_plan(plan: EquipPlan) -> None:
    """Restore the flags an applied plan changed."""
    if plan.is_noop:
        return
    if plan.equip:
        plan.item.equipped = False
        plan.item.equipped_slot = None
    else:
        plan.item.equipped = True
        plan.item.equipped_slot = plan.slot
    for other, slot in zip(plan.displaced, plan.displaced_slots):
        other.equipped = True
        other.equipped_slot = slot


def assign_missing_slots(items: Sequence[Item]) -> List[Item]:
    """Settle equipped items that carry no slot, e.g. rows stored without one.

    Each gets the slot its type resolves to. Items whose slot is already held,
    off-hand items under a two-handed weapon, and unslottable items are
    unequipped instead. Returns the items that changed.
    """
    changed: List[Item] = []
    for item in items:
        if not item.equipped or item.equipped_slot:
            continue
        slot = slot_of(item, items)
        occupied = occupied_slots(items)
        if slot == OFF_HAND_SLOT:
            blocked = equipped_two_hander(items) is not None
        else:
            blocked = item.two_handed and slot == "weapon" and OFF_HAND_SLOT in occupied
        if slot is None or blocked or slot in occupied:
            item.equipped = False
        else:
            item.equipped_slot = slot
        changed.append(item)
    return changed


# -------------------------------------------------------------- Aggregation
def _set_bonus_table(items: Sequence[Item]) -> Dict[str, List[SetBonus]]:
    table: Dict[str, List[SetBonus]] = {}
    for item in items:
        if item.set_name and item.set_bonuses and item.set_name not in table:
            table[item.set_name] = list(item.set_bonuses)
    return table


def compute_set_bonuses(equipped_items: Iterable[Item]) -> StatDeltas:
    """Sum every set bonus whose piece threshold is met by the equipped items."""
    equipped = [item for item in equipped_items if item.equipped]
    counts: Dict[str, int] = {}
    for item in equipped:
        if item.set_name:
            counts[item.set_name] = counts.get(item.set_name, 0) + 1

    totals = StatDeltas()
    for set_name, bonuses in _set_bonus_table(equipped).items():
        pieces = counts.get(set_name, 0)
        for bonus in bonuses:
            if bonus.pieces_required > pieces:
                continue
            for stat in _SET_BONUS_STATS:
                totals.add(stat, getattr(bonus, stat))
    return totals


def aggregate_affixes(equipped_items: Iterable[Item]) -> StatDeltas:
    totals = StatDeltas()
    for item in equipped_items:
        if not item.equipped:
            continue
        for affix in item.affixes:
            totals.add(affix.stat, affix.value)
    return totals


def equipped_armor(equipped_items: Iterable[Item]) -> int:
    return sum(item.armor or 0 for item in equipped_items if item.equipped)


def equipped_weapon(items: Iterable[Item]) -> Item | None:
    for item in items:
        if item.equipped and item.equipped_slot == "weapon":
            return item
    return None
