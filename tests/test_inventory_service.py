from delve.config import EngineConfig
from delve.core.rng import RNG
from delve.core.scheduler import ManualClock
from delve.domain.entities import Character, Item
from delve.domain.state import SessionState
from delve.services.inventory_service import (
    EquipRejectedEvent,
    InventoryActionFailedEvent,
    InventoryService,
    ItemEquippedEvent,
    ItemsSoldEvent,
    ItemUnequippedEvent,
    PotionPurchasedEvent,
    PotionUsedEvent,
    RarityFilterChangedEvent,
)
from delve.services.persistence import CharacterWriter, PersistenceFailedEvent
from tests.helpers.fakes import InMemoryPersistence


def _item(
    item_id: str,
    item_type: str,
    *,
    value: int = 10,
    equipped_slot: str | None = None,
    two_handed: bool = False,
) -> Item:
    return Item(
        id=item_id,
        character_id="hero",
        name=item_id.title(),
        type=item_type,
        rarity="common",
        value=value,
        two_handed=two_handed,
        equipped=equipped_slot is not None,
        equipped_slot=equipped_slot,
    )


def _make_state_and_service(
    items: list[Item] | None = None,
    *,
    character: Character | None = None,
    fail_on: tuple[str, ...] = (),
    config: EngineConfig | None = None,
):
    clock = ManualClock()
    state = SessionState(
        rng=RNG(3),
        character=character or Character(id="hero", name="Hero"),
        items=list(items or []),
    )
    gateway = InMemoryPersistence(rows=[item.to_row() for item in state.items], fail_on=fail_on)
    service = InventoryService(state, CharacterWriter(gateway, "hero"), clock=clock, config=config)
    return state, service, gateway, clock


def test_equip_into_empty_slot_persists_flags() -> None:
    helm = _item("helm", "helmet")
    state, service, gateway, _ = _make_state_and_service([helm])

    events = service.toggle_equip("helm")

    assert events == [ItemEquippedEvent(item_id="helm", item_name="Helm", slot="helmet", displaced_ids=[])]
    assert helm.equipped and helm.equipped_slot == "helmet"
    assert gateway.item_updates == [{"helm": {"equipped": True, "equipped_slot": "helmet"}}]


def test_equip_displaces_current_slot_holder() -> None:
    old = _item("old", "boots", equipped_slot="boots")
    new = _item("new", "boots")
    state, service, gateway, _ = _make_state_and_service([old, new])

    events = service.toggle_equip("new")

    assert events[0].displaced_ids == ["old"]
    assert not old.equipped and old.equipped_slot is None
    assert [item.id for item in state.equipped_items] == ["new"]
    assert set(gateway.item_updates[0]) == {"new", "old"}


def test_toggle_equipped_item_unequips_it() -> None:
    sword = _item("sword", "melee_weapon", equipped_slot="weapon")
    _, service, _, _ = _make_state_and_service([sword])

    events = service.toggle_equip("sword")

    assert events == [ItemUnequippedEvent(item_id="sword", item_name="Sword", slot="weapon")]
    assert not sword.equipped


def test_two_hander_clears_weapon_and_shield() -> None:
    sword = _item("sword", "melee_weapon", equipped_slot="weapon")
    shield = _item("shield", "shield", equipped_slot="shield")
    maul = _item("maul", "melee_weapon", two_handed=True)
    state, service, _, _ = _make_state_and_service([sword, shield, maul])

    service.toggle_equip("maul")

    assert [item.id for item in state.equipped_items] == ["maul"]


def test_shield_rejected_while_two_hander_equipped() -> None:
    maul = _item("maul", "melee_weapon", equipped_slot="weapon", two_handed=True)
    shield = _item("shield", "shield")
    _, service, gateway, _ = _make_state_and_service([maul, shield])

    events = service.toggle_equip("shield")

    assert isinstance(events[0], EquipRejectedEvent)
    assert events[0].reason == "two_handed_weapon_equipped"
    assert not shield.equipped and maul.equipped
    assert gateway.item_updates == []


def test_rings_fill_both_ring_slots() -> None:
    first = _item("first", "ring")
    second = _item("second", "ring")
    _, service, _, _ = _make_state_and_service([first, second])

    service.toggle_equip("first")
    service.toggle_equip("second")

    assert (first.equipped_slot, second.equipped_slot) == ("ring1", "ring2")


def test_potions_and_unknown_items_cannot_be_equipped() -> None:
    potion = _item("potion", "potion")
    _, service, gateway, _ = _make_state_and_service([potion])

    assert service.toggle_equip("potion") == []
    assert service.toggle_equip("missing") == []
    assert not potion.equipped
    assert gateway.item_updates == []


def test_failed_equip_write_restores_previous_loadout() -> None:
    old = _item("old", "gloves", equipped_slot="gloves")
    new = _item("new", "gloves")
    _, service, _, _ = _make_state_and_service([old, new], fail_on=("update_items",))

    events = service.toggle_equip("new")

    assert events == [PersistenceFailedEvent(operation="equip", message="update_items unavailable")]
    assert old.equipped and old.equipped_slot == "gloves"
    assert not new.equipped and new.equipped_slot is None


def test_potion_heals_consumes_and_starts_cooldown() -> None:
    first = _item("p1", "potion")
    second = _item("p2", "potion")
    state, service, gateway, clock = _make_state_and_service(
        [first, second], character=Character(id="hero", name="Hero", health=30)
    )

    events = service.use_potion("p1")

    assert events == [PotionUsedEvent(item_id="p1", healed=50, health=80)]
    assert [item.id for item in state.items] == ["p2"]
    assert gateway.deleted == ["p1"]

    blocked = service.use_potion("p2")
    assert isinstance(blocked[0], InventoryActionFailedEvent)
    assert blocked[0].reason == "potion_cooldown"

    clock.advance(3)
    healed = service.use_potion("p2")
    assert healed == [PotionUsedEvent(item_id="p2", healed=20, health=100)]


def test_potion_use_undone_when_consume_fails() -> None:
    potion = _item("p1", "potion")
    state, service, _, _ = _make_state_and_service(
        [potion], character=Character(id="hero", name="Hero", health=30), fail_on=("delete_items",)
    )

    events = service.use_potion("p1")

    assert all(isinstance(event, PersistenceFailedEvent) for event in events)
    assert state.character.health == 30
    assert state.items == [potion]
    assert state.potion_ready_at == 0.0


def test_non_potion_cannot_be_drunk() -> None:
    helm = _item("helm", "helmet")
    _, service, _, _ = _make_state_and_service([helm])

    assert service.use_potion("helm") == []


def test_sell_item_adds_value_and_removes_it() -> None:
    gem = _item("gem", "amulet", value=40)
    state, service, gateway, _ = _make_state_and_service([gem])

    events = service.sell_item("gem")

    assert events == [ItemsSoldEvent(item_ids=["gem"], total_gain=40, total_gold=40)]
    assert state.items == []
    assert gateway.character_updates == [{"gold": 40}]


def test_sell_unknown_item_reports_not_owned() -> None:
    state, service, _, _ = _make_state_and_service()

    events = service.sell_item("ghost")

    assert events[0].reason == "not_owned"
    assert state.character.gold == 0


def test_sell_all_keeps_equipped_items_and_potions() -> None:
    items = [
        _item("worn", "helmet", value=50, equipped_slot="helmet"),
        _item("potion", "potion", value=75),
        _item("a", "boots", value=12),
        _item("b", "belt", value=8),
    ]
    state, service, _, _ = _make_state_and_service(items)

    events = service.sell_all_items()

    assert events[0].item_ids == ["a", "b"]
    assert state.character.gold == 20
    assert [item.id for item in state.items] == ["worn", "potion"]


def test_sell_all_with_nothing_sellable_is_noop() -> None:
    _, service, gateway, _ = _make_state_and_service([_item("potion", "potion")])

    assert service.sell_all_items() == []
    assert gateway.character_updates == []


def test_failed_sell_refunds_gold() -> None:
    items = [_item("a", "boots", value=12)]
    state, service, _, _ = _make_state_and_service(
        items, character=Character(id="hero", name="Hero", gold=5), fail_on=("delete_items",)
    )

    events = service.sell_all_items()

    assert [event.operation for event in events] == ["sell"]
    assert state.character.gold == 5
    assert [item.id for item in state.items] == ["a"]


def test_buy_potion_spends_gold_and_adds_potion() -> None:
    state, service, gateway, _ = _make_state_and_service(character=Character(id="hero", name="Hero", gold=100))

    events = service.buy_potion()

    assert isinstance(events[0], PotionPurchasedEvent)
    assert events[0].total_gold == 25
    potion = state.items[0]
    assert (potion.name, potion.type, potion.value) == ("Health Potion", "potion", 75)
    assert potion.id in gateway.rows


def test_buy_potion_requires_enough_gold() -> None:
    state, service, gateway, _ = _make_state_and_service(character=Character(id="hero", name="Hero", gold=74))

    events = service.buy_potion()

    assert events == [InventoryActionFailedEvent(reason="insufficient_gold", message="Not enough gold.")]
    assert state.character.gold == 74
    assert state.items == []
    assert gateway.character_updates == []


def test_buy_potion_refunds_when_insert_fails() -> None:
    state, service, _, _ = _make_state_and_service(
        character=Character(id="hero", name="Hero", gold=100), fail_on=("insert_items",)
    )

    events = service.buy_potion()

    assert [event.operation for event in events] == ["buy_potion"]
    assert state.character.gold == 100
    assert state.items == []


def test_rarity_filter_toggles_and_ignores_unknown_rarities() -> None:
    state, service, _, _ = _make_state_and_service()

    assert service.toggle_rarity_filter("common") == [RarityFilterChangedEvent(rarity="common", excluded=True)]
    assert state.excluded_rarities == {"common"}
    assert service.toggle_rarity_filter("common") == [RarityFilterChangedEvent(rarity="common", excluded=False)]
    assert service.toggle_rarity_filter("shiny") == []
    assert state.excluded_rarities == set()
