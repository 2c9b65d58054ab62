"""SqlItemStore 통합 테스트 (인메모리 SQLite + EventBus)"""

import pytest

from bh2e.core.event_bus import SheetEvent
from bh2e.core.event_types import EventTypes
from bh2e.core.sheet.errors import NotFound
from bh2e.core.sheet.models import (
    Actor,
    ArmourValue,
    DieSize,
    ItemType,
    UsageDie,
)
from bh2e.core.sheet.patches import ItemPatch
from bh2e.db.models import ItemModel


class TestActors:
    def test_get_actor(self, store, character) -> None:
        actor = store.get_actor("hero")
        assert actor.name == "Ayla"
        assert actor.attributes["strength"] == 12
        assert actor.damage_dice.armed == "d8"

    def test_missing_actor(self, store) -> None:
        assert store.get_actor("nobody") is None

    def test_generated_id(self, store) -> None:
        actor = store.create_actor(Actor(actor_id="", name="Goblin"))
        assert actor.actor_id


class TestItems:
    def test_round_trip(self, store, character, add_item) -> None:
        created = add_item(
            item_id="torch",
            item_type=ItemType.EQUIPMENT,
            name="Torches",
            usage_die=UsageDie(maximum=DieSize.D6),
            quantity=3,
        )
        assert created.item_id == "torch"

        actor = store.get_actor("hero")
        item = actor.find_item("torch")
        assert item.usage_die == UsageDie(maximum=DieSize.D6, current=DieSize.NONE)
        assert item.quantity == 3

    def test_find_owner(self, store, character, add_item) -> None:
        add_item(item_id="mail", item_type=ItemType.ARMOUR, name="Mail",
                 armour_value=ArmourValue(total=3))
        assert store.find_owner("mail").actor_id == "hero"
        assert store.find_owner("missing") is None

    def test_items_keep_insertion_order(self, store, character, add_item) -> None:
        for name in ("c", "a", "b"):
            add_item(item_id=name, item_type=ItemType.WEAPON, name=name)
        assert [i.item_id for i in store.get_actor("hero").items] == ["c", "a", "b"]

    def test_unknown_item_type_skipped(self, store, db_session, character) -> None:
        db_session.add(
            ItemModel(item_id="odd", actor_id="hero", item_type="vehicle", name="Cart", data={})
        )
        db_session.commit()
        assert store.get_actor("hero").find_item("odd") is None

    @pytest.mark.parametrize(
        "data",
        [
            {"armour_value": {"total": "three", "broken": 0}},
            {"armour_value": {"total": None}},
            {"armour_value": "broken"},
            {"quantity": "many"},
            {"level": [1]},
        ],
    )
    def test_corrupt_row_skipped_not_fatal(self, store, db_session, character, add_item, data) -> None:
        add_item(item_id="sword", item_type=ItemType.WEAPON, name="Sword")
        db_session.add(
            ItemModel(item_id="bad", actor_id="hero", item_type="armour", name="Rusty", data=data)
        )
        db_session.commit()

        actor = store.get_actor("hero")
        assert actor.find_item("bad") is None
        assert actor.find_item("sword") is not None


class TestUpdatePartial:
    def test_only_patched_fields_change(self, store, character, add_item) -> None:
        add_item(
            item_id="torch",
            item_type=ItemType.EQUIPMENT,
            name="Torches",
            usage_die=UsageDie(maximum=DieSize.D8, current=DieSize.D6),
            quantity=3,
        )
        actor = store.get_actor("hero")
        store.update_partial(actor, ItemPatch(item_id="torch", usage_die_current=DieSize.D4))

        item = store.get_actor("hero").find_item("torch")
        assert item.usage_die.maximum is DieSize.D8
        assert item.usage_die.current is DieSize.D4
        assert item.quantity == 3

    def test_emits_item_updated(self, store, event_bus, character, add_item) -> None:
        add_item(item_id="mail", item_type=ItemType.ARMOUR, name="Mail",
                 armour_value=ArmourValue(total=3))
        events: list[SheetEvent] = []
        event_bus.subscribe(EventTypes.ITEM_UPDATED, events.append)

        store.update_partial(store.get_actor("hero"), ItemPatch(item_id="mail", armour_broken=1))
        assert len(events) == 1
        assert (events[0].actor_id, events[0].item_id, events[0].fields) == ("hero", "mail", ("armour_value",))

    def test_not_owned(self, store, character) -> None:
        other = store.create_actor(Actor(actor_id="other", name="Bran"))
        with pytest.raises(NotFound):
            store.update_partial(other, ItemPatch(item_id="torch", quantity=1))


class TestDelete:
    def test_delete(self, store, event_bus, character, add_item) -> None:
        add_item(item_id="rope", item_type=ItemType.EQUIPMENT, name="Rope")
        events: list[SheetEvent] = []
        event_bus.subscribe(EventTypes.ITEM_DELETED, events.append)

        store.delete_item(store.get_actor("hero"), "rope")
        assert store.find_owner("rope") is None
        assert len(events) == 1

    def test_delete_missing(self, store, character) -> None:
        with pytest.raises(NotFound):
            store.delete_item(store.get_actor("hero"), "nothing")
