"""시트 뷰 구성 테스트"""

import logging

from bh2e.core.sheet.models import Actor, ActorType, Item, ItemType, MagicKind
from bh2e.core.sheet.view import build_character_view, build_creature_view


def _item(item_id: str, item_type: ItemType, name: str = "", **kwargs) -> Item:
    return Item(
        item_id=item_id,
        actor_id="hero",
        item_type=item_type,
        name=name or item_id,
        **kwargs,
    )


def _spell(item_id: str, level, kind: str = "spell") -> Item:
    return _item(item_id, ItemType.MAGIC, level=level, magic_kind=kind)


class TestCharacterView:
    def test_categorizes_items(self) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[
                _item("mail", ItemType.ARMOUR),
                _item("warrior", ItemType.CLASS),
                _item("rope", ItemType.EQUIPMENT),
                _item("sword", ItemType.WEAPON),
            ],
        )
        view = build_character_view(actor)
        assert [i.item_id for i in view.armour] == ["mail"]
        assert [i.item_id for i in view.classes] == ["warrior"]
        assert [i.item_id for i in view.equipment] == ["rope"]
        assert [i.item_id for i in view.weapons] == ["sword"]

    def test_abilities_sorted_by_name(self) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[
                _item("a1", ItemType.ABILITY, name="Weapon Mastery"),
                _item("a2", ItemType.ABILITY, name="Backstab"),
                _item("a3", ItemType.ABILITY, name="Lucky"),
            ],
        )
        view = build_character_view(actor)
        assert [i.name for i in view.abilities] == ["Backstab", "Lucky", "Weapon Mastery"]

    def test_magic_grouped_by_kind_and_level(self) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[
                _spell("s1", 1),
                _spell("s2", 1),
                _spell("s3", 3),
                _spell("p1", 2, kind="prayer"),
            ],
        )
        view = build_character_view(actor)
        assert [i.item_id for i in view.magic[(MagicKind.SPELL, 1)]] == ["s1", "s2"]
        assert view.has_magic(MagicKind.SPELL, 3)
        assert not view.has_magic(MagicKind.SPELL, 2)
        assert view.has_magic(MagicKind.PRAYER, 2)
        assert [level for level, _ in view.magic_for(MagicKind.SPELL)] == [1, 3]

    def test_invalid_level_dropped(self, caplog) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[_spell("bad0", 0), _spell("bad11", 11), _spell("none", None), _spell("ok", 10)],
        )
        with caplog.at_level(logging.ERROR):
            view = build_character_view(actor)
        assert list(view.magic) == [(MagicKind.SPELL, 10)]
        assert "invalid level" in caplog.text

    def test_unknown_magic_kind_dropped(self, caplog) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[_spell("odd", 2, kind="ritual"), _spell("ok", 2)],
        )
        with caplog.at_level(logging.WARNING):
            view = build_character_view(actor)
        assert [i.item_id for i in view.magic[(MagicKind.SPELL, 2)]] == ["ok"]
        assert "Ignoring character item magic" in caplog.text

    def test_creature_attack_ignored_on_character(self) -> None:
        actor = Actor(
            actor_id="hero",
            name="Ayla",
            items=[_item("bite", ItemType.CREATURE_ATTACK)],
        )
        view = build_character_view(actor)
        assert view.weapons == [] and view.equipment == []


class TestCreatureView:
    def test_actions_only(self) -> None:
        actor = Actor(
            actor_id="wolf",
            name="Wolf",
            actor_type=ActorType.CREATURE,
            items=[
                _item("bite", ItemType.CREATURE_ATTACK),
                _item("pelt", ItemType.EQUIPMENT),
            ],
        )
        view = build_creature_view(actor)
        assert [i.item_id for i in view.actions] == ["bite"]
