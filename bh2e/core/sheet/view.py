"""시트 뷰 데이터 구성

캐릭터: 타입별 분류 + 마법은 (종류, 레벨) → 아이템 목록.
크리처: creature-attack 아이템만.
잘못된 아이템은 로그 후 제외하고 나머지는 계속 처리한다.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from .errors import InvalidLevel, UnknownVariant
from .models import Actor, Item, ItemType, MagicKind

logger = logging.getLogger(__name__)

MIN_MAGIC_LEVEL = 1
MAX_MAGIC_LEVEL = 10

MagicKey = tuple[MagicKind, int]


@dataclass
class CharacterView:
    actor: Actor
    abilities: list[Item] = field(default_factory=list)
    armour: list[Item] = field(default_factory=list)
    classes: list[Item] = field(default_factory=list)
    equipment: list[Item] = field(default_factory=list)
    weapons: list[Item] = field(default_factory=list)
    magic: dict[MagicKey, list[Item]] = field(default_factory=dict)

    def has_magic(self, kind: MagicKind, level: int) -> bool:
        return bool(self.magic.get((kind, level)))

    def magic_for(self, kind: MagicKind) -> list[tuple[int, list[Item]]]:
        """레벨 오름차순 (레벨, 아이템 목록). 빈 레벨은 제외."""
        return sorted(
            (level, items)
            for (k, level), items in self.magic.items()
            if k is kind and items
        )


@dataclass
class CreatureView:
    actor: Actor
    actions: list[Item] = field(default_factory=list)


def magic_key(item: Item) -> MagicKey:
    """마법 아이템의 (종류, 레벨). 범위 밖 레벨은 InvalidLevel, 모르는 종류는 UnknownVariant."""
    level = item.level
    if level is None or not MIN_MAGIC_LEVEL <= level <= MAX_MAGIC_LEVEL:
        raise InvalidLevel(
            f"An invalid level of {level} was specified for a spell or prayer "
            f"({item.name}, {item.item_id})"
        )
    try:
        kind = MagicKind(item.magic_kind)
    except ValueError:
        raise UnknownVariant(
            f"Unknown magic kind '{item.magic_kind}' on item {item.item_id}"
        ) from None
    return kind, level


def build_character_view(actor: Actor) -> CharacterView:
    view = CharacterView(actor=actor)
    magic: dict[MagicKey, list[Item]] = defaultdict(list)

    for item in actor.items:
        if item.item_type is ItemType.ABILITY:
            view.abilities.append(item)
        elif item.item_type is ItemType.ARMOUR:
            view.armour.append(item)
        elif item.item_type is ItemType.CLASS:
            view.classes.append(item)
        elif item.item_type is ItemType.EQUIPMENT:
            view.equipment.append(item)
        elif item.item_type is ItemType.WEAPON:
            view.weapons.append(item)
        elif item.item_type is ItemType.MAGIC:
            try:
                magic[magic_key(item)].append(item)
            except InvalidLevel as e:
                logger.error("%s", e)
            except UnknownVariant as e:
                logger.warning("Ignoring character item magic: %s", e)
        else:
            logger.warning(
                "Ignoring character item %s (%s) of type %s",
                item.name,
                item.item_id,
                item.item_type.value,
            )

    view.abilities.sort(key=lambda i: i.name)
    view.magic = dict(magic)
    return view


def build_creature_view(actor: Actor) -> CreatureView:
    return CreatureView(
        actor=actor,
        actions=[i for i in actor.items if i.item_type is ItemType.CREATURE_ATTACK],
    )
