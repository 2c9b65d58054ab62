"""방어구 주사위 파손/수리

broken은 항상 [0, total] 범위. 범위를 벗어나는 조작은 변화 없음(None).
"""

from typing import Optional

from .errors import NotEligible
from .models import ArmourValue, Item, ItemType
from .patches import ItemPatch


def require_armour(item: Item) -> ArmourValue:
    if item.item_type is not ItemType.ARMOUR or item.armour_value is None:
        raise NotEligible(f"Item {item.name} ({item.item_id}) is not armour")
    return item.armour_value


def break_patch(item: Item) -> Optional[ItemPatch]:
    """파손 +1. 이미 전부 파손이면 None."""
    armour = require_armour(item)
    if armour.broken >= armour.total:
        return None
    return ItemPatch(item_id=item.item_id, armour_broken=armour.broken + 1)


def repair_patch(item: Item) -> Optional[ItemPatch]:
    """파손 -1. 파손이 없으면 None."""
    armour = require_armour(item)
    if armour.broken <= 0:
        return None
    return ItemPatch(item_id=item.item_id, armour_broken=armour.broken - 1)


def repair_all_patches(items: list[Item]) -> list[ItemPatch]:
    """파손된 방어구만 0으로. 이미 0인 방어구는 패치를 만들지 않는다."""
    return [
        ItemPatch(item_id=item.item_id, armour_broken=0)
        for item in items
        if item.item_type is ItemType.ARMOUR
        and item.armour_value is not None
        and item.armour_value.broken > 0
    ]
