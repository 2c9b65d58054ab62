"""장비 수량 증감. 사용 주사위가 있는 장비만 대상."""

from typing import Optional

from .errors import NotEligible
from .models import Item, ItemType
from .patches import ItemPatch


def require_stocked(item: Item) -> int:
    if item.item_type is not ItemType.EQUIPMENT:
        raise NotEligible(f"Item {item.name} ({item.item_id}) is not equipment")
    if not item.has_usage_die:
        raise NotEligible(
            f"Unable to change quantity for item {item.name} ({item.item_id}) "
            "as it does not have a usage die"
        )
    return item.quantity or 0


def increment_patch(item: Item) -> ItemPatch:
    quantity = require_stocked(item)
    return ItemPatch(item_id=item.item_id, quantity=quantity + 1)


def decrement_patch(item: Item) -> Optional[ItemPatch]:
    """0이면 None (음수 금지)."""
    quantity = require_stocked(item)
    if quantity <= 0:
        return None
    return ItemPatch(item_id=item.item_id, quantity=quantity - 1)
