"""사용 주사위 시스템

굴림 결과가 DEGRADE_BELOW 미만이면 주사위가 한 단계 작아진다.
d4에서 감소하면 소진(exhausted)되고 수량이 1 줄어든다 (0 하한, 수량 없는 아이템은 그대로).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import NoUsageDie, NotEligible
from .models import DieSize, Item, ItemType, UsageDie
from .patches import ItemPatch

logger = logging.getLogger(__name__)

DEGRADE_BELOW = 3

# 감소 사다리: d20 → d12 → d10 → d8 → d6 → d4 → exhausted
DEGRADATION_LADDER: dict[DieSize, DieSize] = {
    DieSize.D20: DieSize.D12,
    DieSize.D12: DieSize.D10,
    DieSize.D10: DieSize.D8,
    DieSize.D8: DieSize.D6,
    DieSize.D6: DieSize.D4,
    DieSize.D4: DieSize.EXHAUSTED,
}

# 작은 것부터. current는 maximum보다 클 수 없다
DIE_ORDER = (DieSize.D4, DieSize.D6, DieSize.D8, DieSize.D10, DieSize.D12, DieSize.D20)


@dataclass(frozen=True)
class UsageTransition:
    """굴림 한 번의 결과로 계산된 다음 상태"""

    active_die: DieSize
    next_die: DieSize
    exhausted: bool
    patch: Optional[ItemPatch]  # None = 상태 변화 없음

    @property
    def changed(self) -> bool:
        return self.patch is not None


def is_reachable(usage: UsageDie) -> bool:
    """current가 maximum에서 사다리를 따라 내려와 도달할 수 있는 상태인지."""
    if usage.maximum not in DIE_ORDER:
        return usage.maximum is DieSize.NONE and usage.current is DieSize.NONE
    if usage.current in (DieSize.NONE, DieSize.EXHAUSTED):
        return True
    return DIE_ORDER.index(usage.current) <= DIE_ORDER.index(usage.maximum)


def require_usage_die(item: Item) -> None:
    if not item.has_usage_die:
        raise NoUsageDie(f"Item {item.name} ({item.item_id}) does not have a usage die")


def is_exhausted(item: Item) -> bool:
    return item.usage_die is not None and item.usage_die.current is DieSize.EXHAUSTED


def active_die(item: Item) -> DieSize:
    """굴릴 주사위. current가 NONE이면 maximum."""
    require_usage_die(item)
    usage = item.usage_die
    if usage.current is DieSize.NONE:
        return usage.maximum
    return usage.current


def degrade(die: DieSize) -> DieSize:
    """사다리 한 단계 아래. 사다리 밖의 값은 ValueError."""
    try:
        return DEGRADATION_LADDER[die]
    except KeyError:
        raise ValueError(f"Die {die.value} cannot be degraded") from None


def next_usage_state(item: Item, roll_total: int) -> UsageTransition:
    """굴림 합계로부터 다음 사용 주사위 상태 계산 (순수 함수)."""
    die = active_die(item)

    if roll_total >= DEGRADE_BELOW:
        return UsageTransition(active_die=die, next_die=die, exhausted=False, patch=None)

    next_die = degrade(die)
    if next_die is DieSize.EXHAUSTED:
        # 수량이 없는 아이템은 수량 필드를 만들지 않는다
        quantity = None if item.quantity is None else max(0, item.quantity - 1)
        patch = ItemPatch(
            item_id=item.item_id,
            usage_die_current=DieSize.EXHAUSTED,
            quantity=quantity,
        )
        return UsageTransition(active_die=die, next_die=next_die, exhausted=True, patch=patch)

    patch = ItemPatch(item_id=item.item_id, usage_die_current=next_die)
    return UsageTransition(active_die=die, next_die=next_die, exhausted=False, patch=patch)


def reset_patch(item: Item) -> ItemPatch:
    """current를 maximum으로 되돌리는 패치.

    장비가 아니거나, 사용 주사위가 없거나, 수량이 0이거나,
    이미 최대치면 NotEligible.
    """
    if item.item_type is not ItemType.EQUIPMENT:
        raise NotEligible(f"Item {item.name} ({item.item_id}) is not equipment")
    require_usage_die(item)

    if not item.quantity:
        raise NotEligible(
            f"Unable to reset the usage die for item {item.name} ({item.item_id}) "
            "as its supply is depleted"
        )

    usage = item.usage_die
    if usage.current is usage.maximum:
        raise NotEligible(
            f"Unable to reset the usage die for item {item.name} ({item.item_id}) "
            "as it is at its maximum usage die"
        )

    return ItemPatch(item_id=item.item_id, usage_die_current=usage.maximum)
