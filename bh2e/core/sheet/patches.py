"""부분 갱신 패치 - 저장소로 넘기기 전에 불변식을 검증한다."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .errors import NotEligible
from .models import DieSize, Item


@dataclass(frozen=True)
class ItemPatch:
    """아이템 자원 필드의 부분 갱신. None 필드는 전송하지 않는다."""

    item_id: str
    usage_die_current: Optional[DieSize] = None
    quantity: Optional[int] = None
    armour_broken: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.usage_die_current is None
            and self.quantity is None
            and self.armour_broken is None
        )

    def validate(self, item: Item) -> None:
        """대상 아이템 기준 불변식 검사. 위반 시 NotEligible."""
        if item.item_id != self.item_id:
            raise NotEligible(
                f"Patch for item {self.item_id} applied to item {item.item_id}"
            )

        if self.usage_die_current is not None:
            if not item.has_usage_die:
                raise NotEligible(f"Item {item.item_id} has no usage die")

        if self.quantity is not None and self.quantity < 0:
            raise NotEligible(
                f"Quantity for item {item.item_id} cannot be negative ({self.quantity})"
            )

        if self.armour_broken is not None:
            armour = item.armour_value
            if armour is None:
                raise NotEligible(f"Item {item.item_id} has no armour value")
            if not 0 <= self.armour_broken <= armour.total:
                raise NotEligible(
                    f"Broken armour dice {self.armour_broken} outside [0, {armour.total}]"
                )

    def to_update(self) -> dict[str, Any]:
        """변경된 필드만 담은 중첩 dict (저장소 data 컬럼 구조)"""
        update: dict[str, Any] = {}
        if self.usage_die_current is not None:
            update["usage_die"] = {"current": self.usage_die_current.value}
        if self.quantity is not None:
            update["quantity"] = self.quantity
        if self.armour_broken is not None:
            update["armour_value"] = {"broken": self.armour_broken}
        return update
