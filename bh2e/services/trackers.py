"""자원 트래커 - Core 규칙 + ItemStore/DiceRoller/MessageSink

트래커는 (액터, 아이템) 쌍을 명시적으로 받는다. 소유자 조회는 SheetService 담당.
자격 미달은 NotEligible로 올려 보내고, 호출자가 warning으로 기록한다.
"""

from dataclasses import dataclass
from typing import Optional

from bh2e.core.logging import get_logger
from bh2e.core.messages import format_roll, interpolate
from bh2e.core.sheet import armour, quantity, usage_die
from bh2e.core.sheet.attack import generate_formula
from bh2e.core.sheet.errors import NotEligible
from bh2e.core.sheet.models import Actor, Item, ItemType, RollResult, Speaker
from bh2e.core.sheet.patches import ItemPatch
from bh2e.core.sheet.usage_die import UsageTransition
from bh2e.services.base import DiceRoller, ItemStore, MessageSink

logger = get_logger(__name__)


def _write(store: ItemStore, actor: Actor, item: Item, patch: Optional[ItemPatch]) -> Optional[ItemPatch]:
    """패치 검증 후 저장. None이면 아무것도 쓰지 않는다."""
    if patch is None or patch.is_empty:
        return None
    patch.validate(item)
    store.update_partial(actor, patch)
    return patch


@dataclass(frozen=True)
class RollOutcome:
    """사용 주사위 굴림 결과. 소진 상태였으면 roll/transition 모두 None."""

    roll: Optional[RollResult] = None
    transition: Optional[UsageTransition] = None

    @property
    def patch(self) -> Optional[ItemPatch]:
        return self.transition.patch if self.transition else None


class UsageDieTracker:
    """사용 주사위 굴림/초기화"""

    def __init__(self, store: ItemStore, roller: DiceRoller, sink: MessageSink):
        self._store = store
        self._roller = roller
        self._sink = sink

    def roll_usage_die(self, actor: Actor, item: Item) -> RollOutcome:
        usage_die.require_usage_die(item)
        if usage_die.is_exhausted(item):
            logger.info("Usage die for %s (%s) is exhausted", item.name, item.item_id)
            return RollOutcome()

        speaker = Speaker(actor_id=actor.actor_id, alias=actor.name)
        die = usage_die.active_die(item)

        self._sink.post(interpolate("rollingUsageDie", {"name": item.name}), speaker)
        roll = self._roller.roll(generate_formula(die_type=die.value))
        self._sink.post(format_roll(roll), speaker)

        transition = usage_die.next_usage_state(item, roll.total)
        if transition.exhausted:
            self._sink.post(
                interpolate("usageDieExhausted", {"name": item.name}), speaker
            )
        elif transition.changed:
            self._sink.post(
                interpolate("reducingUsageDie", {"die": f"1{transition.next_die.value}"}),
                speaker,
            )

        _write(self._store, actor, item, transition.patch)
        return RollOutcome(roll=roll, transition=transition)

    def reset_usage_die(self, actor: Actor, item: Item) -> ItemPatch:
        patch = usage_die.reset_patch(item)
        _write(self._store, actor, item, patch)
        return patch

    def reset_all_usage_dice(self, actor: Actor) -> list[ItemPatch]:
        """모든 장비 초기화. 자격 없는 아이템은 건너뛴다."""
        patches = []
        for item in actor.items:
            if item.item_type is not ItemType.EQUIPMENT:
                continue
            try:
                patches.append(self.reset_usage_die(actor, item))
            except NotEligible as e:
                logger.debug("Skipping usage die reset: %s", e)
        return patches


class ArmourDurabilityTracker:
    """방어구 주사위 파손/수리"""

    def __init__(self, store: ItemStore):
        self._store = store

    def break_die(self, actor: Actor, item: Item) -> Optional[ItemPatch]:
        logger.info("Breakage of armour die on armour item id %s", item.item_id)
        return _write(self._store, actor, item, armour.break_patch(item))

    def repair_die(self, actor: Actor, item: Item) -> Optional[ItemPatch]:
        logger.info("Repairing of armour die on armour item id %s", item.item_id)
        return _write(self._store, actor, item, armour.repair_patch(item))

    def repair_all(self, actor: Actor) -> list[ItemPatch]:
        logger.info("Repairing all armour dice for actor id %s", actor.actor_id)
        items = {item.item_id: item for item in actor.items}
        patches = armour.repair_all_patches(actor.items)
        for patch in patches:
            _write(self._store, actor, items[patch.item_id], patch)
        return patches


class EquipmentQuantityTracker:
    """장비 수량 증감"""

    def __init__(self, store: ItemStore):
        self._store = store

    def increment(self, actor: Actor, item: Item) -> ItemPatch:
        return _write(self._store, actor, item, quantity.increment_patch(item))

    def decrement(self, actor: Actor, item: Item) -> Optional[ItemPatch]:
        patch = quantity.decrement_patch(item)
        if patch is None:
            logger.warning(
                "Unable to decrease quantity for the %s item (%s) as it's already at zero",
                item.name,
                item.item_id,
            )
        return _write(self._store, actor, item, patch)
