"""시트 Service - UI 액션 진입점

UI 계층이 아이템/액터 ID만 넘기면 여기서 소유 액터를 해석해
(액터, 아이템) 쌍을 트래커로 전달한다.

에러 정책: 어떤 실패도 호출자에게 전파하지 않는다.
- NotFound, InvalidLevel → error
- NotEligible, UnknownVariant → warning
- StoreError → error + traceback, 재시도 없음
"""

from contextlib import contextmanager
from typing import Iterator, Union

from bh2e.core.event_bus import EventBus
from bh2e.core.logging import get_logger
from bh2e.core.sheet.attack import AttackRequest, request_for_item
from bh2e.core.sheet.errors import (
    InvalidLevel,
    NotEligible,
    NotFound,
    StoreError,
    UnknownVariant,
)
from bh2e.core.sheet.models import Actor, ActorType, Item, RollKind
from bh2e.core.sheet.view import (
    CharacterView,
    CreatureView,
    build_character_view,
    build_creature_view,
)
from bh2e.services.base import DiceRoller, ItemStore, MessageSink
from bh2e.services.combat import AttackResolutionPolicy
from bh2e.services.dice import DiceFormulaError
from bh2e.services.trackers import (
    ArmourDurabilityTracker,
    EquipmentQuantityTracker,
    UsageDieTracker,
)

logger = get_logger(__name__)


class SheetService:
    """캐릭터/크리처 시트 액션 처리"""

    def __init__(
        self,
        store: ItemStore,
        roller: DiceRoller,
        sink: MessageSink,
        event_bus: EventBus,
    ):
        self._store = store
        self._bus = event_bus
        self.usage_dice = UsageDieTracker(store, roller, sink)
        self.armour = ArmourDurabilityTracker(store)
        self.quantities = EquipmentQuantityTracker(store)
        self.combat = AttackResolutionPolicy(roller, sink)

    # === 뷰 ===

    def get_sheet_view(self, actor_id: str) -> Union[CharacterView, CreatureView]:
        """액터 종류별 뷰 데이터. 액터가 없으면 NotFound."""
        actor = self._resolve_actor(actor_id)
        if actor.actor_type is ActorType.CREATURE:
            return build_creature_view(actor)
        return build_character_view(actor)

    # === 사용 주사위 ===

    def on_usage_die_roll_requested(self, item_id: str) -> None:
        with self._handled("usage die roll"):
            actor, item = self._resolve_item(item_id)
            self.usage_dice.roll_usage_die(actor, item)

    def on_usage_die_reset_requested(self, item_id: str) -> None:
        with self._handled("usage die reset"):
            actor, item = self._resolve_item(item_id)
            self.usage_dice.reset_usage_die(actor, item)

    def on_all_usage_dice_reset_requested(self, actor_id: str) -> None:
        with self._handled("usage dice reset"):
            actor = self._resolve_actor(actor_id)
            self.usage_dice.reset_all_usage_dice(actor)

    # === 방어구 ===

    def on_armour_break_requested(self, item_id: str) -> None:
        with self._handled("armour break"):
            actor, item = self._resolve_item(item_id)
            self.armour.break_die(actor, item)

    def on_armour_repair_requested(self, item_id: str) -> None:
        with self._handled("armour repair"):
            actor, item = self._resolve_item(item_id)
            self.armour.repair_die(actor, item)

    def on_all_armour_repair_requested(self, actor_id: str) -> None:
        with self._handled("armour repair all"):
            actor = self._resolve_actor(actor_id)
            self.armour.repair_all(actor)

    # === 장비 수량 ===

    def on_equipment_quantity_increment(self, item_id: str) -> None:
        with self._handled("quantity increment"):
            actor, item = self._resolve_item(item_id)
            self.quantities.increment(actor, item)

    def on_equipment_quantity_decrement(self, item_id: str) -> None:
        with self._handled("quantity decrement"):
            actor, item = self._resolve_item(item_id)
            self.quantities.decrement(actor, item)

    # === 판정 ===

    def on_attack_requested(self, context: AttackRequest) -> None:
        """이름/종류/크기는 저장된 무기 아이템 값을 쓴다. context는 능력치와 굴림 방식만."""
        with self._handled("attack"):
            actor, item = self._resolve_item(context.item_id)
            request = request_for_item(item, context.attribute, context.roll_kind)
            self.combat.resolve(actor, request)

    def on_attribute_test_requested(
        self,
        actor_id: str,
        attribute: str,
        kind: Union[RollKind, str] = RollKind.PLAIN,
    ) -> None:
        with self._handled("attribute test"):
            actor = self._resolve_actor(actor_id)
            self.combat.attribute_test(actor, attribute, kind)

    # === 아이템 ===

    def on_item_delete_requested(self, item_id: str) -> None:
        with self._handled("item delete"):
            actor, _ = self._resolve_item(item_id)
            self._store.delete_item(actor, item_id)

    # === 헬퍼 ===

    def _resolve_actor(self, actor_id: str) -> Actor:
        actor = self._store.get_actor(actor_id)
        if actor is None:
            raise NotFound(f"Failed to find an actor with the id {actor_id}")
        return actor

    def _resolve_item(self, item_id: str) -> tuple[Actor, Item]:
        actor = self._store.find_owner(item_id)
        if actor is None:
            raise NotFound(f"Failed to find an actor that owns item id {item_id}")
        item = actor.find_item(item_id)
        if item is None:
            raise NotFound(
                f"Failed to locate item id {item_id} on actor id {actor.actor_id}"
            )
        return actor, item

    @contextmanager
    def _handled(self, action: str) -> Iterator[None]:
        """액션 하나를 처리. 실패는 로그만 남기고 삼킨다."""
        try:
            yield
        except (NotFound, InvalidLevel) as e:
            logger.error("%s aborted: %s", action, e)
        except (NotEligible, UnknownVariant) as e:
            logger.warning("%s ignored: %s", action, e)
        except StoreError:
            logger.exception("%s failed to persist", action)
        except DiceFormulaError as e:
            logger.error("%s aborted: %s", action, e)
        finally:
            self._bus.reset_chain()
