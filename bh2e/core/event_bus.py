"""EventBus - 저장소/채팅 로그의 변경 통지

- 이벤트는 액터/아이템 ID와 바뀐 필드 이름만 싣는다 (객체 자체는 금지)
- 구독자가 다시 발행하는 연쇄는 MAX_DEPTH 단계에서 끊는다
- dedup_key가 있는 이벤트는 한 액션 안에서 한 번만 전달된다
- ANY_EVENT("*") 구독자는 모든 이벤트를 받는다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Optional

from bh2e.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5
ANY_EVENT = "*"


@dataclass
class SheetEvent:
    """시트 변경 통지

    Args:
        event_type: EventTypes 값
        source: 발행자 ("item_store", "chat_log")
        actor_id / item_id: 대상 식별자
        fields: 갱신된 최상위 필드 이름 (item_updated)
        message_id: 채팅 메시지 ID (chat_message_posted)
        dedup_key: 지정 시 같은 액션 내 재발행 차단
    """

    event_type: str
    source: str
    actor_id: Optional[str] = None
    item_id: Optional[str] = None
    fields: tuple[str, ...] = ()
    message_id: Optional[int] = None
    dedup_key: Optional[str] = None

    depth: int = field(default=0, repr=False)


EventHandler = Callable[[SheetEvent], None]


class EventBus:
    """동기식 이벤트 버스

        bus = EventBus()
        bus.subscribe(EventTypes.ITEM_UPDATED, sheet_renderer.refresh)
        bus.subscribe(ANY_EVENT, audit.record)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._depth = 0
        self._delivered: set[str] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("subscribe %s -> %s", event_type, handler.__qualname__)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
        else:
            logger.warning("unsubscribe: %s is not subscribed to %s", handler.__qualname__, event_type)

    def emit(self, event: SheetEvent) -> bool:
        """구독자를 순서대로 호출. 깊이 초과/중복으로 버려지면 False."""
        if self._depth >= MAX_DEPTH:
            logger.warning(
                "Dropping %s from %s: event chain deeper than %d",
                event.event_type,
                event.source,
                MAX_DEPTH,
            )
            return False

        if event.dedup_key is not None:
            key = f"{event.source}:{event.event_type}:{event.dedup_key}"
            if key in self._delivered:
                logger.warning("Dropping duplicate event %s", key)
                return False
            self._delivered.add(key)

        event.depth = self._depth
        handlers = self._handlers.get(event.event_type, []) + self._handlers.get(ANY_EVENT, [])

        self._depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    # 구독자 오류가 시트 액션을 실패시키지 않는다
                    logger.exception(
                        "Event handler %s failed on %s", handler.__qualname__, event.event_type
                    )
        finally:
            self._depth -= 1
        return True

    def reset_chain(self) -> None:
        """액션 하나가 끝나면 호출. 중복 추적과 깊이를 초기화."""
        self._delivered.clear()
        self._depth = 0

    def clear(self) -> None:
        self._handlers.clear()
        self.reset_chain()

    @property
    def handler_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())
