"""EventBus 테스트"""

from bh2e.core.event_bus import ANY_EVENT, MAX_DEPTH, EventBus, SheetEvent
from bh2e.core.event_types import EventTypes


def _updated(item_id: str = "torch", **kwargs) -> SheetEvent:
    return SheetEvent(
        event_type=EventTypes.ITEM_UPDATED, source="item_store", item_id=item_id, **kwargs
    )


class TestDelivery:
    def test_subscriber_receives_ids(self) -> None:
        bus = EventBus()
        received: list[SheetEvent] = []
        bus.subscribe(EventTypes.ITEM_UPDATED, received.append)

        assert bus.emit(_updated(actor_id="hero", fields=("quantity",))) is True
        assert received[0].item_id == "torch"
        assert received[0].fields == ("quantity",)

    def test_other_types_not_delivered(self) -> None:
        bus = EventBus()
        received: list[SheetEvent] = []
        bus.subscribe(EventTypes.ITEM_DELETED, received.append)
        bus.emit(_updated())
        assert received == []

    def test_wildcard_sees_everything(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(ANY_EVENT, lambda e: seen.append(e.event_type))
        bus.emit(_updated())
        bus.emit(SheetEvent(event_type=EventTypes.CHAT_MESSAGE_POSTED, source="chat_log", message_id=3))
        assert seen == [EventTypes.ITEM_UPDATED, EventTypes.CHAT_MESSAGE_POSTED]

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        received: list[SheetEvent] = []
        bus.subscribe(EventTypes.ITEM_UPDATED, received.append)
        bus.unsubscribe(EventTypes.ITEM_UPDATED, received.append)
        bus.emit(_updated())
        assert received == []
        assert bus.handler_count == 0


class TestChainLimits:
    def test_depth_cut_off(self) -> None:
        bus = EventBus()
        depths: list[int] = []

        def re_emit(event: SheetEvent) -> None:
            depths.append(event.depth)
            bus.emit(_updated())

        bus.subscribe(EventTypes.ITEM_UPDATED, re_emit)
        bus.emit(_updated())
        assert depths == list(range(MAX_DEPTH))

    def test_dedup_key_blocks_until_reset(self) -> None:
        bus = EventBus()
        received: list[SheetEvent] = []
        bus.subscribe(EventTypes.ITEM_DELETED, received.append)
        deleted = dict(event_type=EventTypes.ITEM_DELETED, source="item_store", dedup_key="rope")

        assert bus.emit(SheetEvent(**deleted)) is True
        assert bus.emit(SheetEvent(**deleted)) is False
        bus.reset_chain()
        assert bus.emit(SheetEvent(**deleted)) is True
        assert len(received) == 2

    def test_repeated_updates_without_key_all_delivered(self) -> None:
        """한 액션에서 같은 아이템을 여러 번 갱신할 수 있다."""
        bus = EventBus()
        received: list[SheetEvent] = []
        bus.subscribe(EventTypes.ITEM_UPDATED, received.append)
        for _ in range(3):
            bus.emit(_updated())
        assert len(received) == 3


class TestHandlerFailure:
    def test_failing_handler_does_not_block_others(self, caplog) -> None:
        bus = EventBus()
        received: list[SheetEvent] = []

        def broken(event: SheetEvent) -> None:
            raise RuntimeError("renderer gone")

        bus.subscribe(EventTypes.ITEM_UPDATED, broken)
        bus.subscribe(EventTypes.ITEM_UPDATED, received.append)
        bus.emit(_updated())

        assert len(received) == 1
        assert "failed on item_updated" in caplog.text

    def test_clear(self) -> None:
        bus = EventBus()
        bus.subscribe(EventTypes.ITEM_UPDATED, lambda e: None)
        bus.subscribe(ANY_EVENT, lambda e: None)
        assert bus.handler_count == 2
        bus.clear()
        assert bus.handler_count == 0
