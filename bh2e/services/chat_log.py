"""채팅 로그 - MessageSink 구현 (DB 저장 + EventBus 통지)"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bh2e.core.event_bus import EventBus, SheetEvent
from bh2e.core.event_types import EventTypes
from bh2e.core.logging import get_logger
from bh2e.core.sheet.errors import StoreError
from bh2e.core.sheet.models import Speaker
from bh2e.db.models import ChatMessageModel
from bh2e.services.base import MessageSink

logger = get_logger(__name__)


class ChatLog(MessageSink):
    """공유 채팅 로그"""

    def __init__(self, db: Session, event_bus: EventBus):
        self._db = db
        self._bus = event_bus

    def post(self, text: str, speaker: Speaker) -> ChatMessageModel:
        message = ChatMessageModel(
            actor_id=speaker.actor_id,
            alias=speaker.alias,
            content=text,
        )
        try:
            self._db.add(message)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StoreError(f"Failed to post chat message: {e}") from e

        self._bus.emit(
            SheetEvent(
                event_type=EventTypes.CHAT_MESSAGE_POSTED,
                source="chat_log",
                actor_id=speaker.actor_id,
                message_id=message.id,
                dedup_key=str(message.id),
            )
        )
        logger.debug("[%s] %s", speaker.alias or "-", text)
        return message

    def recent(self, limit: int = 50) -> list[ChatMessageModel]:
        """최근 메시지 (오래된 순)"""
        rows = (
            self._db.query(ChatMessageModel)
            .order_by(ChatMessageModel.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))
