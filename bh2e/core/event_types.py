"""이벤트 유형 상수

시트 조작 결과를 구독자(렌더러, 테스트)에게 알린다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # item store
    ITEM_CREATED = "item_created"
    ITEM_UPDATED = "item_updated"
    ITEM_DELETED = "item_deleted"

    # actor store
    ACTOR_CREATED = "actor_created"

    # chat log
    CHAT_MESSAGE_POSTED = "chat_message_posted"
