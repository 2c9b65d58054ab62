"""Sheet API endpoints.

Each action endpoint maps to one SheetService UI operation. Actions never
fail at the HTTP level: ineligible or unresolvable actions are logged and
ignored, and effects are observed by reading the sheet or the chat log.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from bh2e.api.schemas import (
    ActionResponse,
    ArmourValueSchema,
    AttackRequestBody,
    AttributeTestRequest,
    ChatMessageInfo,
    CreateActorRequest,
    CreateItemRequest,
    ErrorResponse,
    ItemInfo,
    MagicLevelInfo,
    SheetResponse,
    UsageDieInfo,
)
from bh2e.config import settings
from bh2e.core.logging import get_logger
from bh2e.core.sheet.attack import AttackRequest
from bh2e.core.sheet.errors import NotFound, StoreError
from bh2e.core.sheet.models import (
    Actor,
    ArmourValue,
    DamageDice,
    Item,
    MagicKind,
    UsageDie,
)
from bh2e.core.sheet.view import CreatureView
from bh2e.services.base import ItemStore
from bh2e.services.chat_log import ChatLog
from bh2e.services.sheet_service import SheetService

logger = get_logger(__name__)

router = APIRouter(prefix="/sheet", tags=["sheet"])


def get_sheet_service(request: Request) -> SheetService:
    """SheetService 인스턴스 반환 (의존성 주입)"""
    service: SheetService = request.app.state.sheet_service
    return service


def get_item_store(request: Request) -> ItemStore:
    """ItemStore 인스턴스 반환 (의존성 주입)"""
    store: ItemStore = request.app.state.item_store
    return store


def get_chat_log(request: Request) -> ChatLog:
    """ChatLog 인스턴스 반환 (의존성 주입)"""
    chat_log: ChatLog = request.app.state.chat_log
    return chat_log


def _build_item_info(item: Item) -> ItemInfo:
    usage_die = None
    if item.usage_die is not None:
        usage_die = UsageDieInfo(
            maximum=item.usage_die.maximum, current=item.usage_die.current
        )
    armour_value = None
    if item.armour_value is not None:
        armour_value = ArmourValueSchema(
            total=item.armour_value.total, broken=item.armour_value.broken
        )
    return ItemInfo(
        item_id=item.item_id,
        item_type=item.item_type.value,
        name=item.name,
        usage_die=usage_die,
        armour_value=armour_value,
        quantity=item.quantity,
        level=item.level,
        kind=item.magic_kind,
        weapon_kind=item.weapon_kind,
        size=item.weapon_size,
    )


def _infos(items: list[Item]) -> list[ItemInfo]:
    return [_build_item_info(i) for i in items]


# === 시트 / 액터 / 아이템 ===


@router.get(
    "/actors/{actor_id}",
    response_model=SheetResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_sheet(
    actor_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> SheetResponse:
    """시트 뷰 데이터 조회"""
    try:
        view = service.get_sheet_view(actor_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    actor = view.actor
    response = SheetResponse(
        actor_id=actor.actor_id,
        name=actor.name,
        actor_type=actor.actor_type,
        attributes=actor.attributes,
    )
    if isinstance(view, CreatureView):
        response.actions = _infos(view.actions)
        return response

    response.abilities = _infos(view.abilities)
    response.armour = _infos(view.armour)
    response.classes = _infos(view.classes)
    response.equipment = _infos(view.equipment)
    response.weapons = _infos(view.weapons)
    response.spells = [
        MagicLevelInfo(level=level, items=_infos(items))
        for level, items in view.magic_for(MagicKind.SPELL)
    ]
    response.prayers = [
        MagicLevelInfo(level=level, items=_infos(items))
        for level, items in view.magic_for(MagicKind.PRAYER)
    ]
    return response


@router.post("/actors", response_model=SheetResponse, status_code=201)
def create_actor(
    request: CreateActorRequest,
    store: ItemStore = Depends(get_item_store),
) -> SheetResponse:
    """액터 생성"""
    try:
        actor = store.create_actor(
            Actor(
                actor_id=request.actor_id or "",
                name=request.name,
                actor_type=request.actor_type,
                attributes=request.attributes,
                damage_dice=DamageDice(
                    armed=request.armed_damage_die,
                    unarmed=request.unarmed_damage_die,
                ),
            )
        )
    except StoreError as e:
        logger.error("Failed to create actor: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Actor created: %s", actor.actor_id)
    return SheetResponse(
        actor_id=actor.actor_id,
        name=actor.name,
        actor_type=actor.actor_type,
        attributes=actor.attributes,
    )


@router.post(
    "/actors/{actor_id}/items",
    response_model=ItemInfo,
    status_code=201,
    responses={404: {"model": ErrorResponse}},
)
def create_item(
    actor_id: str,
    request: CreateItemRequest,
    store: ItemStore = Depends(get_item_store),
) -> ItemInfo:
    """아이템 생성"""
    actor = store.get_actor(actor_id)
    if actor is None:
        raise HTTPException(status_code=404, detail=f"Actor not found: {actor_id}")

    usage_die = None
    if request.usage_die is not None:
        usage_die = UsageDie(
            maximum=request.usage_die.maximum, current=request.usage_die.current
        )
    armour_value = None
    if request.armour_value is not None:
        if request.armour_value.broken > request.armour_value.total:
            raise HTTPException(
                status_code=422, detail="Broken armour dice exceed the total"
            )
        armour_value = ArmourValue(
            total=request.armour_value.total, broken=request.armour_value.broken
        )

    try:
        item = store.add_item(
            actor,
            Item(
                item_id=request.item_id or "",
                actor_id=actor_id,
                item_type=request.item_type,
                name=request.name,
                description=request.description,
                usage_die=usage_die,
                armour_value=armour_value,
                quantity=request.quantity,
                level=request.level,
                magic_kind=request.kind,
                weapon_kind=request.weapon_kind.value if request.weapon_kind else None,
                weapon_size=request.size.value if request.size else None,
            ),
        )
    except StoreError as e:
        logger.error("Failed to create item: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    return _build_item_info(item)


@router.delete("/items/{item_id}", response_model=ActionResponse)
def delete_item(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_item_delete_requested(item_id)
    return ActionResponse(action="delete_item", data={"item_id": item_id})


# === 사용 주사위 ===


@router.post("/items/{item_id}/usage-die/roll", response_model=ActionResponse)
def roll_usage_die(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_usage_die_roll_requested(item_id)
    return ActionResponse(action="roll_usage_die", data={"item_id": item_id})


@router.post("/items/{item_id}/usage-die/reset", response_model=ActionResponse)
def reset_usage_die(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_usage_die_reset_requested(item_id)
    return ActionResponse(action="reset_usage_die", data={"item_id": item_id})


@router.post("/actors/{actor_id}/usage-dice/reset", response_model=ActionResponse)
def reset_all_usage_dice(
    actor_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_all_usage_dice_reset_requested(actor_id)
    return ActionResponse(action="reset_all_usage_dice", data={"actor_id": actor_id})


# === 방어구 ===


@router.post("/items/{item_id}/armour/break", response_model=ActionResponse)
def break_armour_die(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_armour_break_requested(item_id)
    return ActionResponse(action="break_armour_die", data={"item_id": item_id})


@router.post("/items/{item_id}/armour/repair", response_model=ActionResponse)
def repair_armour_die(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_armour_repair_requested(item_id)
    return ActionResponse(action="repair_armour_die", data={"item_id": item_id})


@router.post("/actors/{actor_id}/armour/repair", response_model=ActionResponse)
def repair_all_armour(
    actor_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_all_armour_repair_requested(actor_id)
    return ActionResponse(action="repair_all_armour", data={"actor_id": actor_id})


# === 장비 수량 ===


@router.post("/items/{item_id}/quantity/increment", response_model=ActionResponse)
def increment_quantity(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_equipment_quantity_increment(item_id)
    return ActionResponse(action="increment_quantity", data={"item_id": item_id})


@router.post("/items/{item_id}/quantity/decrement", response_model=ActionResponse)
def decrement_quantity(
    item_id: str,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_equipment_quantity_decrement(item_id)
    return ActionResponse(action="decrement_quantity", data={"item_id": item_id})


# === 판정 ===


@router.post("/items/{item_id}/attack", response_model=ActionResponse)
def attack(
    item_id: str,
    request: AttackRequestBody,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    """
    공격

    modifier: plain | advantage (2d20 낮은 값) | disadvantage (2d20 높은 값)
    """
    service.on_attack_requested(
        AttackRequest(
            item_id=item_id,
            attribute=request.attribute,
            roll_kind=request.modifier,
        )
    )
    return ActionResponse(action="attack", data={"item_id": item_id})


@router.post("/actors/{actor_id}/attribute-test", response_model=ActionResponse)
def attribute_test(
    actor_id: str,
    request: AttributeTestRequest,
    service: SheetService = Depends(get_sheet_service),
) -> ActionResponse:
    service.on_attribute_test_requested(actor_id, request.attribute, request.modifier)
    return ActionResponse(
        action="attribute_test",
        data={"actor_id": actor_id, "attribute": request.attribute},
    )


# === 채팅 ===


@router.get("/chat", response_model=list[ChatMessageInfo])
def get_chat(
    limit: Optional[int] = Query(None, ge=1, le=500),
    chat_log: ChatLog = Depends(get_chat_log),
) -> list[ChatMessageInfo]:
    """최근 채팅 메시지 (오래된 순)"""
    return [
        ChatMessageInfo(id=m.id, actor_id=m.actor_id, alias=m.alias, content=m.content)
        for m in chat_log.recent(limit or settings.CHAT_HISTORY_LIMIT)
    ]
