"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from bh2e.core.sheet.models import (
    ActorType,
    MAXIMUM_SIZES,
    DieSize,
    ItemType,
    RollKind,
    WeaponKind,
    UsageDie,
    WeaponSize,
)
from bh2e.core.sheet.usage_die import is_reachable


# 주사위 크기: d1 이상 (d0 불가)
DIE_PATTERN = r"^d[1-9]\d*$"


# === Request Schemas ===


class CreateActorRequest(BaseModel):
    """액터 생성 요청"""

    actor_id: Optional[str] = Field(None, max_length=64, description="미지정 시 UUID")
    name: str = Field(..., min_length=1, max_length=100)
    actor_type: ActorType = ActorType.CHARACTER
    attributes: dict[str, int] = Field(default_factory=dict)
    armed_damage_die: str = Field("d6", pattern=DIE_PATTERN)
    unarmed_damage_die: str = Field("d4", pattern=DIE_PATTERN)


class UsageDieInfo(BaseModel):
    maximum: DieSize = DieSize.NONE
    current: DieSize = DieSize.NONE


class UsageDieSchema(UsageDieInfo):
    """입력용. current는 maximum에서 내려온 값이어야 한다."""

    @field_validator("maximum")
    @classmethod
    def maximum_is_a_die(cls, v: DieSize) -> DieSize:
        if v not in MAXIMUM_SIZES:
            raise ValueError(f"{v.value} is not a valid maximum usage die")
        return v

    @model_validator(mode="after")
    def current_below_maximum(self) -> "UsageDieSchema":
        if not is_reachable(UsageDie(maximum=self.maximum, current=self.current)):
            raise ValueError(
                f"Usage die {self.current.value} cannot be reached from maximum {self.maximum.value}"
            )
        return self


class ArmourValueSchema(BaseModel):
    total: int = Field(0, ge=0)
    broken: int = Field(0, ge=0)


class CreateItemRequest(BaseModel):
    """아이템 생성 요청"""

    item_id: Optional[str] = Field(None, max_length=64)
    item_type: ItemType
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    usage_die: Optional[UsageDieSchema] = None
    armour_value: Optional[ArmourValueSchema] = None
    quantity: Optional[int] = Field(None, ge=0)
    level: Optional[int] = None
    kind: Optional[str] = Field(None, description="magic: spell | prayer")
    weapon_kind: Optional[WeaponKind] = None
    size: Optional[WeaponSize] = None


class AttackRequestBody(BaseModel):
    """공격 요청. 무기 이름/종류/크기는 아이템에 저장된 값을 쓴다."""

    attribute: str = Field(..., description="비교할 능력치 (예: strength)")
    modifier: RollKind = RollKind.PLAIN


class AttributeTestRequest(BaseModel):
    """능력치 판정 요청"""

    attribute: str
    modifier: RollKind = RollKind.PLAIN


# === Response Schemas ===


class ItemInfo(BaseModel):
    item_id: str
    item_type: str
    name: str
    usage_die: Optional[UsageDieInfo] = None
    armour_value: Optional[ArmourValueSchema] = None
    quantity: Optional[int] = None
    level: Optional[int] = None
    kind: Optional[str] = None
    weapon_kind: Optional[str] = None
    size: Optional[str] = None


class MagicLevelInfo(BaseModel):
    level: int
    items: list[ItemInfo] = []


class SheetResponse(BaseModel):
    """시트 뷰 응답. 크리처는 actions만 채워진다."""

    actor_id: str
    name: str
    actor_type: ActorType
    attributes: dict[str, int] = {}
    abilities: list[ItemInfo] = []
    armour: list[ItemInfo] = []
    classes: list[ItemInfo] = []
    equipment: list[ItemInfo] = []
    weapons: list[ItemInfo] = []
    spells: list[MagicLevelInfo] = []
    prayers: list[MagicLevelInfo] = []
    actions: list[ItemInfo] = []


class ActionResponse(BaseModel):
    """액션 실행 응답. 효과는 시트/채팅을 다시 조회해서 확인한다."""

    success: bool = True
    action: str
    data: Optional[dict[str, Any]] = None


class ChatMessageInfo(BaseModel):
    id: int
    actor_id: Optional[str] = None
    alias: str
    content: str


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
