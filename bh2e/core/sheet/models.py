"""시트 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DieSize(str, Enum):
    NONE = "none"
    D4 = "d4"
    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"
    EXHAUSTED = "exhausted"


# 사용 주사위 최대값으로 허용되는 크기 (exhausted 제외)
MAXIMUM_SIZES = (
    DieSize.NONE,
    DieSize.D4,
    DieSize.D6,
    DieSize.D8,
    DieSize.D10,
    DieSize.D12,
    DieSize.D20,
)


class ItemType(str, Enum):
    ABILITY = "ability"
    ARMOUR = "armour"
    CLASS = "class"
    EQUIPMENT = "equipment"
    MAGIC = "magic"
    WEAPON = "weapon"
    CREATURE_ATTACK = "creature-attack"


class MagicKind(str, Enum):
    SPELL = "spell"
    PRAYER = "prayer"


class ActorType(str, Enum):
    CHARACTER = "character"
    CREATURE = "creature"


class RollKind(str, Enum):
    """판정 굴림 방식. 롤-언더 규칙이라 유리 = 낮은 값 유지."""

    PLAIN = "plain"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


class WeaponKind(str, Enum):
    ARMED = "armed"
    UNARMED = "unarmed"


class WeaponSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


ATTRIBUTES = (
    "strength",
    "dexterity",
    "constitution",
    "intelligence",
    "wisdom",
    "charisma",
)


@dataclass(frozen=True)
class UsageDie:
    """사용 주사위. current == NONE 이면 아직 굴리지 않은 상태 (maximum 사용)."""

    maximum: DieSize = DieSize.NONE
    current: DieSize = DieSize.NONE

    @property
    def present(self) -> bool:
        return self.maximum is not DieSize.NONE


@dataclass(frozen=True)
class ArmourValue:
    total: int = 0
    broken: int = 0


@dataclass(frozen=True)
class DamageDice:
    armed: str = "d6"
    unarmed: str = "d4"


@dataclass
class Item:
    """액터가 소유한 아이템. 자원 하위 레코드는 해당 타입에만 존재."""

    item_id: str
    actor_id: str
    item_type: ItemType
    name: str

    # 자원
    usage_die: Optional[UsageDie] = None
    armour_value: Optional[ArmourValue] = None
    quantity: Optional[int] = None

    # 마법
    level: Optional[int] = None
    magic_kind: Optional[str] = None  # 검증 전 원시 값

    # 표시용
    description: str = ""
    weapon_kind: Optional[str] = None  # "armed" | "unarmed"
    weapon_size: Optional[str] = None  # "small" | "medium" | "large"

    @property
    def has_usage_die(self) -> bool:
        return self.usage_die is not None and self.usage_die.present


@dataclass
class Actor:
    actor_id: str
    name: str
    actor_type: ActorType = ActorType.CHARACTER
    attributes: dict[str, int] = field(default_factory=dict)
    damage_dice: DamageDice = field(default_factory=DamageDice)
    items: list[Item] = field(default_factory=list)

    def find_item(self, item_id: str) -> Optional[Item]:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None


@dataclass(frozen=True)
class RollResult:
    """주사위 굴림 결과. raw_results는 굴린 순서대로의 개별 눈 (유지/버림 이전)."""

    formula: str
    total: int
    raw_results: tuple[int, ...] = ()

    @property
    def first_die(self) -> Optional[int]:
        return self.raw_results[0] if self.raw_results else None


@dataclass(frozen=True)
class Speaker:
    """채팅 메시지 발화자 컨텍스트"""

    actor_id: Optional[str] = None
    alias: str = ""
