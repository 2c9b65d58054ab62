"""공격 판정 정책 (상태 없음)

롤-언더 규칙:
- 명중: 합계 == 1, 합계 < 능력치, 또는 첫 주사위 눈이 1
- 치명타: 첫 주사위의 원시 눈(유지/버림 이전)이 1
- 대형 무기: 명중 굴림과 피해 굴림에 +1d4
- 치명타 피해: (식)*2
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .errors import NotEligible, UnknownVariant
from .models import (
    ATTRIBUTES,
    Actor,
    DamageDice,
    Item,
    ItemType,
    RollKind,
    RollResult,
    WeaponKind,
    WeaponSize,
)

BASE_FORMULAS: dict[RollKind, str] = {
    RollKind.PLAIN: "1d20",
    RollKind.ADVANTAGE: "2d20kl",
    RollKind.DISADVANTAGE: "2d20kh",
}

LARGE_WEAPON_BONUS = "d4"


def generate_formula(
    kind: Union[RollKind, str] = RollKind.PLAIN,
    die_type: Optional[str] = None,
) -> str:
    """주사위 식 생성.

    die_type 지정 시 해당 주사위 1개 ("d6" → "1d6"), 아니면 kind별 d20 식.
    """
    if die_type:
        return f"1{die_type}"
    try:
        return BASE_FORMULAS[RollKind(kind)]
    except ValueError:
        raise UnknownVariant(f"Unknown roll kind '{kind}'") from None


@dataclass(frozen=True)
class AttackRequest:
    """공격 요청. attribute는 비교할 능력치 이름."""

    item_id: str
    attribute: str
    weapon_name: str = ""
    weapon_kind: WeaponKind = WeaponKind.ARMED
    weapon_size: WeaponSize = WeaponSize.MEDIUM
    roll_kind: RollKind = RollKind.PLAIN

    @property
    def is_large(self) -> bool:
        return self.weapon_size is WeaponSize.LARGE



ATTACK_ITEM_TYPES = (ItemType.WEAPON, ItemType.CREATURE_ATTACK)


def request_for_item(
    item: Item,
    attribute: str,
    roll_kind: Union[RollKind, str] = RollKind.PLAIN,
) -> AttackRequest:
    """무기 아이템에 저장된 이름/종류/크기로 공격 요청 구성.

    무기나 크리처 공격이 아니면 NotEligible. 종류/크기가 없으면 armed/medium.
    """
    if item.item_type not in ATTACK_ITEM_TYPES:
        raise NotEligible(
            f"Item {item.name} ({item.item_id}) is not a weapon or creature attack"
        )
    try:
        kind = WeaponKind(item.weapon_kind or WeaponKind.ARMED)
        size = WeaponSize(item.weapon_size or WeaponSize.MEDIUM)
    except ValueError:
        raise UnknownVariant(
            f"Unknown weapon kind/size {item.weapon_kind!r}/{item.weapon_size!r} "
            f"on item {item.item_id}"
        ) from None
    return AttackRequest(
        item_id=item.item_id,
        attribute=attribute,
        weapon_name=item.name,
        weapon_kind=kind,
        weapon_size=size,
        roll_kind=roll_kind,
    )

@dataclass(frozen=True)
class AttackVerdict:
    hit: bool
    critical: bool


def attribute_value(actor: Actor, attribute: str) -> int:
    """능력치 값. 모르는 이름이거나 액터에 없으면 UnknownVariant."""
    if attribute not in ATTRIBUTES or attribute not in actor.attributes:
        raise UnknownVariant(
            f"Actor {actor.name} ({actor.actor_id}) has no attribute '{attribute}'"
        )
    return actor.attributes[attribute]


def attack_formula(request: AttackRequest) -> str:
    formula = generate_formula(request.roll_kind)
    if request.is_large:
        formula = f"{formula}+{generate_formula(die_type=LARGE_WEAPON_BONUS)}"
    return formula


def judge_attack(roll: RollResult, attribute: int) -> AttackVerdict:
    """명중/치명타 판정.

    첫 주사위 1은 능력치 비교와 무관하게 명중이자 치명타.
    """
    natural_one = roll.first_die == 1
    hit = natural_one or roll.total == 1 or roll.total < attribute
    return AttackVerdict(hit=hit, critical=hit and natural_one)


def damage_formula(
    damage_dice: DamageDice,
    weapon_kind: WeaponKind,
    large: bool,
    critical: bool,
) -> str:
    if weapon_kind is WeaponKind.UNARMED:
        formula = generate_formula(die_type=damage_dice.unarmed)
    else:
        formula = generate_formula(die_type=damage_dice.armed)

    if large:
        formula = f"{formula}+{generate_formula(die_type=LARGE_WEAPON_BONUS)}"
    if critical:
        formula = f"({formula})*2"
    return formula


def attribute_test_formula(kind: Union[RollKind, str] = RollKind.PLAIN) -> str:
    return generate_formula(kind)


def attribute_test_passed(roll: RollResult, attribute: int) -> bool:
    """능력치 판정은 합계가 능력치 미만이면 성공."""
    return roll.total < attribute
