"""공격/능력치 판정 - 굴림 실행 + 채팅 메시지 발행

굴림(명중, 피해)을 모두 마친 뒤 메시지를 순서대로 올린다:
공격 선언 → 명중 굴림 → (명중/치명타 + 피해 굴림) 또는 빗나감.
빗나가면 피해 굴림은 하지 않는다.
"""

from dataclasses import dataclass
from typing import Optional, Union

from bh2e.core.logging import get_logger
from bh2e.core.messages import format_roll, interpolate
from bh2e.core.sheet import attack
from bh2e.core.sheet.attack import AttackRequest, AttackVerdict
from bh2e.core.sheet.models import Actor, RollKind, RollResult, Speaker
from bh2e.services.base import DiceRoller, MessageSink

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttackOutcome:
    attack_roll: RollResult
    verdict: AttackVerdict
    damage_roll: Optional[RollResult] = None


@dataclass(frozen=True)
class AttributeTestOutcome:
    roll: RollResult
    passed: bool


class AttackResolutionPolicy:
    """공격 판정 실행기"""

    def __init__(self, roller: DiceRoller, sink: MessageSink):
        self._roller = roller
        self._sink = sink

    def resolve(self, actor: Actor, request: AttackRequest) -> AttackOutcome:
        target = attack.attribute_value(actor, request.attribute)
        speaker = Speaker(actor_id=actor.actor_id, alias=actor.name)

        # 메시지는 모든 굴림이 끝난 뒤에만 올린다
        attack_roll = self._roller.roll(attack.attack_formula(request))
        verdict = attack.judge_attack(attack_roll, target)

        damage_roll = None
        if verdict.hit:
            damage_roll = self._roller.roll(
                attack.damage_formula(
                    actor.damage_dice,
                    request.weapon_kind,
                    large=request.is_large,
                    critical=verdict.critical,
                )
            )

        self._sink.post(
            interpolate("attacking", {"name": actor.name, "weapon": request.weapon_name}),
            speaker,
        )
        self._sink.post(format_roll(attack_roll), speaker)

        if not verdict.hit:
            self._sink.post(interpolate("attackMiss"), speaker)
            logger.info("%s misses with %s", actor.name, request.weapon_name)
            return AttackOutcome(attack_roll=attack_roll, verdict=verdict)

        self._sink.post(
            interpolate("criticalHit" if verdict.critical else "normalHit"), speaker
        )
        self._sink.post(format_roll(damage_roll), speaker)
        logger.info(
            "%s hits with %s for %d%s",
            actor.name,
            request.weapon_name,
            damage_roll.total,
            " (critical)" if verdict.critical else "",
        )
        return AttackOutcome(attack_roll=attack_roll, verdict=verdict, damage_roll=damage_roll)

    def attribute_test(
        self,
        actor: Actor,
        attribute: str,
        kind: Union[RollKind, str] = RollKind.PLAIN,
    ) -> AttributeTestOutcome:
        target = attack.attribute_value(actor, attribute)
        speaker = Speaker(actor_id=actor.actor_id, alias=actor.name)

        self._sink.post(
            interpolate("rollingAttributeTest", {"attribute": attribute, "name": actor.name}),
            speaker,
        )
        roll = self._roller.roll(attack.attribute_test_formula(kind))
        self._sink.post(format_roll(roll), speaker)

        passed = attack.attribute_test_passed(roll, target)
        self._sink.post(
            interpolate("attributeTestSuccess" if passed else "attributeTestFailed"),
            speaker,
        )
        return AttributeTestOutcome(roll=roll, passed=passed)
