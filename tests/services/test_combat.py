"""AttackResolutionPolicy 테스트 (스크립트 굴림)"""

import pytest

from bh2e.core.sheet.attack import AttackRequest
from bh2e.core.sheet.errors import UnknownVariant
from bh2e.core.sheet.models import (
    Actor,
    DamageDice,
    RollKind,
    RollResult,
    WeaponKind,
    WeaponSize,
)
from bh2e.services.base import DiceRoller
from bh2e.services.combat import AttackResolutionPolicy
from bh2e.services.dice import DiceFormulaError


class _BrokenDamageRoller(DiceRoller):
    """d20은 5, d0은 굴릴 수 없다."""

    def roll(self, formula: str) -> RollResult:
        if "d0" in formula:
            raise DiceFormulaError(f"Invalid dice term '1d0' in {formula}")
        return RollResult(formula=formula, total=5, raw_results=(5,))


@pytest.fixture()
def actor() -> Actor:
    return Actor(
        actor_id="hero",
        name="Ayla",
        attributes={"strength": 12, "dexterity": 9},
        damage_dice=DamageDice(armed="d8", unarmed="d4"),
    )


@pytest.fixture()
def policy(dice, sink) -> AttackResolutionPolicy:
    return AttackResolutionPolicy(dice, sink)


def _request(**kwargs) -> AttackRequest:
    kwargs.setdefault("item_id", "sword")
    kwargs.setdefault("attribute", "strength")
    kwargs.setdefault("weapon_name", "Sword")
    return AttackRequest(**kwargs)


class TestAttack:
    def test_normal_hit_uses_armed_die(self, policy, dice, sink, actor) -> None:
        dice.push(11, (11,))
        dice.push(6, (6,))

        outcome = policy.resolve(actor, _request())

        assert outcome.verdict.hit is True
        assert outcome.verdict.critical is False
        assert dice.formulas == ["1d20", "1d8"]
        assert sink.texts == [
            "Ayla attacks with Sword.",
            "1d20 [11] = 11",
            "The attack hits!",
            "1d8 [6] = 6",
        ]

    def test_miss_skips_damage(self, policy, dice, sink, actor) -> None:
        dice.push(15, (15,))

        outcome = policy.resolve(actor, _request())

        assert outcome.verdict.hit is False
        assert outcome.damage_roll is None
        assert dice.formulas == ["1d20"]
        assert sink.texts[-1] == "The attack misses."

    def test_natural_one_is_critical(self, policy, dice, sink, actor) -> None:
        dice.push(1, (1,))
        dice.push(10, (3, 2))

        outcome = policy.resolve(actor, _request(weapon_size=WeaponSize.LARGE))

        assert outcome.verdict.critical is True
        assert dice.formulas == ["1d20+1d4", "(1d8+1d4)*2"]
        assert "A critical hit!" in sink.texts

    def test_natural_one_beats_low_attribute(self, policy, dice, actor) -> None:
        actor.attributes["strength"] = 1
        dice.push(1, (1,))
        dice.push(4, (2,))
        outcome = policy.resolve(actor, _request())
        assert outcome.verdict.hit is True
        assert outcome.verdict.critical is True

    def test_unarmed_advantage(self, policy, dice, actor) -> None:
        dice.push(4, (17, 4))
        dice.push(3, (3,))

        policy.resolve(
            actor,
            _request(weapon_kind=WeaponKind.UNARMED, roll_kind=RollKind.ADVANTAGE),
        )
        assert dice.formulas == ["2d20kl", "1d4"]

    def test_unknown_attribute(self, policy, dice, actor) -> None:
        with pytest.raises(UnknownVariant):
            policy.resolve(actor, _request(attribute="luck"))
        assert dice.formulas == []

    def test_failed_damage_roll_posts_nothing(self, sink, actor) -> None:
        actor.damage_dice = DamageDice(armed="d0", unarmed="d4")
        policy = AttackResolutionPolicy(_BrokenDamageRoller(), sink)

        with pytest.raises(DiceFormulaError):
            policy.resolve(actor, _request())
        assert sink.texts == []


class TestAttributeTest:
    def test_success(self, policy, dice, sink, actor) -> None:
        dice.push(5, (5,))
        outcome = policy.attribute_test(actor, "dexterity")
        assert outcome.passed is True
        assert sink.texts == [
            "Ayla makes a dexterity test.",
            "1d20 [5] = 5",
            "The test succeeds.",
        ]

    def test_failure_with_disadvantage(self, policy, dice, sink, actor) -> None:
        dice.push(14, (14, 3))
        outcome = policy.attribute_test(actor, "dexterity", "disadvantage")
        assert outcome.passed is False
        assert dice.formulas == ["2d20kh"]
        assert sink.texts[-1] == "The test fails."
