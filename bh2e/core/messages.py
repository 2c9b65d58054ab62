"""채팅 메시지 문구

키 → 템플릿. {name} 형식 치환.
"""

from bh2e.core.sheet.models import RollResult

MESSAGES: dict[str, str] = {
    "attacking": "{name} attacks with {weapon}.",
    "attackMiss": "The attack misses.",
    "normalHit": "The attack hits!",
    "criticalHit": "A critical hit!",
    "rollingUsageDie": "Rolling the usage die for {name}.",
    "reducingUsageDie": "The usage die is reduced to {die}.",
    "usageDieExhausted": "The supply of {name} is exhausted.",
    "rollingAttributeTest": "{name} makes a {attribute} test.",
    "attributeTestSuccess": "The test succeeds.",
    "attributeTestFailed": "The test fails.",
}


def interpolate(key: str, values: dict[str, str] | None = None) -> str:
    """키에 해당하는 문구를 치환해서 반환. 모르는 키는 키 그대로."""
    template = MESSAGES.get(key, key)
    if not values:
        return template
    return template.format(**values)


def format_roll(roll: RollResult) -> str:
    """굴림 결과 한 줄 표시: "2d20kl+1d4 [3, 17, 2] = 5" """
    if roll.raw_results:
        dice = ", ".join(str(r) for r in roll.raw_results)
        return f"{roll.formula} [{dice}] = {roll.total}"
    return f"{roll.formula} = {roll.total}"
