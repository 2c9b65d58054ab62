"""RandomDiceRoller - DiceRoller 구현

지원하는 식 (Core가 생성하는 형태만):
    NdX, NdXkl, NdXkh, 정수, +, -, *, 괄호
예: "1d20", "2d20kl+1d4", "(1d6+1d4)*2"

kl/kh는 1개만 유지. raw_results에는 버린 주사위까지 굴린 순서대로 기록한다.
"""

import random
import re
from typing import Optional

from bh2e.core.logging import get_logger
from bh2e.core.sheet.models import RollResult
from bh2e.services.base import DiceRoller

logger = get_logger(__name__)

_TOKEN = re.compile(r"\s*(?:(?P<dice>(?P<count>\d*)d(?P<sides>\d+)(?P<keep>kl|kh)?)|(?P<num>\d+)|(?P<op>[-+*()]))")

MAX_DICE = 100


class DiceFormulaError(ValueError):
    """해석할 수 없는 주사위 식"""


class RandomDiceRoller(DiceRoller):
    """random.Random 기반 굴림. seed 지정 시 재현 가능."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random(seed)

    def roll(self, formula: str) -> RollResult:
        tokens = self._tokenize(formula)
        raw: list[int] = []
        parser = _Parser(tokens, self._rng, raw)
        total = parser.parse()
        logger.debug("Rolled %s -> %d %s", formula, total, raw)
        return RollResult(formula=formula, total=total, raw_results=tuple(raw))

    @staticmethod
    def _tokenize(formula: str) -> list[tuple[str, str]]:
        tokens: list[tuple[str, str]] = []
        pos = 0
        text = formula.strip().lower()
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            if match is None or match.end() == pos:
                raise DiceFormulaError(f"Cannot parse dice formula '{formula}' at {pos}")
            if match.group("dice"):
                tokens.append(("dice", match.group("dice")))
            elif match.group("num"):
                tokens.append(("num", match.group("num")))
            else:
                tokens.append(("op", match.group("op")))
            pos = match.end()
        if not tokens:
            raise DiceFormulaError("Empty dice formula")
        return tokens


class _Parser:
    """expr := term (('+'|'-') term)* ; term := factor ('*' factor)* ;
    factor := dice | num | '(' expr ')'"""

    def __init__(self, tokens: list[tuple[str, str]], rng: random.Random, raw: list[int]):
        self._tokens = tokens
        self._pos = 0
        self._rng = rng
        self._raw = raw

    def parse(self) -> int:
        value = self._expr()
        if self._pos != len(self._tokens):
            raise DiceFormulaError(f"Unexpected token {self._tokens[self._pos][1]!r}")
        return value

    def _peek(self) -> Optional[tuple[str, str]]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            raise DiceFormulaError("Unexpected end of formula")
        self._pos += 1
        return token

    def _expr(self) -> int:
        value = self._term()
        while self._peek() in (("op", "+"), ("op", "-")):
            _, op = self._next()
            rhs = self._term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def _term(self) -> int:
        value = self._factor()
        while self._peek() == ("op", "*"):
            self._next()
            value *= self._factor()
        return value

    def _factor(self) -> int:
        kind, text = self._next()
        if kind == "num":
            return int(text)
        if kind == "dice":
            return self._roll_dice(text)
        if text == "(":
            value = self._expr()
            if self._next() != ("op", ")"):
                raise DiceFormulaError("Missing closing parenthesis")
            return value
        raise DiceFormulaError(f"Unexpected token {text!r}")

    def _roll_dice(self, text: str) -> int:
        match = _TOKEN.match(text)
        count = int(match.group("count") or 1)
        sides = int(match.group("sides"))
        keep = match.group("keep")
        if not 1 <= count <= MAX_DICE or sides < 1:
            raise DiceFormulaError(f"Invalid dice term {text!r}")

        results = [self._rng.randint(1, sides) for _ in range(count)]
        self._raw.extend(results)

        if keep == "kl":
            return min(results)
        if keep == "kh":
            return max(results)
        return sum(results)
