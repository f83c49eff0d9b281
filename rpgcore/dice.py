# rpgcore/dice.py
from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ModifierKind(Enum):
    ADD = "add"
    MULTIPLY = "multiply"
    DIV_FLOOR = "div_floor"
    DIV_CEIL = "div_ceil"
    DIV_ROUND = "div_round"


class DropKind(Enum):
    NONE = "none"
    HIGHEST = "highest"
    LOWEST = "lowest"


@dataclass(frozen=True)
class Drop:
    """Which dice (and how many) to ignore after rolling."""

    kind: DropKind = DropKind.NONE
    count: int = 0

    @classmethod
    def none(cls) -> "Drop":
        return cls()

    @classmethod
    def highest(cls, count: int = 1) -> "Drop":
        return cls(DropKind.HIGHEST, count)

    @classmethod
    def lowest(cls, count: int = 1) -> "Drop":
        return cls(DropKind.LOWEST, count)

    @property
    def active(self) -> bool:
        return self.kind is not DropKind.NONE


@dataclass(frozen=True)
class RollResult:
    """
    Standard roll result you can log/serialize later.
    - total: final value after modifiers, drops and the minimum clamp
    - rolls: every die rolled, in roll order (empty when nothing was drawn)
    - kept: the dice that survived dropping, sorted when a drop applied
    - notation: canonical notation of the spec that produced this result
    """

    total: int
    rolls: List[int] = field(default_factory=list)
    kept: List[int] = field(default_factory=list)
    notation: str = ""


@dataclass(frozen=True)
class DiceSpec:
    """
    Parsed dice expression like: 3d6+2, d20_h, 4d6_l>=3, 2d8&/d2

    amount == 0 or sides == 0 always evaluates to 0, as does dropping
    at least as many dice as are rolled.
    """

    amount: int
    sides: int
    modifier: int = 0
    modifier_kind: ModifierKind = ModifierKind.ADD
    apply_to_each_die: bool = False
    drop: Drop = field(default_factory=Drop)
    min_value: int = 1

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        if self.sides < 0:
            raise ValueError("sides must be >= 0")
        if self.drop.count < 0:
            raise ValueError("drop count must be >= 0")

    @classmethod
    def simple(cls, amount: int, sides: int) -> "DiceSpec":
        return cls(amount=amount, sides=sides)

    @classmethod
    def simple_modifier(cls, amount: int, sides: int, modifier: int) -> "DiceSpec":
        return cls(amount=amount, sides=sides, modifier=modifier)

    @classmethod
    def simple_drop_highest(cls, amount: int, sides: int) -> "DiceSpec":
        return cls(amount=amount, sides=sides, drop=Drop.highest(1))

    @classmethod
    def simple_drop_lowest(cls, amount: int, sides: int) -> "DiceSpec":
        return cls(amount=amount, sides=sides, drop=Drop.lowest(1))

    def to_notation(self) -> str:
        parts = [f"{self.amount}d{self.sides}"]
        if self.apply_to_each_die:
            parts.append("&")
        if self.modifier_kind is ModifierKind.ADD:
            if self.modifier != 0:
                parts.append(f"{self.modifier:+d}")
        else:
            parts.append(f"{_OPERATOR_SYMBOLS[self.modifier_kind]}{self.modifier}")
        if self.drop.kind is DropKind.HIGHEST:
            parts.append(f"_h{self.drop.count}")
        elif self.drop.kind is DropKind.LOWEST:
            parts.append(f"_l{self.drop.count}")
        if self.min_value != 1:
            parts.append(f">={self.min_value}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_notation()


_OPERATOR_SYMBOLS = {
    ModifierKind.MULTIPLY: "x",
    ModifierKind.DIV_ROUND: "/",
    ModifierKind.DIV_CEIL: "/u",
    ModifierKind.DIV_FLOOR: "/d",
}


# --- Parse errors ---------------------------------------------------------


class DiceParseError(ValueError):
    """
    Base class for dice notation errors.

    position is an index into the notation with whitespace removed.
    """

    reason = "invalid dice notation"

    def __init__(self, notation: str, position: int) -> None:
        self.notation = notation
        self.position = position
        super().__init__(f"{self.reason} at position {position} in {notation!r}")


class MissingDiceMarker(DiceParseError):
    reason = "expected 'd'"


class ZeroDiceCount(DiceParseError):
    reason = "dice count must be greater than zero"


class ZeroSidedDie(DiceParseError):
    reason = "dice must have at least one side"


class MissingSideCount(DiceParseError):
    reason = "expected a side count after 'd'"


class DanglingOperator(DiceParseError):
    reason = "operator is missing its value"


class InvalidDropCount(DiceParseError):
    reason = "cannot drop as many dice as are rolled"


class UnexpectedTrailingToken(DiceParseError):
    reason = "unexpected character"


# Pieces of: [N] d M [&] [op A] [_ (h|l) [X]] [> [=] B]
_DIGITS_RE = re.compile(r"\d+")
_SIGNED_RE = re.compile(r"[+-]?\d+")


def parse(notation: str) -> DiceSpec:
    """
    Parse extended dice notation.

      - "d6"        => 1d6
      - "3d6+2"     => 3d6, +2 to the sum
      - "2d4&x2"    => 2d4, each die doubled
      - "3d8/u2"    => 3d8 halved, rounded up (/d floors, plain / rounds)
      - "4d6_l"     => 4d6 dropping the lowest die (_h drops the highest)
      - "1d6-3>0"   => result clamped to at least 1 (">=0" would clamp to 0)

    Raises a DiceParseError subclass describing the first problem found.
    """
    text = "".join(notation.split())
    pos = 0

    amount = 1
    m = _DIGITS_RE.match(text, pos)
    if m:
        amount = int(m.group())
        pos = m.end()

    if text[pos:pos + 1] not in ("d", "D"):
        raise MissingDiceMarker(notation, pos)
    if amount == 0:
        raise ZeroDiceCount(notation, 0)
    pos += 1

    m = _DIGITS_RE.match(text, pos)
    if not m:
        raise MissingSideCount(notation, pos)
    sides = int(m.group())
    if sides == 0:
        raise ZeroSidedDie(notation, pos)
    pos = m.end()

    apply_to_each_die = False
    if text.startswith("&", pos):
        apply_to_each_die = True
        pos += 1

    modifier = 0
    modifier_kind = ModifierKind.ADD
    op = text[pos:pos + 1]
    if op in ("+", "-"):
        m = _DIGITS_RE.match(text, pos + 1)
        if not m:
            raise DanglingOperator(notation, pos)
        modifier = int(m.group()) if op == "+" else -int(m.group())
        pos = m.end()
    elif op in ("*", "x", "X", "/"):
        op_pos = pos
        pos += 1
        if op == "/":
            suffix = text[pos:pos + 1].lower()
            if suffix == "u":
                modifier_kind = ModifierKind.DIV_CEIL
                pos += 1
            elif suffix == "d":
                modifier_kind = ModifierKind.DIV_FLOOR
                pos += 1
            else:
                modifier_kind = ModifierKind.DIV_ROUND
        else:
            modifier_kind = ModifierKind.MULTIPLY
        m = _SIGNED_RE.match(text, pos)
        if not m:
            raise DanglingOperator(notation, op_pos)
        modifier = int(m.group())
        pos = m.end()

    drop = Drop.none()
    if text.startswith("_", pos):
        which = text[pos + 1:pos + 2].lower()
        if which not in ("h", "l"):
            raise UnexpectedTrailingToken(notation, pos + 1)
        drop_pos = pos
        pos += 2
        # An implicit count of 1 is always accepted ("1d20_h" evaluates to 0);
        # an explicit count must leave at least one die.
        count = 1
        m = _DIGITS_RE.match(text, pos)
        if m:
            count = int(m.group())
            pos = m.end()
            if count >= amount:
                raise InvalidDropCount(notation, drop_pos)
        drop = Drop.highest(count) if which == "h" else Drop.lowest(count)

    min_value = 1
    if text.startswith(">", pos):
        op_pos = pos
        pos += 1
        inclusive = text.startswith("=", pos)
        if inclusive:
            pos += 1
        m = _SIGNED_RE.match(text, pos)
        if not m:
            raise DanglingOperator(notation, op_pos)
        bound = int(m.group())
        min_value = bound if inclusive else bound + 1
        pos = m.end()

    if pos != len(text):
        raise UnexpectedTrailingToken(notation, pos)

    return DiceSpec(
        amount=amount,
        sides=sides,
        modifier=modifier,
        modifier_kind=modifier_kind,
        apply_to_each_die=apply_to_each_die,
        drop=drop,
        min_value=min_value,
    )


def try_parse(notation: str) -> Optional[DiceSpec]:
    """Like parse(), but returns None for invalid notation."""
    try:
        return parse(notation)
    except DiceParseError:
        return None


def apply_modifier(value: int, modifier: int, kind: ModifierKind) -> int:
    """
    Apply a modifier using exact integer arithmetic.
    Dividing by zero leaves the value untouched.
    """
    if kind is ModifierKind.ADD:
        return value + modifier
    if kind is ModifierKind.MULTIPLY:
        return value * modifier
    if modifier == 0:
        return value
    if kind is ModifierKind.DIV_FLOOR:
        return value // modifier
    if kind is ModifierKind.DIV_CEIL:
        return -(-value // modifier)
    if kind is ModifierKind.DIV_ROUND:
        # half away from zero
        sign = -1 if (value < 0) != (modifier < 0) else 1
        n, d = abs(value), abs(modifier)
        return sign * ((2 * n + d) // (2 * d))
    raise ValueError(f"Unsupported modifier kind: {kind!r}")


class Dice:
    """
    Dice roller wrapper so you can:
    - seed for reproducible tests
    - swap RNG later if needed
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    # --- Core primitives ---

    def roll_die(self, sides: int) -> int:
        """Roll 1..sides."""
        if sides <= 0:
            raise ValueError("sides must be > 0")
        return self._rng.randint(1, sides)

    def roll_exploding(self, sides: int, max_rerolls: int) -> int:
        """
        Roll one die, re-rolling and adding whenever it shows its maximum face.
        Stops after max_rerolls extra dice regardless of what they show.
        """
        total = 0
        for _ in range(max_rerolls + 1):
            face = self.roll_die(sides)
            total += face
            if face != sides:
                break
        return total

    # --- Common helpers ---

    def d20(self) -> int:
        return self.roll_die(20)

    def d6(self) -> int:
        return self.roll_die(6)

    # --- DiceSpec rolls ---

    def evaluate(self, spec: DiceSpec) -> int:
        return self.evaluate_detailed(spec).total

    def evaluate_detailed(self, spec: DiceSpec) -> RollResult:
        notation = spec.to_notation()
        if spec.amount == 0 or spec.sides == 0:
            return RollResult(total=0, notation=notation)
        if spec.drop.active and spec.drop.count >= spec.amount:
            return RollResult(total=0, notation=notation)

        rolls = [self.roll_die(spec.sides) for _ in range(spec.amount)]

        if spec.drop.kind is DropKind.HIGHEST:
            kept = sorted(rolls)[: spec.amount - spec.drop.count]
        elif spec.drop.kind is DropKind.LOWEST:
            kept = sorted(rolls)[spec.drop.count:]
        else:
            kept = list(rolls)

        if spec.apply_to_each_die:
            total = sum(apply_modifier(r, spec.modifier, spec.modifier_kind) for r in kept)
        else:
            total = apply_modifier(sum(kept), spec.modifier, spec.modifier_kind)

        if total < spec.min_value:
            total = spec.min_value
        return RollResult(total=total, rolls=rolls, kept=kept, notation=notation)

    def roll(self, notation: str) -> RollResult:
        """
        Roll dice from notation like "2d6+3" or "4d6_l".
        """
        return self.evaluate_detailed(parse(notation))

    # --- Utility ---

    @staticmethod
    def format_roll(result: RollResult) -> str:
        """
        Friendly string for logs.
        Examples:
          - "2d6+3 => [4, 2] = 9"
          - "4d6_l1 => [3, 5, 1, 6] kept [3, 5, 6] = 14"
          - "0d6 => [] = 0"
        """
        if result.kept != result.rolls:
            return f"{result.notation} => {result.rolls} kept {result.kept} = {result.total}"
        return f"{result.notation} => {result.rolls} = {result.total}"


# Convenience singleton if you don't want to instantiate Dice everywhere yet.
DEFAULT_DICE = Dice()


# --- Minimal functional API ---


def evaluate(spec: DiceSpec) -> int:
    return DEFAULT_DICE.evaluate(spec)


def roll(notation: str) -> RollResult:
    return DEFAULT_DICE.roll(notation)
