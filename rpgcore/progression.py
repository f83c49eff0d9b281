# rpgcore/progression.py
"""
Character progression tables: saving throws, attack throw bonus and the XP
cost curve. Everything here is a pure function of its arguments.

Levels above the last defined breakpoint saturate at the last entry.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from .models.core import Attr, Attributes, SavingThrows


class SaveProgression(Enum):
    FIGHTER = "Fighter"
    CLERIC = "Cleric"
    MAGE = "Mage"
    THIEF = "Thief"


class AttackProgression(Enum):
    ONE_PER_THREE = "1 per 3 levels"
    ONE_PER_TWO = "1 per 2 levels"
    TWO_PER_THREE = "2 per 3 levels"
    ONE_PER_ONE = "1 per level"
    THREE_PER_TWO = "3 per 2 levels"


class HitDie(Enum):
    D4 = 4
    D6 = 6
    D8 = 8
    D10 = 10
    D12 = 12

    @property
    def sides(self) -> int:
        return self.value


COMMONER_SAVES = SavingThrows(4, 5, 3, 3, 2)

BASE_SAVES: Dict[SaveProgression, SavingThrows] = {
    SaveProgression.FIGHTER: SavingThrows(5, 6, 4, 4, 3),
    SaveProgression.CLERIC: SavingThrows(7, 10, 4, 7, 5),
    SaveProgression.MAGE: SavingThrows(7, 7, 5, 9, 8),
    SaveProgression.THIEF: SavingThrows(7, 7, 4, 6, 5),
}

# Fighter save bonus by level; index = level, anything past the end uses the last entry.
# Hand-tuned: there is no clean formula behind these breakpoints.
FIGHTER_SAVE_BONUS: Tuple[int, ...] = (0, 0, 1, 1, 2, 3, 3, 4, 5, 5, 6, 7, 7, 8, 9)

MAX_XP_COST: Dict[SaveProgression, int] = {
    SaveProgression.FIGHTER: 120_000,
    SaveProgression.CLERIC: 100_000,
    SaveProgression.THIEF: 100_000,
    SaveProgression.MAGE: 150_000,
}


def _check_level(level: int) -> None:
    if level < 0:
        raise ValueError(f"level must be >= 0, got {level}")


def save_level_bonus(progression: SaveProgression, level: int) -> int:
    _check_level(level)
    if progression is SaveProgression.FIGHTER:
        return FIGHTER_SAVE_BONUS[min(level, len(FIGHTER_SAVE_BONUS) - 1)]
    if level == 0:
        return 0
    if progression in (SaveProgression.CLERIC, SaveProgression.THIEF):
        return (level - 1) // 2
    if progression is SaveProgression.MAGE:
        return (level - 1) // 3
    raise ValueError(f"Unsupported save progression: {progression!r}")


def saving_throws(progression: SaveProgression, level: int, attributes: Attributes) -> SavingThrows:
    """Base saves for a class at a level; WIS applies to every category."""
    _check_level(level)
    wis = attributes.modifier(Attr.WIS)
    if level == 0:
        return COMMONER_SAVES.apply_mod(wis)
    base = BASE_SAVES[progression]
    return base.apply_mod(save_level_bonus(progression, level)).apply_mod(wis)


def saving_throws_simple(progression: SaveProgression, level: int) -> SavingThrows:
    return saving_throws(progression, level, Attributes.neutral())


def attack_throw_bonus(kind: AttackProgression, level: int) -> int:
    """
    Base attack throw. Level 0 (normal men) is always 9; otherwise 10 plus
    the progression's share of the levels gained since 1st.
    """
    _check_level(level)
    if level == 0:
        return 9
    x = level - 1
    if kind is AttackProgression.ONE_PER_THREE:
        return 10 + x // 3
    if kind is AttackProgression.ONE_PER_TWO:
        return 10 + x // 2
    if kind is AttackProgression.TWO_PER_THREE:
        # 2x/3 never lands on .5, so this is a plain round
        return 10 + (2 * x + 1) // 3
    if kind is AttackProgression.ONE_PER_ONE:
        return 10 + x
    if kind is AttackProgression.THREE_PER_TWO:
        return 10 + (3 * x) // 2
    raise ValueError(f"Unsupported attack progression: {kind!r}")


def _round_to_nearest(value: int, step: int) -> int:
    remainder = value % step
    if remainder * 2 >= step:
        return value + step - remainder
    return value - remainder


def next_level_xp_cost(base_cost: int, level: int, progression: SaveProgression) -> int:
    """XP needed to go from `level` to `level + 1`."""
    _check_level(level)
    if level == 0:
        return 100
    if level <= 5:
        return base_cost * 2 ** (level - 1)
    if level == 6:
        return _round_to_nearest(base_cost * 32, 5000)
    level_7 = next_level_xp_cost(base_cost, 6, progression) * 2
    if level == 7:
        return level_7
    return level_7 + (level - 7) * MAX_XP_COST[progression]
