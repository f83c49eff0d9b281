# rpgcore/wounds.py
"""
Mortal wounds: what happens to a character who dropped to 0 HP or below.

Roll 1d20, add the modifiers below, and read the condition off the table.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Dict

from .dice import DEFAULT_DICE, Dice
from .progression import HitDie


class TreatmentTiming(Enum):
    ONE_ROUND = "Within 1 round"
    ONE_TURN = "Within 1 turn"
    ONE_HOUR = "Within 1 hour"
    ONE_DAY = "Within 1 day"
    OVER_ONE_DAY = "Over 1 day"


class Condition(Enum):
    DAZED = "Dazed"
    KNOCKED_OUT = "Knocked Out"
    IN_SHOCK = "In Shock"
    CRITICALLY_WOUNDED = "Critically Wounded"
    GRIEVOUSLY_WOUNDED = "Grievously Wounded"
    MORTALLY_WOUNDED = "Mortally Wounded"
    INSTANT_DEATH = "Instant Death"
    EVEN_MORE_INSTANT_DEATH = "Even More Instant Death"

    @property
    def is_death(self) -> bool:
        return self in (Condition.INSTANT_DEATH, Condition.EVEN_MORE_INSTANT_DEATH)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: Dict[Condition, str] = {
    Condition.DAZED: "You were just dazed. You recover immediately with 1hp. You do not need any bed rest.",
    Condition.KNOCKED_OUT: "You were knocked out. You recover with 1 hp. You need magical healing or one night of bed rest.",
    Condition.IN_SHOCK: "You are in shock. You recover with 1 hp. You need magical healing and one night of bed rest, or 1 week of bed rest.",
    Condition.CRITICALLY_WOUNDED: "You are critically wounded. You die unless healed to 1 hp within 1 day. If you are healed, you need 1 week of bed rest.",
    Condition.GRIEVOUSLY_WOUNDED: "You are grievously wounded. You die unless healed to 1 hp within 1 turn. If you are healed, you need 2 weeks of bed rest.",
    Condition.MORTALLY_WOUNDED: "You are mortally wounded. You die unless healed to 1 hp within 1 round. If you are healed, you need 1 month of bed rest.",
    Condition.INSTANT_DEATH: "You were instantly killed.",
    Condition.EVEN_MORE_INSTANT_DEATH: "You were instantly killed.",
}

HIT_DIE_BONUS: Dict[HitDie, int] = {
    HitDie.D4: 0,
    HitDie.D6: 2,
    HitDie.D8: 4,
    HitDie.D10: 6,
    HitDie.D12: 8,
}

TREATMENT_BONUS: Dict[TreatmentTiming, int] = {
    TreatmentTiming.ONE_ROUND: 2,
    TreatmentTiming.ONE_TURN: -3,
    TreatmentTiming.ONE_HOUR: -5,
    TreatmentTiming.ONE_DAY: -8,
    TreatmentTiming.OVER_ONE_DAY: -10,
}


def hp_ratio_bonus(remaining_hp: int, max_hp: int) -> int:
    """How far below zero the character went, as a fraction of max HP."""
    if max_hp <= 0:
        raise ValueError("max_hp must be > 0")
    ratio = Fraction(remaining_hp, max_hp)
    if ratio >= Fraction(-1, 4):
        return 5
    if ratio >= Fraction(-1, 2):
        return -2
    if ratio >= -1:
        return -5
    if ratio >= -2:
        return -10
    return -20


def condition_for(total: int) -> Condition:
    if total >= 26:
        return Condition.DAZED
    if total >= 21:
        return Condition.KNOCKED_OUT
    if total >= 16:
        return Condition.IN_SHOCK
    if total >= 11:
        return Condition.CRITICALLY_WOUNDED
    if total >= 6:
        return Condition.GRIEVOUSLY_WOUNDED
    if total >= 1:
        return Condition.MORTALLY_WOUNDED
    if total >= -5:
        return Condition.INSTANT_DEATH
    return Condition.EVEN_MORE_INSTANT_DEATH


@dataclass(frozen=True)
class MortalWoundsModifiers:
    remaining_hp: int
    max_hp: int
    from_con: int = 0
    hit_die: HitDie = HitDie.D4
    from_healing_magic: int = 0
    from_healing_prof: int = 0
    applied_horsetail: bool = False
    treatment_timing: TreatmentTiming = TreatmentTiming.ONE_ROUND
    other: int = 0

    def total(self) -> int:
        return (
            self.from_con
            + HIT_DIE_BONUS[self.hit_die]
            + hp_ratio_bonus(self.remaining_hp, self.max_hp)
            + self.from_healing_magic
            + self.from_healing_prof
            + (2 if self.applied_horsetail else 0)
            + TREATMENT_BONUS[self.treatment_timing]
            + self.other
        )


@dataclass(frozen=True)
class MortalWoundsResult:
    natural: int
    modified_roll: int
    condition: Condition
    modifiers: MortalWoundsModifiers


def roll_mortal_wounds(modifiers: MortalWoundsModifiers, dice: Dice = DEFAULT_DICE) -> MortalWoundsResult:
    natural = dice.d20()
    total = natural + modifiers.total()
    return MortalWoundsResult(natural=natural, modified_roll=total, condition=condition_for(total), modifiers=modifiers)
