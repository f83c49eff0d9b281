# rpgcore/models/core.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Attr(Enum):
    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"


def ability_mod(score: int) -> int:
    """
    ACKS-style ability modifier (-3..+3).
    Kept here (core) because multiple systems use it (combat, saves, xp, spells).
    """
    if score >= 18:
        return 3
    if score >= 16:
        return 2
    if score >= 13:
        return 1
    if score >= 9:
        return 0
    if score >= 6:
        return -1
    if score >= 4:
        return -2
    return -3


@dataclass
class Attributes:
    """The six ability scores."""

    strength: int = 9
    dexterity: int = 9
    constitution: int = 9
    intelligence: int = 9
    wisdom: int = 9
    charisma: int = 9

    def __post_init__(self) -> None:
        for attr in Attr:
            score = getattr(self, attr.value)
            if not 0 <= score <= 255:
                raise ValueError(f"{attr.value} must be within 0..255, got {score}")

    def score(self, attr: Attr) -> int:
        return getattr(self, attr.value)

    def modifier(self, attr: Attr) -> int:
        return ability_mod(self.score(attr))

    @classmethod
    def neutral(cls) -> "Attributes":
        return cls()


@dataclass
class Health:
    """current_hp may drop to zero or below (dying/dead)."""

    max_hp: int = 1
    current_hp: int = 1

    def __post_init__(self) -> None:
        if self.max_hp < 0:
            raise ValueError("max_hp must be >= 0")


class SavingThrowType(Enum):
    PETRIFICATION_PARALYSIS = "Petrification & Paralysis"
    POISON_DEATH = "Poison & Death"
    BLAST_BREATH = "Blast & Breath"
    STAFFS_WANDS = "Staffs & Wands"
    SPELLS = "Spells"


@dataclass(frozen=True)
class SavingThrows:
    """
    Saving throw bonuses, "target 20" style: roll 1d20 + bonus + modifiers,
    20 or more saves. (A classic "15+" target converts as 20 - 15 = +5.)
    """

    petrification_paralysis: int = 0
    poison_death: int = 0
    blast_breath: int = 0
    staffs_wands: int = 0
    spells: int = 0

    def apply_mod(self, modifier: int) -> "SavingThrows":
        return SavingThrows(
            petrification_paralysis=self.petrification_paralysis + modifier,
            poison_death=self.poison_death + modifier,
            blast_breath=self.blast_breath + modifier,
            staffs_wands=self.staffs_wands + modifier,
            spells=self.spells + modifier,
        )

    def get(self, save: SavingThrowType) -> int:
        return {
            SavingThrowType.PETRIFICATION_PARALYSIS: self.petrification_paralysis,
            SavingThrowType.POISON_DEATH: self.poison_death,
            SavingThrowType.BLAST_BREATH: self.blast_breath,
            SavingThrowType.STAFFS_WANDS: self.staffs_wands,
            SavingThrowType.SPELLS: self.spells,
        }[save]

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        return (
            self.petrification_paralysis,
            self.poison_death,
            self.blast_breath,
            self.staffs_wands,
            self.spells,
        )
