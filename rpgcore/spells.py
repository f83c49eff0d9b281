# rpgcore/spells.py
"""
Spell slot tables.

A class's caster value (tier, optionally delayed) turns its character level
into an *effective* level, which is then looked up in the Divine (5 ranks)
or Arcane (6 ranks) table. Effective levels above the table saturate.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

Slots = Tuple[int, ...]


class MagicType(Enum):
    ARCANE = "Arcane"
    DIVINE = "Divine"


class CasterTier(Enum):
    NONE = 0
    TIER1 = 1
    TIER2 = 2
    TIER3 = 3
    TIER4 = 4


@dataclass(frozen=True)
class CasterValue:
    tier: CasterTier = CasterTier.NONE
    delayed: bool = False

    def __str__(self) -> str:
        if self.tier is CasterTier.NONE:
            return "None"
        suffix = " (delayed)" if self.delayed else ""
        return f"Tier {self.tier.value}{suffix}"


# Index = effective level. Each row is slots per spell rank, rank 1 first.
DIVINE_SLOTS: Tuple[Slots, ...] = (
    (0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0),
    (1, 0, 0, 0, 0),
    (2, 0, 0, 0, 0),
    (2, 1, 0, 0, 0),
    (2, 2, 0, 0, 0),
    (2, 2, 1, 1, 0),
    (2, 2, 2, 1, 1),
    (3, 3, 2, 2, 1),
    (3, 3, 3, 2, 2),
    (4, 4, 3, 3, 2),
    (4, 4, 4, 3, 3),
    (5, 5, 4, 4, 3),
    (5, 5, 5, 4, 4),
    (6, 5, 5, 5, 4),
)

ARCANE_SLOTS: Tuple[Slots, ...] = (
    (0, 0, 0, 0, 0, 0),
    (1, 0, 0, 0, 0, 0),
    (2, 0, 0, 0, 0, 0),
    (2, 1, 0, 0, 0, 0),
    (2, 2, 0, 0, 0, 0),
    (2, 2, 1, 0, 0, 0),
    (2, 2, 2, 0, 0, 0),
    (3, 2, 2, 1, 0, 0),
    (3, 3, 2, 2, 0, 0),
    (3, 3, 3, 2, 1, 0),
    (3, 3, 3, 3, 2, 0),
    (4, 3, 3, 3, 2, 1),
    (4, 4, 3, 3, 3, 2),
    (4, 4, 4, 3, 3, 2),
    (4, 4, 4, 4, 3, 3),
)

SLOT_TABLES: Dict[MagicType, Tuple[Slots, ...]] = {
    MagicType.DIVINE: DIVINE_SLOTS,
    MagicType.ARCANE: ARCANE_SLOTS,
}

# Non-delayed: (divisor, round half up?) applied to the character level.
TIER_DIVISORS: Dict[CasterTier, Tuple[int, bool]] = {
    CasterTier.TIER1: (3, False),
    CasterTier.TIER2: (2, True),
    CasterTier.TIER3: (1, False),
    CasterTier.TIER4: (1, False),
}

# Delayed: levels subtracted before lookup.
TIER_DELAY_OFFSETS: Dict[CasterTier, int] = {
    CasterTier.TIER1: 8,
    CasterTier.TIER2: 4,
    CasterTier.TIER3: 2,
    CasterTier.TIER4: 1,
}


def effective_level(value: CasterValue, level: int) -> int:
    if level < 0:
        raise ValueError(f"level must be >= 0, got {level}")
    if value.tier is CasterTier.NONE:
        return 0
    if value.delayed:
        return max(0, level - TIER_DELAY_OFFSETS[value.tier])
    divisor, rounded = TIER_DIVISORS[value.tier]
    if rounded:
        return (2 * level + divisor) // (2 * divisor)
    return level // divisor


def max_spell_slots(magic_type: MagicType, value: CasterValue, level: int) -> Slots:
    table = SLOT_TABLES[magic_type]
    eff = min(effective_level(value, level), len(table) - 1)
    slots = list(table[eff])

    if value.tier is CasterTier.TIER3:
        slots = [s + (s + 1) // 3 for s in slots]
    elif value.tier is CasterTier.TIER4:
        slots = [s + (s + 1) // 2 for s in slots]
        if slots[0] == 0:
            slots[0] = 1

    return tuple(slots)


def max_divine_slots(value: CasterValue, level: int) -> Slots:
    return max_spell_slots(MagicType.DIVINE, value, level)


def max_arcane_slots(value: CasterValue, level: int) -> Slots:
    return max_spell_slots(MagicType.ARCANE, value, level)


def repertoire_size(value: CasterValue, level: int, int_mod: int) -> Slots:
    """Arcane spells known per rank: slots plus a positive INT modifier, on ranks already open."""
    bonus = max(int_mod, 0)
    return tuple(s + bonus if s > 0 else 0 for s in max_arcane_slots(value, level))
