# rpgcore/modifiers.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, ItemsView, Mapping, Optional


class StatModifier:
    """
    Keyed additive modifiers for one stat, with a cached running total.

    Every modifier needs a unique key naming where it came from
    ("strength", "divine_blessing", "ring_of_protection", ...). Adding at an
    existing key replaces the old value.
    """

    __slots__ = ("_total", "_entries")

    def __init__(self) -> None:
        self._total = 0
        self._entries: Dict[str, int] = {}

    @classmethod
    def from_entries(cls, entries: Mapping[str, int]) -> "StatModifier":
        mod = cls()
        for key, value in entries.items():
            mod.add(key, value)
        return mod

    @property
    def total(self) -> int:
        return self._total

    def add(self, key: str, value: int) -> Optional[int]:
        """Set the modifier at key, returning the value it replaced (if any)."""
        previous = self.remove(key)
        self._entries[key] = value
        self._total += value
        return previous

    def remove(self, key: str) -> Optional[int]:
        """Delete the modifier at key, returning it. Missing keys are ignored."""
        if key not in self._entries:
            return None
        value = self._entries.pop(key)
        self._total -= value
        return value

    def has_modifier(self, key: str) -> bool:
        return key in self._entries

    def view_all(self) -> ItemsView[str, int]:
        return MappingProxyType(self._entries).items()

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatModifier):
            return NotImplemented
        return self._entries == other._entries and self._total == other._total

    def __repr__(self) -> str:
        return f"StatModifier(total={self._total!r}, entries={self._entries!r})"


class StatModType(Enum):
    MELEE_ATTACK = "Melee Attack"
    MISSILE_ATTACK = "Missile Attack"
    MELEE_DAMAGE = "Melee Damage"
    MISSILE_DAMAGE = "Missile Damage"
    INITIATIVE = "Initiative"
    SURPRISE = "Surprise"
    ARMOR_CLASS = "Armor Class"
    SAVE_PP = "Save (Petrification & Paralysis)"
    SAVE_PD = "Save (Poison & Death)"
    SAVE_BB = "Save (Blast & Breath)"
    SAVE_SW = "Save (Staffs & Wands)"
    SAVE_SPELLS = "Save (Spells)"


_FIELD_FOR_TYPE = {
    StatModType.MELEE_ATTACK: "melee_attack",
    StatModType.MISSILE_ATTACK: "missile_attack",
    StatModType.MELEE_DAMAGE: "melee_damage",
    StatModType.MISSILE_DAMAGE: "missile_damage",
    StatModType.INITIATIVE: "initiative",
    StatModType.SURPRISE: "surprise",
    StatModType.ARMOR_CLASS: "armor_class",
    StatModType.SAVE_PP: "save_petrification_paralysis",
    StatModType.SAVE_PD: "save_poison_death",
    StatModType.SAVE_BB: "save_blast_breath",
    StatModType.SAVE_SW: "save_staffs_wands",
    StatModType.SAVE_SPELLS: "save_spells",
}

SAVE_FIELDS = (
    "save_petrification_paralysis",
    "save_poison_death",
    "save_blast_breath",
    "save_staffs_wands",
    "save_spells",
)


@dataclass
class StatModifiers:
    """
    All active modifiers for every stat, permanent and temporary alike.
    xp_gain is in whole percent (5 == +5% XP).
    """

    melee_attack: StatModifier = field(default_factory=StatModifier)
    missile_attack: StatModifier = field(default_factory=StatModifier)
    melee_damage: StatModifier = field(default_factory=StatModifier)
    missile_damage: StatModifier = field(default_factory=StatModifier)
    initiative: StatModifier = field(default_factory=StatModifier)
    surprise: StatModifier = field(default_factory=StatModifier)
    armor_class: StatModifier = field(default_factory=StatModifier)
    xp_gain: StatModifier = field(default_factory=StatModifier)
    save_petrification_paralysis: StatModifier = field(default_factory=StatModifier)
    save_poison_death: StatModifier = field(default_factory=StatModifier)
    save_blast_breath: StatModifier = field(default_factory=StatModifier)
    save_staffs_wands: StatModifier = field(default_factory=StatModifier)
    save_spells: StatModifier = field(default_factory=StatModifier)

    def get(self, typ: StatModType) -> StatModifier:
        return getattr(self, _FIELD_FOR_TYPE[typ])

    def add_all_saves(self, key: str, value: int) -> None:
        for name in SAVE_FIELDS:
            getattr(self, name).add(key, value)

    def remove_all_saves(self, key: str) -> None:
        for name in SAVE_FIELDS:
            getattr(self, name).remove(key)
