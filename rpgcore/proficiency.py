# rpgcore/proficiency.py
"""
Proficiencies and the hooks that make some of them change combat stats.

Most proficiencies are descriptive. The few that have a mechanical effect
register an add/remove pair on a ProficiencyHooks registry, keyed by the
proficiency id (its name in snake_case, e.g. "divine_blessing"). The registry
is an ordinary object handed to whoever grants proficiencies; there is no
process-wide instance.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .models import CombatantStats

logger = logging.getLogger(__name__)

_ROMAN = ("I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X")


def roman_numeral(n: int) -> str:
    """1..10 only; anything else renders as nothing."""
    if 1 <= n <= len(_ROMAN):
        return _ROMAN[n - 1]
    return ""


@dataclass(frozen=True)
class Proficiency:
    name: str
    description: str = ""
    is_general: bool = True
    max_level: int = 0
    requires_specification: bool = False
    valid_specifications: Optional[FrozenSet[str]] = None
    starting_throw: Optional[int] = None

    @property
    def id(self) -> str:
        return "_".join(self.name.lower().split())


ProfKey = Tuple[str, Optional[str]]


@dataclass
class ProficiencyInstance:
    """
    A proficiency as a character has it: the specification for things like
    Craft (Jeweler), and the level when it was taken more than once.
    """
    prof: Proficiency
    prof_level: int = 0
    specification: Optional[str] = None
    throw: Optional[int] = None

    @classmethod
    def from_prof(cls, prof: Proficiency, specification: Optional[str] = None) -> "ProficiencyInstance":
        if prof.requires_specification:
            if specification is None:
                specification = ""
            if prof.valid_specifications is not None and specification not in prof.valid_specifications:
                raise ValueError(f"{specification!r} is not a valid specification for {prof.name}")
        elif specification is not None:
            raise ValueError(f"{prof.name} does not take a specification")
        return cls(prof=prof, specification=specification, throw=prof.starting_throw)

    @property
    def key(self) -> ProfKey:
        return (self.prof.id, self.specification)

    def display(self) -> str:
        out = self.prof.name
        if self.specification is not None:
            out += f" ({self.specification})"
        if self.prof_level > 0:
            numeral = roman_numeral(self.prof_level + 1)
            if numeral:
                out += f" {numeral}"
        return out


Hook = Callable[[CombatantStats, ProficiencyInstance], None]


class ProficiencyHooks:
    def __init__(self) -> None:
        self._on_added: Dict[str, Hook] = {}
        self._on_removed: Dict[str, Hook] = {}

    def on_add(self, prof_id: str, func: Hook) -> None:
        self._on_added[prof_id] = func

    def on_remove(self, prof_id: str, func: Hook) -> None:
        self._on_removed[prof_id] = func

    def trigger_add(self, prof_id: str, stats: CombatantStats, inst: ProficiencyInstance) -> None:
        func = self._on_added.get(prof_id)
        if func is not None:
            logger.debug("add hook for %s", prof_id)
            func(stats, inst)

    def trigger_remove(self, prof_id: str, stats: CombatantStats, inst: ProficiencyInstance) -> None:
        func = self._on_removed.get(prof_id)
        if func is not None:
            logger.debug("remove hook for %s", prof_id)
            func(stats, inst)

    def __contains__(self, prof_id: object) -> bool:
        return prof_id in self._on_added or prof_id in self._on_removed


def default_hooks() -> ProficiencyHooks:
    hooks = ProficiencyHooks()
    hooks.on_add("divine_blessing", lambda stats, _: stats.modifiers.add_all_saves("divine_blessing", 2))
    hooks.on_remove("divine_blessing", lambda stats, _: stats.modifiers.remove_all_saves("divine_blessing"))
    return hooks


@dataclass
class Proficiencies:
    general_slots: int = 0
    class_slots: int = 0
    profs: Dict[ProfKey, ProficiencyInstance] = field(default_factory=dict)

    def get(self, prof_id: str, specification: Optional[str] = None) -> Optional[ProficiencyInstance]:
        return self.profs.get((prof_id, specification))

    def __len__(self) -> int:
        return len(self.profs)


def grant_proficiency(
    profs: Proficiencies,
    stats: CombatantStats,
    inst: ProficiencyInstance,
    hooks: ProficiencyHooks,
) -> ProficiencyInstance:
    """
    Add a proficiency, or take it again to raise its level. Hooks fire only
    when the proficiency is first gained.
    """
    existing = profs.profs.get(inst.key)
    if existing is not None:
        if existing.prof_level >= existing.prof.max_level:
            raise ValueError(f"{existing.display()} is already at its maximum level")
        existing.prof_level += 1
        return existing

    profs.profs[inst.key] = inst
    hooks.trigger_add(inst.prof.id, stats, inst)
    return inst


def revoke_proficiency(
    profs: Proficiencies,
    stats: CombatantStats,
    key: ProfKey,
    hooks: ProficiencyHooks,
) -> Optional[ProficiencyInstance]:
    inst = profs.profs.pop(key, None)
    if inst is not None:
        hooks.trigger_remove(inst.prof.id, stats, inst)
    return inst
