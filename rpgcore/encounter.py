# rpgcore/encounter.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .models import CombatantIdentity, CombatantStats, Owner
from .state import Fight
from .store import InMemoryStatsStore


@dataclass
class Encounter:
    """
    Builder for the Forming phase: collect who is fighting and who controls
    them, then build() a Fight. Stats given here are copied into a store by
    populate(); the Fight itself only ever holds identities.
    """
    entries: List[Tuple[Owner, CombatantIdentity]] = field(default_factory=list)
    stats: Dict[CombatantIdentity, CombatantStats] = field(default_factory=dict)
    max_rounds: int = 50

    def add(self, owner: Owner, identity: CombatantIdentity, stats: Optional[CombatantStats] = None) -> "Encounter":
        if any(ident == identity for _, ident in self.entries):
            raise ValueError(f"{identity} is already in this encounter")
        self.entries.append((owner, identity))
        if stats is not None:
            self.stats[identity] = stats
        return self

    def set_owner(self, identity: CombatantIdentity, owner: Owner) -> "Encounter":
        for i, (_, ident) in enumerate(self.entries):
            if ident == identity:
                self.entries[i] = (owner, ident)
                return self
        raise KeyError(f"{identity} is not in this encounter")

    def set_max_rounds(self, max_rounds: int) -> "Encounter":
        if max_rounds <= 0:
            raise ValueError("max_rounds must be > 0")
        self.max_rounds = max_rounds
        return self

    def populate(self, store: InMemoryStatsStore) -> InMemoryStatsStore:
        for ident, stats in self.stats.items():
            store.put(ident, stats)
        return store

    def build(self) -> Fight:
        if not self.entries:
            raise ValueError("an encounter needs at least one combatant")
        return Fight(combatants=list(self.entries))
