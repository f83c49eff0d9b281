# rpgcore/systems/combat/interface.py
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ...models import CombatantIdentity, CombatantStats, Owner


class StatsProvider(Protocol):
    """
    Resolves a combatant identity to its authoritative, mutable stats.

    - InMemoryStatsStore: a plain dict (tests, CLI, single process)
    - Future: the hosting game state's character/enemy records
    Returns None when the combatant no longer exists (e.g. disconnected).
    """

    def lookup(self, identity: CombatantIdentity) -> Optional[CombatantStats]: ...


class Notifier(Protocol):
    """
    Outbound messages from a Fight.

    - announce: table-wide combat log line
    - request_decision: ask a remote owner to pick an action; the Fight does
      not wait, the answer arrives later through resolve_action
    """

    def announce(self, text: str) -> None: ...

    def request_decision(self, owner: Owner, targets: Sequence[CombatantIdentity]) -> None: ...
