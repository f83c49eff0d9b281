# rpgcore/store.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from .models import CombatantIdentity, CombatantStats

logger = logging.getLogger(__name__)


@dataclass
class InMemoryStatsStore:
    """
    Dict-backed StatsProvider. lookup() hands out the stored object itself, so
    the Fight's mutations (HP, attack index, status) land on the record.
    """
    _stats: Dict[CombatantIdentity, CombatantStats] = field(default_factory=dict)

    def lookup(self, identity: CombatantIdentity) -> Optional[CombatantStats]:
        return self._stats.get(identity)

    def put(self, identity: CombatantIdentity, stats: CombatantStats) -> None:
        if identity in self._stats:
            logger.debug("replacing stats for %s", identity)
        self._stats[identity] = stats

    def remove(self, identity: CombatantIdentity) -> Optional[CombatantStats]:
        return self._stats.pop(identity, None)

    def __contains__(self, identity: object) -> bool:
        return identity in self._stats

    def __len__(self) -> int:
        return len(self._stats)

    def items(self) -> Iterator[Tuple[CombatantIdentity, CombatantStats]]:
        return iter(list(self._stats.items()))
