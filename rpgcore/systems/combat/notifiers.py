# rpgcore/systems/combat/notifiers.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ...models import CombatantIdentity, Owner

logger = logging.getLogger(__name__)


@dataclass
class RecordingNotifier:
    """Keeps everything it is told. Handy for tests and replays."""

    announcements: List[str] = field(default_factory=list)
    decisions: List[Tuple[Owner, Tuple[CombatantIdentity, ...]]] = field(default_factory=list)

    def announce(self, text: str) -> None:
        self.announcements.append(text)

    def request_decision(self, owner: Owner, targets: Sequence[CombatantIdentity]) -> None:
        self.decisions.append((owner, tuple(targets)))

    def last_decision(self) -> Optional[Tuple[Owner, Tuple[CombatantIdentity, ...]]]:
        return self.decisions[-1] if self.decisions else None


@dataclass
class LoggingNotifier:
    """Sends the combat log to a logger; decision requests are logged too."""

    log: logging.Logger = logger

    def announce(self, text: str) -> None:
        self.log.info("%s", text)

    def request_decision(self, owner: Owner, targets: Sequence[CombatantIdentity]) -> None:
        self.log.info("waiting on %s to choose (targets: %s)", owner, ", ".join(map(str, targets)) or "none")
