# rpgcore/core.py
from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from .config import DEFAULT_RULES, RulesConfig
from .dice import Dice
from .encounter import Encounter
from .models import DM, Action, Attack, CombatantIdentity, Event, Maneuver, Owner, RelinquishControl
from .proficiency import Proficiencies, ProficiencyHooks, ProficiencyInstance, default_hooks, grant_proficiency
from .state import ActionOutcome, Fight, FightError, TurnPrompt
from .store import InMemoryStatsStore
from .systems.combat.interface import Notifier
from .systems.combat.notifiers import LoggingNotifier
from .systems.combat.targeting import valid_targets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intent:
    """An action someone wants taken, queued until the table processes it."""
    owner: Owner
    action: Action


@dataclass
class GameTable:
    """
    GameTable is the façade / public API for the rules engine.

    It owns the one game state (stats store, current Fight, dice, hooks) and
    guards it with a single lock. Network-facing threads only submit()
    intents; the host thread applies them in order with process_pending().
    """

    seed: Optional[int] = None
    config: RulesConfig = field(default=DEFAULT_RULES)
    notifier: Notifier = field(default_factory=LoggingNotifier)
    store: InMemoryStatsStore = field(default_factory=InMemoryStatsStore)
    hooks: ProficiencyHooks = field(default_factory=default_hooks)

    dice: Dice = field(init=False)
    fight: Optional[Fight] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.dice = Dice(seed=self.seed) if self.seed is not None else Dice()
        self._lock = threading.RLock()
        self._pending: Deque[Intent] = deque()

    # --- Fight lifecycle --------------------------------------------------

    def start_fight(self, encounter: Encounter) -> Fight:
        with self._lock:
            if self.fight is not None:
                raise FightError("a fight is already in progress")
            encounter.populate(self.store)
            self.fight = encounter.build()
            self.notifier.announce("Combat begins!")
            logger.info("fight started: %s", ", ".join(str(i) for i in self.fight.identities()))
            return self.fight

    def end_fight(self) -> Optional[Fight]:
        with self._lock:
            fight, self.fight = self.fight, None
            self._pending.clear()
            if fight is not None:
                self.notifier.announce("Combat is over.")
                logger.info("fight ended")
            return fight

    def _require_fight(self) -> Fight:
        if self.fight is None:
            raise FightError("no fight in progress")
        return self.fight

    def start_round(self) -> List[Event]:
        with self._lock:
            return self._require_fight().start_round(self.store, self.notifier, self.dice, self.config)

    def next_turn(self) -> TurnPrompt:
        with self._lock:
            return self._require_fight().next_turn(self.store, self.notifier)

    def resolve(self, action: Action) -> ActionOutcome:
        """Resolve an action for the current actor right away (the DM's path)."""
        with self._lock:
            return self._require_fight().resolve_action(action, self.store, self.notifier, self.dice, self.config)

    # --- Remote intents ---------------------------------------------------

    def submit(self, owner: Owner, action: Action) -> None:
        """Queue an action from any thread. Nothing is applied until process_pending()."""
        with self._lock:
            self._pending.append(Intent(owner, action))

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def process_pending(self) -> List[ActionOutcome]:
        """
        Apply queued intents in arrival order. An intent only counts if its
        owner is the one the Fight is waiting on, and an attack or maneuver
        only counts if its target is one the actor could pick. Anything else
        is dropped.
        """
        outcomes: List[ActionOutcome] = []
        with self._lock:
            while self._pending:
                intent = self._pending.popleft()
                fight = self.fight
                if fight is None or fight.awaiting_response != intent.owner:
                    logger.warning("dropping %s from %s: not their decision", type(intent.action).__name__, intent.owner)
                    continue
                if isinstance(intent.action, (Attack, Maneuver)) and not self._targetable(fight, intent.action.target):
                    logger.warning("dropping %s from %s: %s is not a valid target", type(intent.action).__name__, intent.owner, intent.action.target)
                    continue
                outcomes.append(fight.resolve_action(intent.action, self.store, self.notifier, self.dice, self.config))
        return outcomes

    def _targetable(self, fight: Fight, target: CombatantIdentity) -> bool:
        actor = fight.current_actor()
        return actor is not None and target in valid_targets(fight.combatants, actor, self.store)

    def force_relinquish(self) -> bool:
        """Take a stalled decision away from a player and give it to the DM."""
        with self._lock:
            fight = self.fight
            if fight is None or fight.awaiting_response is None or fight.awaiting_response == DM:
                return False
            logger.warning("forcing %s to relinquish control", fight.awaiting_response)
            fight.resolve_action(RelinquishControl(), self.store, self.notifier, self.dice, self.config)
            return True

    # --- Character helpers ------------------------------------------------

    def grant_proficiency(
        self,
        identity: CombatantIdentity,
        profs: Proficiencies,
        inst: ProficiencyInstance,
    ) -> ProficiencyInstance:
        with self._lock:
            stats = self.store.lookup(identity)
            if stats is None:
                raise KeyError(f"no stats for {identity}")
            return grant_proficiency(profs, stats, inst, self.hooks)
