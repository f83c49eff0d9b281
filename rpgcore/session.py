# rpgcore/session.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import DEFAULT_RULES, RulesConfig
from .dice import Dice
from .models import Event, Owner
from .state import Fight, TurnState
from .systems.ai.interface import CombatController
from .systems.ai.policies import FirstTargetController
from .systems.combat.interface import Notifier, StatsProvider

logger = logging.getLogger(__name__)

EventSink = Callable[[Event], None]


def standing_sides(fight: Fight, provider: StatsProvider) -> set[bool]:
    """Which sides (True = DM) still have someone able to fight."""
    sides = set()
    for owner, ident in fight.combatants:
        stats = provider.lookup(ident)
        if stats is not None and not stats.status_effects.is_untargetable():
            sides.add(owner.is_dm)
    return sides


@dataclass
class CombatSession:
    """
    Local driver that plays a Fight to the end: DM turns go to dm_controller,
    player turns to the controller registered for that player. A player with
    no controller is played by the DM. A controller that answers with
    RelinquishControl hands that same turn to the DM.
    """
    dice: Dice = field(default_factory=Dice)
    config: RulesConfig = field(default=DEFAULT_RULES)
    dm_controller: CombatController = field(default_factory=FirstTargetController)
    player_controllers: Dict[str, CombatController] = field(default_factory=dict)

    def _emit(self, events, sink: Optional[EventSink]) -> None:
        if sink is None:
            return
        for e in events:
            sink(e)

    def _controller_for(self, owner: Optional[Owner]) -> CombatController:
        if owner is None or owner.is_dm:
            return self.dm_controller
        controller = self.player_controllers.get(owner.player)
        if controller is None:
            logger.warning("no controller for %s; the DM acts for them", owner)
            return self.dm_controller
        return controller

    def play_round(
        self,
        fight: Fight,
        provider: StatsProvider,
        notifier: Notifier,
        *,
        on_event: Optional[EventSink] = None,
    ) -> List[Event]:
        log: List[Event] = list(fight.start_round(provider, notifier, self.dice, self.config))
        self._emit(log, on_event)

        prompt = fight.next_turn(provider, notifier)
        while prompt.state is not TurnState.ROUND_OVER:
            if prompt.state is TurnState.SKIPPED:
                ev = Event(type="turn_skipped", actor=prompt.actor, message=f"{prompt.actor} can't act.")
                log.append(ev)
                self._emit([ev], on_event)
                prompt = fight.next_turn(provider, notifier)
                continue

            controller = self._controller_for(prompt.owner)
            action = controller.choose_action(fight, prompt, provider)
            outcome = fight.resolve_action(action, provider, notifier, self.dice, self.config)
            log.extend(outcome.events)
            self._emit(outcome.events, on_event)

            if outcome.prompt is not None:
                prompt = outcome.prompt
            elif fight.awaiting_response is not None and fight.awaiting_response.is_dm:
                # Control was handed back: the DM decides for the same actor.
                action = self.dm_controller.choose_action(fight, prompt, provider)
                outcome = fight.resolve_action(action, provider, notifier, self.dice, self.config)
                log.extend(outcome.events)
                self._emit(outcome.events, on_event)
                prompt = outcome.prompt or fight.next_turn(provider, notifier)
            else:
                prompt = fight.next_turn(provider, notifier)

        end = Event(type="round_end", message="Round over!")
        log.append(end)
        self._emit([end], on_event)
        return log

    def run(
        self,
        fight: Fight,
        provider: StatsProvider,
        notifier: Notifier,
        max_rounds: int = 50,
        *,
        on_event: Optional[EventSink] = None,
    ) -> List[Event]:
        """Play rounds until only one side is standing or max_rounds is reached."""
        log: List[Event] = []
        rounds = 0
        while len(standing_sides(fight, provider)) > 1 and rounds < max_rounds:
            rounds += 1
            logger.debug("playing round %d", rounds)
            log.extend(self.play_round(fight, provider, notifier, on_event=on_event))

        sides = standing_sides(fight, provider)
        if len(sides) == 1:
            msg = "Combat ends. The DM's side wins." if sides.pop() else "Combat ends. The players win."
        else:
            msg = "Combat ends. No winner (max rounds or draw)."
        notifier.announce(msg)
        logger.debug("combat over after %d rounds", rounds)
        return log

