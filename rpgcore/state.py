# rpgcore/state.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .config import DEFAULT_RULES, RulesConfig
from .dice import DEFAULT_DICE, Dice
from .models import (
    DM,
    Action,
    Attack,
    CombatantIdentity,
    CombatantStats,
    Event,
    Maneuver,
    OtherAction,
    Owner,
    RelinquishControl,
)
from .systems.combat.interface import Notifier, StatsProvider
from .systems.combat.resolution import AttackResult, AttackRoll, CombatRules
from .systems.combat.targeting import valid_targets

logger = logging.getLogger(__name__)


class FightError(RuntimeError):
    """The driver asked a Fight to do something its current state doesn't allow."""


class TurnState(Enum):
    IDLE = "idle"                        # no round in progress
    SKIPPED = "skipped"                  # actor couldn't act; turn already advanced
    DM_DECISION = "dm_decision"          # DM-owned actor; driver picks an action now
    AWAITING_PLAYER = "awaiting_player"  # parked until the player's action arrives
    ROUND_OVER = "round_over"


@dataclass(frozen=True)
class TurnPrompt:
    state: TurnState
    actor: Optional[CombatantIdentity] = None
    owner: Optional[Owner] = None
    targets: Tuple[CombatantIdentity, ...] = ()


@dataclass(frozen=True)
class ActionOutcome:
    """
    What resolve_action produced.
      - prompt is set when the same actor still has attacks left this turn
        (next_turn was re-entered for them); None when the turn ended.
    """
    events: Tuple[Event, ...] = ()
    attack: Optional[AttackRoll] = None
    prompt: Optional[TurnPrompt] = None


@dataclass
class Fight:
    """
    Turn-based combat state machine.

    The Fight only holds order and turn bookkeeping. Stats are reached through
    a StatsProvider on every call and mutated in place; player-facing text goes
    out through a Notifier. Nothing here blocks: a player-owned turn parks the
    Fight in awaiting_response until resolve_action is called.
    """
    combatants: List[Tuple[Owner, CombatantIdentity]] = field(default_factory=list)
    current_turn: int = 0
    ongoing_round: bool = False
    awaiting_response: Optional[Owner] = None

    # --- Queries ----------------------------------------------------

    def current_entry(self) -> Optional[Tuple[Owner, CombatantIdentity]]:
        if not self.ongoing_round or self.current_turn >= len(self.combatants):
            return None
        return self.combatants[self.current_turn]

    def current_actor(self) -> Optional[CombatantIdentity]:
        entry = self.current_entry()
        return entry[1] if entry is not None else None

    def identities(self) -> List[CombatantIdentity]:
        return [ident for _, ident in self.combatants]

    # --- Round lifecycle --------------------------------------------

    def start_round(
        self,
        provider: StatsProvider,
        notifier: Notifier,
        dice: Optional[Dice] = None,
        config: RulesConfig = DEFAULT_RULES,
    ) -> List[Event]:
        rules = CombatRules(dice or DEFAULT_DICE, config)
        order, events = rules.roll_initiative(self.combatants, provider)

        self.combatants = order
        self.current_turn = 0
        self.ongoing_round = True
        self.awaiting_response = None

        notifier.announce("Round started!")
        for ev in events:
            notifier.announce(ev.message)
        notifier.announce("Turn order: " + ", ".join(str(ident) for _, ident in order))
        logger.info("round started with %d combatants", len(order))

        return [Event(type="round_start", message="Round started!")] + events

    def next_turn(self, provider: StatsProvider, notifier: Notifier) -> TurnPrompt:
        if not self.ongoing_round:
            return TurnPrompt(TurnState.IDLE)

        if self.current_turn >= len(self.combatants):
            self._conclude_round(notifier)
            return TurnPrompt(TurnState.ROUND_OVER)

        owner, actor = self.combatants[self.current_turn]
        stats = provider.lookup(actor)
        if stats is None or stats.status_effects.is_incapacitated():
            if stats is None:
                logger.warning("no stats for %s; skipping their turn", actor)
            else:
                logger.debug("%s is incapacitated; skipping", actor)
            self.current_turn += 1
            return TurnPrompt(TurnState.SKIPPED, actor=actor, owner=owner)

        targets = tuple(valid_targets(self.combatants, actor, provider))
        if owner.is_dm:
            return TurnPrompt(TurnState.DM_DECISION, actor=actor, owner=owner, targets=targets)

        self.awaiting_response = owner
        notifier.request_decision(owner, targets)
        logger.debug("waiting on %s for %s", owner, actor)
        return TurnPrompt(TurnState.AWAITING_PLAYER, actor=actor, owner=owner, targets=targets)

    def resolve_action(
        self,
        action: Action,
        provider: StatsProvider,
        notifier: Notifier,
        dice: Optional[Dice] = None,
        config: RulesConfig = DEFAULT_RULES,
    ) -> ActionOutcome:
        entry = self.current_entry()
        if entry is None:
            raise FightError("resolve_action called with no combatant acting")
        owner, actor = entry

        if isinstance(action, RelinquishControl):
            self.awaiting_response = DM
            msg = f"{owner} hands control of {actor} to the DM."
            notifier.announce(msg)
            logger.info("%s relinquished control of %s", owner, actor)
            return ActionOutcome(events=(Event(type="action", actor=actor, message=msg),))

        if isinstance(action, Attack):
            return self._resolve_attack(actor, action, provider, notifier, CombatRules(dice or DEFAULT_DICE, config))

        if isinstance(action, Maneuver):
            msg = f"{actor} attempts to {action.maneuver.value.lower()} {action.target}."
            ev = Event(type="action", actor=actor, target=action.target, message=msg, data={"maneuver": action.maneuver.value})
        elif isinstance(action, OtherAction):
            msg = f"{actor} {action.description}."
            ev = Event(type="action", actor=actor, message=msg)
        else:
            raise FightError(f"Unsupported action: {action!r}")

        notifier.announce(msg)
        self._end_turn(provider.lookup(actor))
        return ActionOutcome(events=(ev,))

    # --- Internals --------------------------------------------------

    def _resolve_attack(
        self,
        actor: CombatantIdentity,
        action: Attack,
        provider: StatsProvider,
        notifier: Notifier,
        rules: CombatRules,
    ) -> ActionOutcome:
        target_id = action.target
        attacker = provider.lookup(actor)
        target = provider.lookup(target_id)
        if attacker is None:
            logger.warning("attacker %s not found; using fallback attack throw", actor)
        if target is None:
            logger.warning("target %s not found; using fallback armor class", target_id)

        roll = rules.attack_roll(attacker, target, action.modifier)
        events: List[Event] = [
            Event(
                type="attack_roll",
                actor=actor,
                target=target_id,
                message=f"{actor} attacks {target_id}: {roll.result.value}",
                data={"natural": roll.natural, "total": roll.total, "result": roll.result.value},
            )
        ]

        if roll.result is AttackResult.CRITICAL_FAIL:
            msg = rules.critical_fail_line(actor, target_id)
            notifier.announce(msg)
            events.append(Event(type="miss", actor=actor, target=target_id, message=msg))
        elif roll.result is AttackResult.FAIL:
            msg = f"{actor} missed {target_id}."
            notifier.announce(msg)
            events.append(Event(type="miss", actor=actor, target=target_id, message=msg))
        else:
            critical = roll.result is AttackResult.CRITICAL_SUCCESS
            damage = rules.damage_roll(attacker, critical)
            if critical:
                msg = rules.critical_hit_line(actor, target_id, damage)
            else:
                msg = f"{actor} hit {target_id} for {damage} damage."
            notifier.announce(msg)
            events.append(Event(type="hit", actor=actor, target=target_id, message=msg, data={"critical": critical}))
            events.append(Event(type="damage", actor=actor, target=target_id, data={"amount": damage}))

            if target is not None and target.hurt(damage):
                down = f"{target_id} has fallen!"
                notifier.announce(down)
                events.append(Event(type="down", actor=actor, target=target_id, message=down))

        if attacker is not None:
            attacker.attack_index += 1
            if attacker.current_damage() is not None:
                prompt = self.next_turn(provider, notifier)
                return ActionOutcome(events=tuple(events), attack=roll, prompt=prompt)

        self._end_turn(attacker)
        return ActionOutcome(events=tuple(events), attack=roll)

    def _end_turn(self, stats: Optional[CombatantStats]) -> None:
        if stats is not None:
            stats.attack_index = 0
        self.current_turn += 1
        self.awaiting_response = None

    def _conclude_round(self, notifier: Notifier) -> None:
        self.ongoing_round = False
        self.current_turn = 0
        self.awaiting_response = None
        notifier.announce("Round over!")
        logger.info("round concluded")
