# rpgcore/systems/ai/policies.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ...dice import DEFAULT_DICE, Dice
from ...models import Action, Attack, CombatantIdentity, OtherAction, RelinquishControl
from ...state import Fight, TurnPrompt
from ..combat.interface import StatsProvider
from .interface import CombatController


def _hp(provider: StatsProvider, ident: CombatantIdentity) -> int:
    stats = provider.lookup(ident)
    return stats.health.current_hp if stats is not None else 0


def _opponents(fight: Fight, prompt: TurnPrompt) -> list[CombatantIdentity]:
    """Targets owned by the other side (DM vs players). Falls back to everyone."""
    owners = dict((ident, owner) for owner, ident in fight.combatants)
    actor_is_dm = prompt.owner is not None and prompt.owner.is_dm
    opp = [t for t in prompt.targets if owners.get(t) is not None and owners[t].is_dm != actor_is_dm]
    return opp or list(prompt.targets)


@dataclass
class PromptController(CombatController):
    """
    Human controller. The prompt function receives the fight, the prompt and
    the provider, and returns the chosen Action (CLI, chat bot, tests...).
    """
    prompt: Callable[[Fight, TurnPrompt, StatsProvider], Action]

    def choose_action(self, fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action:
        return self.prompt(fight, prompt, provider)


@dataclass
class FirstTargetController(CombatController):
    """Deterministic, dumb: attack the first opponent in turn order."""

    def choose_action(self, fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action:
        opp = _opponents(fight, prompt)
        if not opp:
            return OtherAction("looks around for someone to fight")
        return Attack(target=opp[0])


@dataclass
class WeakestTargetController(CombatController):
    """
    Finish off whoever is closest to dropping. Ties are broken by a die roll
    so a crowd of goblins doesn't always dogpile the same hero.
    """
    dice: Dice = field(default=DEFAULT_DICE)

    def choose_action(self, fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action:
        opp = _opponents(fight, prompt)
        if not opp:
            return OtherAction("looks around for someone to fight")

        lowest = min(_hp(provider, t) for t in opp)
        weakest = [t for t in opp if _hp(provider, t) == lowest]
        if len(weakest) == 1:
            return Attack(target=weakest[0])
        return Attack(target=weakest[self.dice.roll_die(len(weakest)) - 1])


@dataclass
class RelinquishingController(CombatController):
    """Stand-in for an absent player: gives the decision straight back to the DM."""

    def choose_action(self, fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action:
        return RelinquishControl()
