# rpgcore/systems/ai/interface.py
from __future__ import annotations

from typing import Protocol

from ...models import Action
from ...state import Fight, TurnPrompt
from ..combat.interface import StatsProvider


class CombatController(Protocol):
    """
    A controller chooses an Action for the combatant named in a TurnPrompt.

    - PromptController: asks a human (CLI)
    - FirstTargetController / WeakestTargetController: simple DM policies
    Controllers declare intent only; the Fight rolls and applies outcomes.
    """

    def choose_action(self, fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action: ...
