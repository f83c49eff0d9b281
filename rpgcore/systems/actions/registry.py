# rpgcore/systems/actions/registry.py
from __future__ import annotations

from dataclasses import dataclass

from ...models import Action, Attack, Maneuver, OtherAction, RelinquishControl, SpecialManeuver
from ...state import TurnPrompt, TurnState


@dataclass(frozen=True)
class ActionRegistry:
    """
    Enumerate the actions on offer for a turn prompt.

    This is the menu a controller (or a player's client) picks from. The
    Fight remains the authority for outcomes and does not require that an
    action came from this list.
    """

    include_maneuvers: bool = True

    def list_actions(self, prompt: TurnPrompt) -> list[Action]:
        if prompt.state not in (TurnState.DM_DECISION, TurnState.AWAITING_PLAYER):
            return []

        actions: list[Action] = [Attack(target=t) for t in prompt.targets]

        if self.include_maneuvers:
            for t in prompt.targets:
                actions.extend(Maneuver(target=t, maneuver=m) for m in SpecialManeuver)

        actions.append(OtherAction())

        # Only a player has a decision to hand back.
        if prompt.state is TurnState.AWAITING_PLAYER:
            actions.append(RelinquishControl())

        return actions
