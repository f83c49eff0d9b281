# rpgcore/models/actions.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .identity import CombatantIdentity


class SpecialManeuver(Enum):
    DISARM = "Disarm"
    FORCE_BACK = "Force Back"
    INCAPACITATE = "Incapacitate"
    KNOCK_DOWN = "Knock Down"
    SUNDER = "Sunder"
    WRESTLE = "Wrestle"


@dataclass(frozen=True)
class Attack:
    """
    Attack a target with the actor's current routine slot.
    modifier is a situational bonus/penalty chosen by the DM (cover, charging, ...).
    """

    target: CombatantIdentity
    modifier: int = 0


@dataclass(frozen=True)
class RelinquishControl:
    """Hand the pending decision back to the DM."""


@dataclass(frozen=True)
class Maneuver:
    target: CombatantIdentity
    maneuver: SpecialManeuver


@dataclass(frozen=True)
class OtherAction:
    description: str = "performs a simple action"


# A declared intent from the DM or a player. It contains NO outcomes: the
# Fight is the source of truth for rolls, hits and state changes.
Action = Union[Attack, RelinquishControl, Maneuver, OtherAction]
