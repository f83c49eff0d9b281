# rpgcore/models/events.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional

from .identity import CombatantIdentity

EventType = Literal[
    "round_start",
    "initiative",
    "turn_skipped",
    "attack_roll",
    "hit",
    "miss",
    "damage",
    "down",
    "action",
    "round_end",
]


@dataclass(frozen=True)
class Event:
    """
    Immutable record of a factual outcome produced by the engine.
    message is what gets announced to the table.
    """
    type: EventType
    actor: Optional[CombatantIdentity] = None
    target: Optional[CombatantIdentity] = None
    message: str = ""
    data: Mapping[str, object] = field(default_factory=dict)
