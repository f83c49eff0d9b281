from __future__ import annotations

from .core import Attr, Attributes, Health, SavingThrows, SavingThrowType, ability_mod
from .actions import Action, Attack, Maneuver, OtherAction, RelinquishControl, SpecialManeuver
from .actors import AttackRoutine, AttackType, CombatantStats, DamageRoll, StatusEffect, StatusEffects
from .events import Event, EventType
from .identity import DM, CombatantIdentity, EnemyId, Owner, PlayerCharacterId

__all__ = [
    "Attr",
    "Attributes",
    "Health",
    "SavingThrows",
    "SavingThrowType",
    "ability_mod",
    "Action",
    "Attack",
    "Maneuver",
    "OtherAction",
    "RelinquishControl",
    "SpecialManeuver",
    "AttackRoutine",
    "AttackType",
    "CombatantStats",
    "DamageRoll",
    "StatusEffect",
    "StatusEffects",
    "Event",
    "EventType",
    "DM",
    "CombatantIdentity",
    "EnemyId",
    "Owner",
    "PlayerCharacterId",
]
