# rpgcore/records.py
"""
Plain-record conversion for the state a host has to persist: Fight and
CombatantStats. Records are dicts of str/int/bool/None/list/dict only,
so they can go through json (or anything else) unchanged. Loading a record
and dumping it again gives back the same record.
"""
from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List, Mapping, Optional

from .modifiers import StatModifier, StatModifiers
from .models import (
    Attr,
    Attributes,
    AttackRoutine,
    AttackType,
    CombatantIdentity,
    CombatantStats,
    DamageRoll,
    EnemyId,
    Health,
    Owner,
    PlayerCharacterId,
    SavingThrows,
    StatusEffect,
    StatusEffects,
)
from .state import Fight

Record = Dict[str, Any]

_SAVE_FIELDS = tuple(f.name for f in fields(SavingThrows))
_MODIFIER_FIELDS = tuple(f.name for f in fields(StatModifiers))


class RecordError(ValueError):
    """A record is missing fields or holds values of the wrong shape."""


# --- Identity / owner ---------------------------------------------------


def owner_to_record(owner: Optional[Owner]) -> Optional[Record]:
    if owner is None:
        return None
    return {"player": owner.player}


def owner_from_record(rec: Optional[Mapping[str, Any]]) -> Optional[Owner]:
    if rec is None:
        return None
    return Owner(player=rec["player"])


def identity_to_record(ident: CombatantIdentity) -> Record:
    if isinstance(ident, EnemyId):
        return {
            "kind": "enemy",
            "room": ident.room,
            "type_id": ident.type_id,
            "index": ident.index,
            "display_name": ident.display_name,
        }
    if isinstance(ident, PlayerCharacterId):
        return {"kind": "player", "user": ident.user, "name": ident.name}
    raise RecordError(f"Unknown combatant identity: {ident!r}")


def identity_from_record(rec: Mapping[str, Any]) -> CombatantIdentity:
    kind = rec["kind"]
    if kind == "enemy":
        return EnemyId(
            room=rec["room"],
            type_id=rec["type_id"],
            index=int(rec["index"]),
            display_name=rec["display_name"],
        )
    if kind == "player":
        return PlayerCharacterId(user=rec["user"], name=rec["name"])
    raise RecordError(f"Unknown identity kind: {kind!r}")


# --- Fight --------------------------------------------------------------


def fight_to_record(fight: Fight) -> Record:
    return {
        "combatants": [
            {"owner": owner_to_record(owner), "identity": identity_to_record(ident)}
            for owner, ident in fight.combatants
        ],
        "current_turn": fight.current_turn,
        "ongoing_round": fight.ongoing_round,
        "awaiting_response": owner_to_record(fight.awaiting_response),
    }


def fight_from_record(rec: Mapping[str, Any]) -> Fight:
    try:
        combatants = [
            (owner_from_record(entry["owner"]), identity_from_record(entry["identity"]))
            for entry in rec["combatants"]
        ]
        if any(owner is None for owner, _ in combatants):
            raise RecordError("every combatant needs an owner")
        return Fight(
            combatants=combatants,
            current_turn=int(rec["current_turn"]),
            ongoing_round=bool(rec["ongoing_round"]),
            awaiting_response=owner_from_record(rec["awaiting_response"]),
        )
    except RecordError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise RecordError(f"Bad fight record: {e}") from e


# --- CombatantStats -----------------------------------------------------


def _damage_to_record(roll: DamageRoll) -> Record:
    return {
        "amount": roll.amount,
        "sides": roll.sides,
        "modifier": roll.modifier,
        "attack_type": roll.attack_type.value,
    }


def _damage_from_record(rec: Mapping[str, Any]) -> DamageRoll:
    return DamageRoll(
        amount=int(rec["amount"]),
        sides=int(rec["sides"]),
        modifier=int(rec["modifier"]),
        attack_type=AttackType(rec["attack_type"]),
    )


def _modifiers_to_record(mods: StatModifiers) -> Record:
    return {name: dict(getattr(mods, name).view_all()) for name in _MODIFIER_FIELDS}


def _modifiers_from_record(rec: Mapping[str, Any]) -> StatModifiers:
    return StatModifiers(**{name: StatModifier.from_entries(rec[name]) for name in _MODIFIER_FIELDS})


def stats_to_record(stats: CombatantStats) -> Record:
    return {
        "attributes": {attr.value: stats.attributes.score(attr) for attr in Attr},
        "health": {"max_hp": stats.health.max_hp, "current_hp": stats.health.current_hp},
        "attack_throw": stats.attack_throw,
        "armor_class": stats.armor_class,
        "attack_routine": [_damage_to_record(s) for s in stats.attack_routine.slots],
        "attack_index": stats.attack_index,
        "saving_throws": {name: getattr(stats.saving_throws, name) for name in _SAVE_FIELDS},
        "status_effects": sorted(e.value for e in stats.status_effects.effects),
        "modifiers": _modifiers_to_record(stats.modifiers),
    }


def stats_from_record(rec: Mapping[str, Any]) -> CombatantStats:
    try:
        effects: List[StatusEffect] = [StatusEffect(v) for v in rec["status_effects"]]
        return CombatantStats(
            attributes=Attributes(**{attr.value: int(rec["attributes"][attr.value]) for attr in Attr}),
            health=Health(max_hp=int(rec["health"]["max_hp"]), current_hp=int(rec["health"]["current_hp"])),
            attack_throw=int(rec["attack_throw"]),
            armor_class=int(rec["armor_class"]),
            attack_routine=AttackRoutine(tuple(_damage_from_record(s) for s in rec["attack_routine"])),
            attack_index=int(rec["attack_index"]),
            saving_throws=SavingThrows(**{name: int(rec["saving_throws"][name]) for name in _SAVE_FIELDS}),
            status_effects=StatusEffects(set(effects)),
            modifiers=_modifiers_from_record(rec["modifiers"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RecordError(f"Bad combatant stats record: {e}") from e
