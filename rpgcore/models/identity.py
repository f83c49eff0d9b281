# rpgcore/models/identity.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Owner:
    """
    Who currently makes decisions for a combatant: the DM (player=None) or a
    named player. PCs are not always controlled by their player (charmed, etc).
    """

    player: Optional[str] = None

    @property
    def is_dm(self) -> bool:
        return self.player is None

    @classmethod
    def of_player(cls, name: str) -> "Owner":
        if not name:
            raise ValueError("player name must not be empty")
        return cls(player=name)

    def __str__(self) -> str:
        return "DM" if self.player is None else self.player


DM = Owner()


@dataclass(frozen=True, order=True)
class EnemyId:
    """
    One enemy instance.
      - type_id: enemy type registry id
      - index: which of several enemies of the same type in the room
      - display_name: cached so the type never has to be looked up for display
    """

    room: str
    type_id: str
    index: int
    display_name: str

    @classmethod
    def auto_name(cls, room: str, type_id: str, index: int, type_name: str) -> "EnemyId":
        name = type_name if index == 0 else f"{type_name} {index + 1}"
        return cls(room=room, type_id=type_id, index=index, display_name=name)

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True, order=True)
class PlayerCharacterId:
    user: str
    name: str

    def __str__(self) -> str:
        return self.name


# Lookup key only: the authoritative CombatantStats live in a store.
CombatantIdentity = Union[EnemyId, PlayerCharacterId]
