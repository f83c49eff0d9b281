# rpgcore/__init__.py
from __future__ import annotations

from .core import GameTable
from .encounter import Encounter
from .state import Fight, FightError, TurnState

__all__ = ["GameTable", "Encounter", "Fight", "FightError", "TurnState"]
