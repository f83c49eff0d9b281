# rpgcore/config.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RulesConfig:
    """
    Centralized rule constants. These are defaults; callers can override.
    """
    initiative_die: int = 6

    # attack throw totals (d20 + attack throw - AC + modifiers)
    attack_success: int = 20
    attack_critical: int = 30
    critical_fail_face: int = 1

    saving_throw_target: int = 20

    # an exploding d20 stops after this many extra dice
    max_explosions: int = 100

    # used when a combatant can't be found mid-fight (e.g. its player disconnected)
    fallback_attack_throw: int = 10
    fallback_armor_class: int = 0

    min_damage: int = 1

    def __post_init__(self) -> None:
        if self.initiative_die <= 0:
            raise ValueError("initiative_die must be > 0")
        if self.max_explosions < 0:
            raise ValueError("max_explosions must be >= 0")
        if self.attack_critical < self.attack_success:
            raise ValueError("attack_critical must be >= attack_success")


DEFAULT_RULES = RulesConfig()
