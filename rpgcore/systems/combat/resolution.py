# rpgcore/systems/combat/resolution.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ...config import DEFAULT_RULES, RulesConfig
from ...dice import Dice
from ...models import CombatantIdentity, CombatantStats, DamageRoll, Event, Owner, SavingThrowType
from .interface import StatsProvider

logger = logging.getLogger(__name__)

Entry = Tuple[Owner, CombatantIdentity]


class AttackResult(Enum):
    CRITICAL_FAIL = "Critical Fail"
    FAIL = "Fail"
    SUCCESS = "Success"
    CRITICAL_SUCCESS = "Critical Success"

    @property
    def hit(self) -> bool:
        return self in (AttackResult.SUCCESS, AttackResult.CRITICAL_SUCCESS)


@dataclass(frozen=True)
class AttackRoll:
    result: AttackResult
    natural: int
    attack_throw: int
    armor_class: int
    modifier: int = 0

    @property
    def total(self) -> int:
        return self.natural + self.attack_throw - self.armor_class + self.modifier


_CRITICAL_FAIL_LINES = (
    "{a} failed miserably when attacking {t}!",
    "{a} critically missed {t}!",
    "{a} utterly whiffed an attempt to hit {t}!",
    "{a} absolutely annihilated the air nearby to {t}.",
    "Whatever {a} tried to do to {t}, it didn't work very well.",
    "{a} lands a devastating warning blow toward {t}! It did absolutely nothing.",
)

_CRITICAL_HIT_LINES = (
    "{a} critically hit {t} for a whopping {d} damage!",
    "{a} absolutely devastated {t} for {d} damage!",
    "{a} expertly struck {t} for {d} damage!",
    "{a} showed {t} who's boss. It did {d} damage!",
    "{a} obliterated {t} for a staggering {d} damage!",
    "{a} asked nicely for {t} to go away. With force. It did {d} damage!",
)


@dataclass
class CombatRules:
    """
    Combat mechanics authority: initiative, attack throws and damage.

    Stats may be None (the combatant could not be found); every method then
    falls back to neutral values so the round can continue.
    """
    dice: Dice
    config: RulesConfig = field(default=DEFAULT_RULES)

    # --- Initiative -------------------------------------------------

    def roll_initiative(self, combatants: Sequence[Entry], provider: StatsProvider) -> Tuple[List[Entry], List[Event]]:
        events: List[Event] = []
        rolls: List[Tuple[int, Owner, CombatantIdentity]] = []

        for owner, ident in combatants:
            stats = provider.lookup(ident)
            bonus = stats.modifiers.initiative.total if stats is not None else 0
            die = self.dice.roll_die(self.config.initiative_die)
            total = die + bonus
            rolls.append((total, owner, ident))
            events.append(
                Event(
                    type="initiative",
                    actor=ident,
                    message=f"{ident} rolls initiative: 1d{self.config.initiative_die}{bonus:+d} = {total}",
                    data={"roll": die, "bonus": bonus, "total": total},
                )
            )

        # Ascending, DM before players on a tie; reversed so the highest acts
        # first and players act before the DM on a tie.
        rolls.sort(key=lambda r: (r[0], 0 if r[1].is_dm else 1))
        rolls.reverse()
        return [(owner, ident) for _, owner, ident in rolls], events

    # --- Attack throws ----------------------------------------------

    def exploding_d20(self) -> int:
        return self.dice.roll_exploding(20, self.config.max_explosions)

    def attack_roll(
        self,
        attacker: Optional[CombatantStats],
        target: Optional[CombatantStats],
        modifier: int = 0,
    ) -> AttackRoll:
        if attacker is not None:
            slot = attacker.current_damage() or DamageRoll()
            attack_throw = attacker.attack_throw + attacker.attack_modifier(slot.attack_type).total
        else:
            attack_throw = self.config.fallback_attack_throw

        armor_class = target.total_armor_class() if target is not None else self.config.fallback_armor_class

        natural = self.exploding_d20()
        if natural <= self.config.critical_fail_face:
            return AttackRoll(AttackResult.CRITICAL_FAIL, natural, attack_throw, armor_class, modifier)

        total = natural + attack_throw - armor_class + modifier
        if total >= self.config.attack_critical:
            result = AttackResult.CRITICAL_SUCCESS
        elif total >= self.config.attack_success:
            result = AttackResult.SUCCESS
        else:
            result = AttackResult.FAIL
        logger.debug("attack throw d20=%d %+d -AC %d %+d => %d (%s)", natural, attack_throw, armor_class, modifier, total, result.value)
        return AttackRoll(result, natural, attack_throw, armor_class, modifier)

    def damage_roll(self, attacker: Optional[CombatantStats], critical: bool) -> int:
        if attacker is None:
            return self.config.min_damage

        slot = attacker.current_damage() or DamageRoll()
        nat = self.dice.evaluate(slot.as_dice_spec())
        if critical:
            nat *= 2
        return max(self.config.min_damage, nat + attacker.damage_modifier(slot.attack_type).total)

    def saving_throw(self, stats: CombatantStats, save: SavingThrowType) -> bool:
        return stats.saving_throw(save, self.dice, self.config.saving_throw_target)

    # --- Flavor -----------------------------------------------------

    def critical_fail_line(self, attacker: CombatantIdentity, target: CombatantIdentity) -> str:
        line = _CRITICAL_FAIL_LINES[self.dice.d6() - 1]
        return line.format(a=attacker, t=target)

    def critical_hit_line(self, attacker: CombatantIdentity, target: CombatantIdentity, damage: int) -> str:
        line = _CRITICAL_HIT_LINES[self.dice.d6() - 1]
        return line.format(a=attacker, t=target, d=damage)
