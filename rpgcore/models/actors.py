# rpgcore/models/actors.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set, Tuple

from ..dice import Dice, DiceSpec
from ..modifiers import StatModifier, StatModifiers
from .core import Attributes, Health, SavingThrows, SavingThrowType


class StatusEffect(Enum):
    DEAD = "Dead"
    DYING = "Dying"
    SLEEPING = "Sleeping"
    PARALYZED = "Paralyzed"
    CONCENTRATING = "Concentrating"


_HELPLESS = frozenset({StatusEffect.SLEEPING, StatusEffect.PARALYZED})
_UNTARGETABLE = frozenset({StatusEffect.DEAD, StatusEffect.DYING})
_INCAPACITATED = _HELPLESS | _UNTARGETABLE


@dataclass
class StatusEffects:
    effects: Set[StatusEffect] = field(default_factory=set)

    def is_(self, effect: StatusEffect) -> bool:
        return effect in self.effects

    def add(self, effect: StatusEffect) -> None:
        self.effects.add(effect)

    def discard(self, effect: StatusEffect) -> None:
        self.effects.discard(effect)

    def is_helpless(self) -> bool:
        return not self.effects.isdisjoint(_HELPLESS)

    def is_untargetable(self) -> bool:
        return not self.effects.isdisjoint(_UNTARGETABLE)

    def is_incapacitated(self) -> bool:
        return not self.effects.isdisjoint(_INCAPACITATED)


class AttackType(Enum):
    MELEE = "Melee"
    MISSILE = "Missile"


@dataclass(frozen=True)
class DamageRoll:
    """
    The base damage of one attack. This is "content-ish" (stats), not rules
    resolution; the result is floored at 1 like any simple roll.
    """

    amount: int = 1
    sides: int = 2
    modifier: int = 0
    attack_type: AttackType = AttackType.MELEE

    def as_dice_spec(self) -> DiceSpec:
        return DiceSpec.simple_modifier(self.amount, self.sides, self.modifier)

    def to_notation(self) -> str:
        if self.modifier == 0:
            return f"{self.amount}d{self.sides}"
        return f"{self.amount}d{self.sides}{self.modifier:+d}"


@dataclass(frozen=True)
class AttackRoutine:
    """One to three damage rolls, used in order each round."""

    slots: Tuple[DamageRoll, ...] = (DamageRoll(),)

    def __post_init__(self) -> None:
        if not 1 <= len(self.slots) <= 3:
            raise ValueError(f"an attack routine has 1-3 attacks, got {len(self.slots)}")

    @classmethod
    def of(cls, *slots: DamageRoll) -> "AttackRoutine":
        return cls(tuple(slots))

    def slot(self, index: int) -> Optional[DamageRoll]:
        if 0 <= index < len(self.slots):
            return self.slots[index]
        return None

    def __len__(self) -> int:
        return len(self.slots)

    def display(self) -> str:
        return "/".join(s.to_notation() for s in self.slots)


@dataclass
class CombatantStats:
    """
    Everything something needs to engage in combat. These are *base* stats:
    armor_class is zero for most characters unless they have innate armor,
    and every bonus lives in `modifiers`, keyed by its source.
    """

    attributes: Attributes = field(default_factory=Attributes)
    health: Health = field(default_factory=Health)
    attack_throw: int = 0
    armor_class: int = 0
    attack_routine: AttackRoutine = field(default_factory=AttackRoutine)
    attack_index: int = 0
    saving_throws: SavingThrows = field(default_factory=SavingThrows)
    status_effects: StatusEffects = field(default_factory=StatusEffects)
    modifiers: StatModifiers = field(default_factory=StatModifiers)

    def current_damage(self) -> Optional[DamageRoll]:
        """The routine slot for the next attack, or None once the routine is used up."""
        return self.attack_routine.slot(self.attack_index)

    def attack_modifier(self, attack_type: AttackType) -> StatModifier:
        if attack_type is AttackType.MISSILE:
            return self.modifiers.missile_attack
        return self.modifiers.melee_attack

    def damage_modifier(self, attack_type: AttackType) -> StatModifier:
        if attack_type is AttackType.MISSILE:
            return self.modifiers.missile_damage
        return self.modifiers.melee_damage

    def total_armor_class(self) -> int:
        return self.armor_class + self.modifiers.armor_class.total

    def save_bonus(self, save: SavingThrowType) -> int:
        mod = {
            SavingThrowType.PETRIFICATION_PARALYSIS: self.modifiers.save_petrification_paralysis,
            SavingThrowType.POISON_DEATH: self.modifiers.save_poison_death,
            SavingThrowType.BLAST_BREATH: self.modifiers.save_blast_breath,
            SavingThrowType.STAFFS_WANDS: self.modifiers.save_staffs_wands,
            SavingThrowType.SPELLS: self.modifiers.save_spells,
        }[save]
        return self.saving_throws.get(save) + mod.total

    def saving_throw(self, save: SavingThrowType, dice: Dice, target: int = 20) -> bool:
        """Roll a save. A natural 20 always succeeds."""
        nat = dice.d20()
        return nat >= 20 or nat + self.save_bonus(save) >= target

    def hurt(self, damage: int) -> bool:
        """
        Apply damage; anything left at zero HP or below is Dying. Returns True
        only if this blow took the combatant from positive HP to zero or below.
        """
        before = self.health.current_hp
        self.health.current_hp -= damage
        if self.health.current_hp <= 0:
            self.status_effects.add(StatusEffect.DYING)
        return before > 0 and self.health.current_hp <= 0
