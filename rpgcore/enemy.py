# rpgcore/enemy.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional

from .dice import DEFAULT_DICE, Dice, DiceSpec
from .models import Attr, Attributes, AttackRoutine, CombatantStats, Health, SavingThrows

_SIMPLE = DiceSpec.simple(3, 6)


class EnemyCategory(Enum):
    ANIMAL = "Animal"
    BEASTMAN = "Beastman"
    CONSTRUCT = "Construct"
    ENCHANTED = "Enchanted Creature"
    FANTASTIC = "Fantastic Creature"
    GIANT_HUMANOID = "Giant Humanoid"
    HUMANOID = "Humanoid"
    OOZE = "Ooze"
    SUMMONED = "Summoned Creature"
    UNDEAD = "Undead"
    VERMIN = "Vermin"


class Alignment(Enum):
    LAWFUL = "Lawful"
    NEUTRAL = "Neutral"
    CHAOTIC = "Chaotic"


@dataclass(frozen=True)
class EnemyHitDice:
    """
    How many d8 an enemy rolls for HP.
      - standard(n): n d8
      - with_modifier(n, m): n d8 + m
      - special(spec): any DiceSpec; always floored at 1 HP
    """
    amount: int = 1
    modifier: int = 0
    special: Optional[DiceSpec] = None

    @classmethod
    def standard(cls, amount: int) -> "EnemyHitDice":
        return cls(amount=amount)

    @classmethod
    def with_modifier(cls, amount: int, modifier: int) -> "EnemyHitDice":
        return cls(amount=amount, modifier=modifier)

    @classmethod
    def custom(cls, spec: DiceSpec) -> "EnemyHitDice":
        return cls(amount=spec.amount, special=spec)

    def as_dice_spec(self) -> DiceSpec:
        if self.special is not None:
            return replace(self.special, min_value=1)
        return DiceSpec.simple_modifier(self.amount, 8, self.modifier)

    def display(self) -> str:
        if self.special is not None:
            return self.special.to_notation()
        if self.modifier:
            return f"{self.amount}{self.modifier:+d}"
        return str(self.amount)


@dataclass(frozen=True)
class EnemyType:
    name: str
    description: str = ""
    hit_dice: EnemyHitDice = field(default_factory=EnemyHitDice)
    base_armor_class: int = 0
    base_attack_throw: int = 10
    base_damage: AttackRoutine = field(default_factory=AttackRoutine)
    xp: int = 0
    morale: int = 0
    categories: FrozenSet[EnemyCategory] = frozenset()
    alignment: Alignment = Alignment.NEUTRAL
    saves: SavingThrows = field(default_factory=SavingThrows)


def spawn_enemy_stats(typ: EnemyType, dice: Dice = DEFAULT_DICE) -> CombatantStats:
    """Roll up one enemy of this type: random 3d6 attributes, HP from its hit dice."""
    attributes = Attributes(**{attr.value: dice.evaluate(_SIMPLE) for attr in Attr})
    hp = dice.evaluate(typ.hit_dice.as_dice_spec())
    return CombatantStats(
        attributes=attributes,
        health=Health(max_hp=hp, current_hp=hp),
        attack_throw=typ.base_attack_throw,
        armor_class=typ.base_armor_class,
        attack_routine=typ.base_damage,
        saving_throws=typ.saves,
    )
