# rpgcore/character.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .dice import DEFAULT_DICE, Dice, DiceSpec
from .models import Attr, Attributes, AttackRoutine, CombatantStats, DamageRoll, Health
from .proficiency import Proficiencies
from .progression import (
    AttackProgression,
    HitDie,
    SaveProgression,
    attack_throw_bonus,
    next_level_xp_cost,
    saving_throws_simple,
)


@dataclass(frozen=True)
class CharacterClass:
    name: str
    description: str = ""
    prime_reqs: Tuple[Attr, ...] = ()
    hit_die: HitDie = HitDie.D4
    base_xp_cost: int = 2000
    save_progression: SaveProgression = SaveProgression.FIGHTER
    attack_progression: AttackProgression = AttackProgression.ONE_PER_THREE

    def next_level_cost(self, current_level: int) -> int:
        return next_level_xp_cost(self.base_xp_cost, current_level, self.save_progression)


_SIMPLE = DiceSpec.simple(3, 6)
_HEROIC = DiceSpec.simple_drop_lowest(4, 6)
_FEEBLE = DiceSpec.simple_drop_highest(4, 6)


class Race(Enum):
    HUMAN = "Human"
    DWARF = "Dwarf"
    ELF = "Elf"

    @classmethod
    def random(cls, dice: Dice = DEFAULT_DICE) -> "Race":
        r = dice.roll_die(100)
        if r <= 80:
            return cls.HUMAN
        if r <= 90:
            return cls.DWARF
        return cls.ELF

    def roll_attributes(self, dice: Dice = DEFAULT_DICE) -> Attributes:
        """3d6 in order; dwarves and elves roll 4d6 keeping the best or worst three for two scores."""
        special = {
            Race.HUMAN: {},
            Race.DWARF: {Attr.CON: _HEROIC, Attr.CHA: _FEEBLE},
            Race.ELF: {Attr.CON: _FEEBLE, Attr.INT: _HEROIC},
        }[self]
        scores = {attr.value: dice.evaluate(special.get(attr, _SIMPLE)) for attr in Attr}
        return Attributes(**scores)


def roll_hit_points(hit_die: HitDie, con_mod: int, level: int, dice: Dice = DEFAULT_DICE) -> int:
    """One hit die per level (at least one), each die + CON and never below 1."""
    spec = DiceSpec.simple_modifier(1, hit_die.sides, con_mod)
    return sum(dice.evaluate(spec) for _ in range(max(level, 1)))


def apply_attribute_modifiers(stats: CombatantStats) -> None:
    """Key each attribute's modifier into the stats it affects. Re-applying replaces the old entries."""
    attrs = stats.attributes
    mods = stats.modifiers
    str_mod = attrs.modifier(Attr.STR)
    dex_mod = attrs.modifier(Attr.DEX)
    wis_mod = attrs.modifier(Attr.WIS)

    mods.melee_attack.add("strength", str_mod)
    mods.melee_damage.add("strength", str_mod)
    mods.missile_attack.add("dexterity", dex_mod)
    mods.armor_class.add("dexterity", dex_mod)
    mods.initiative.add("dexterity", dex_mod)
    mods.add_all_saves("wisdom", wis_mod)


def new_character_stats(
    cls: CharacterClass,
    attributes: Attributes,
    level: int = 1,
    dice: Dice = DEFAULT_DICE,
) -> CombatantStats:
    if level < 0:
        raise ValueError(f"level must be >= 0, got {level}")

    hp = roll_hit_points(cls.hit_die, attributes.modifier(Attr.CON), level, dice)
    stats = CombatantStats(
        attributes=attributes,
        health=Health(max_hp=hp, current_hp=hp),
        attack_throw=attack_throw_bonus(cls.attack_progression, level),
        attack_routine=AttackRoutine.of(DamageRoll(1, 6)),
        saving_throws=saving_throws_simple(cls.save_progression, level),
    )
    apply_attribute_modifiers(stats)

    if cls.prime_reqs:
        xp_mod = min(attributes.modifier(a) for a in cls.prime_reqs)
    else:
        xp_mod = 0
    stats.modifiers.xp_gain.add("prime_reqs", xp_mod * 5)
    return stats


@dataclass
class PlayerCharacter:
    """A character sheet: combat stats plus the bookkeeping around them."""

    name: str
    race: Race
    char_class: CharacterClass
    stats: CombatantStats
    level: int = 1
    xp: int = 0
    proficiencies: Proficiencies = field(default_factory=Proficiencies)
    notes: str = ""

    @classmethod
    def create(
        cls,
        name: str,
        char_class: CharacterClass,
        race: Optional[Race] = None,
        dice: Dice = DEFAULT_DICE,
    ) -> "PlayerCharacter":
        race = race if race is not None else Race.random(dice)
        attributes = race.roll_attributes(dice)
        return cls(
            name=name,
            race=race,
            char_class=char_class,
            stats=new_character_stats(char_class, attributes, 1, dice),
        )

    @property
    def xp_to_level(self) -> int:
        return self.char_class.next_level_cost(self.level)

    def award_xp(self, amount: int) -> int:
        """Add XP scaled by the character's XP gain bonus. Returns what was actually gained."""
        if amount < 0:
            raise ValueError("amount must be >= 0")
        gained = amount * (100 + self.stats.modifiers.xp_gain.total) // 100
        self.xp += gained
        return gained

    def can_level_up(self) -> bool:
        return self.xp >= self.xp_to_level
