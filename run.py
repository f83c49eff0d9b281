# run.py
from __future__ import annotations

import argparse
import logging

from rpgcore.character import CharacterClass, new_character_stats
from rpgcore.dice import Dice, DiceSpec
from rpgcore.encounter import Encounter
from rpgcore.enemy import EnemyHitDice, EnemyType, spawn_enemy_stats
from rpgcore.models import DM, Action, Attr, Attributes, AttackRoutine, DamageRoll, EnemyId, Owner, PlayerCharacterId
from rpgcore.progression import AttackProgression, HitDie, SaveProgression
from rpgcore.session import CombatSession
from rpgcore.state import Fight, TurnPrompt
from rpgcore.store import InMemoryStatsStore
from rpgcore.systems.actions.registry import ActionRegistry
from rpgcore.systems.ai.policies import FirstTargetController, PromptController, WeakestTargetController
from rpgcore.systems.combat.interface import StatsProvider
from rpgcore.systems.combat.notifiers import LoggingNotifier

FIGHTER = CharacterClass(
    name="Fighter",
    prime_reqs=(Attr.STR,),
    hit_die=HitDie.D8,
    base_xp_cost=2000,
    save_progression=SaveProgression.FIGHTER,
    attack_progression=AttackProgression.TWO_PER_THREE,
)

GOBLIN = EnemyType(
    name="Goblin",
    hit_dice=EnemyHitDice.custom(DiceSpec.simple_modifier(1, 8, -1)),
    base_armor_class=6,
    base_attack_throw=10,
    base_damage=AttackRoutine.of(DamageRoll(1, 6)),
    xp=5,
)

registry = ActionRegistry(include_maneuvers=False)


def prompt_cli(fight: Fight, prompt: TurnPrompt, provider: StatsProvider) -> Action:
    stats = provider.lookup(prompt.actor)
    if stats is not None:
        print(f"\n{prompt.actor} HP {stats.health.current_hp}/{stats.health.max_hp} | attacks {stats.attack_routine.display()}", flush=True)

    legal = registry.list_actions(prompt)
    for i, a in enumerate(legal):
        print(f"{i}) {type(a).__name__} {getattr(a, 'target', '')}".rstrip(), flush=True)

    while True:
        choice = input("Choose action # > ").strip()
        if choice.isdigit():
            idx = int(choice)
            if 0 <= idx < len(legal):
                return legal[idx]
        print("Invalid choice.", flush=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a small fight at the table.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for deterministic rolls")
    parser.add_argument("--goblins", type=int, default=2, help="How many goblins show up")
    parser.add_argument("--rounds", type=int, default=20, help="Give up after this many rounds")
    parser.add_argument("--auto", action="store_true", help="Let the computer play the hero too")
    parser.add_argument("--verbose", action="store_true", help="Debug logging (every roll)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s" if not args.verbose else "%(levelname)s %(name)s: %(message)s",
    )

    dice = Dice(seed=args.seed) if args.seed is not None else Dice()
    store = InMemoryStatsStore()
    encounter = Encounter(max_rounds=args.rounds)

    hero = PlayerCharacterId(user="player1", name="Hero")
    encounter.add(Owner.of_player("player1"), hero, new_character_stats(FIGHTER, Attributes(strength=16, dexterity=13, constitution=14), 3, dice))

    for i in range(args.goblins):
        gob = EnemyId.auto_name("cave", "goblin", i, GOBLIN.name)
        encounter.add(DM, gob, spawn_enemy_stats(GOBLIN, dice))

    encounter.populate(store)
    fight = encounter.build()

    player = FirstTargetController() if args.auto else PromptController(prompt=prompt_cli)
    session = CombatSession(
        dice=dice,
        dm_controller=WeakestTargetController(dice=dice),
        player_controllers={"player1": player},
    )
    session.run(fight, store, LoggingNotifier(), max_rounds=encounter.max_rounds)


if __name__ == "__main__":
    main()
