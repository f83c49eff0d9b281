"""
Shared fixtures for the rpgcore test suite.

Dice are driven by ScriptedRandom so every roll in a test is spelled out;
running out of scripted values fails the test instead of rolling randomly.
"""

from typing import Callable, Iterable

import pytest

from rpgcore.dice import Dice
from rpgcore.models import (
    DM,
    AttackRoutine,
    CombatantStats,
    DamageRoll,
    EnemyId,
    Health,
    Owner,
    PlayerCharacterId,
)
from rpgcore.store import InMemoryStatsStore
from rpgcore.systems.combat.notifiers import RecordingNotifier


class ScriptedRandom:
    """Stands in for random.Random: randint() returns pre-arranged values, in order."""

    def __init__(self, values: Iterable[int] = ()):
        self.values = list(values)
        self.calls = []

    def push(self, *values: int) -> None:
        self.values.extend(values)

    def randint(self, a: int, b: int) -> int:
        if not self.values:
            raise AssertionError(f"ran out of scripted rolls (asked for {a}..{b})")
        value = self.values.pop(0)
        assert a <= value <= b, f"scripted roll {value} outside {a}..{b}"
        self.calls.append((a, b))
        return value


@pytest.fixture
def rng():
    """An empty script; push() rolls onto it."""
    return ScriptedRandom()


@pytest.fixture
def dice(rng):
    """Dice reading from the rng fixture."""
    return Dice(rng=rng)


@pytest.fixture
def make_dice() -> Callable[..., Dice]:
    """Build Dice from a fixed list of rolls."""
    def _make(*values: int) -> Dice:
        return Dice(rng=ScriptedRandom(values))
    return _make


@pytest.fixture
def store():
    return InMemoryStatsStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def alice():
    return Owner.of_player("alice")


@pytest.fixture
def hero():
    return PlayerCharacterId(user="alice", name="Hero")


@pytest.fixture
def goblin():
    return EnemyId.auto_name("cave", "goblin", 0, "Goblin")


@pytest.fixture
def make_stats() -> Callable[..., CombatantStats]:
    """Plain combatant stats: attack throw 10, AC 0, a single 1d6 melee attack."""
    def _make(hp: int = 10, attack_throw: int = 10, armor_class: int = 0, slots=None) -> CombatantStats:
        routine = AttackRoutine(tuple(slots)) if slots else AttackRoutine.of(DamageRoll(1, 6))
        return CombatantStats(
            health=Health(max_hp=hp, current_hp=hp),
            attack_throw=attack_throw,
            armor_class=armor_class,
            attack_routine=routine,
        )
    return _make


@pytest.fixture
def duel(store, make_stats, alice, hero, goblin):
    """Hero (alice) and Goblin (DM) in the store; returns the Fight's combatant list."""
    store.put(hero, make_stats(hp=10))
    store.put(goblin, make_stats(hp=5))
    return [(DM, goblin), (alice, hero)]
