"""
Tests for CombatSession: playing whole rounds and fights with controllers.
"""

import logging

import pytest

from rpgcore.models import AttackRoutine, DamageRoll, OtherAction, StatusEffect
from rpgcore.session import CombatSession, standing_sides
from rpgcore.state import Fight
from rpgcore.systems.ai.policies import FirstTargetController, PromptController, RelinquishingController
from rpgcore.systems.combat.notifiers import LoggingNotifier


@pytest.fixture
def fight(duel):
    return Fight(combatants=list(duel))


def waiter():
    return PromptController(lambda fight, prompt, provider: OtherAction("waits"))


class TestStandingSides:
    def test_both_sides(self, fight, store):
        assert standing_sides(fight, store) == {True, False}

    def test_fallen_and_missing_do_not_count(self, fight, store, hero, goblin):
        store.lookup(goblin).status_effects.add(StatusEffect.DYING)
        assert standing_sides(fight, store) == {False}
        store.remove(hero)
        assert standing_sides(fight, store) == set()


class TestRun:
    def test_players_win(self, fight, store, notifier, dice, rng, goblin):
        session = CombatSession(dice=dice, player_controllers={"alice": FirstTargetController()})
        rng.push(1, 6)  # goblin, hero
        rng.push(15, 5)  # hit for 5

        log = session.run(fight, store, notifier)

        assert [e.type for e in log] == [
            "round_start",
            "initiative",
            "initiative",
            "attack_roll",
            "hit",
            "damage",
            "down",
            "turn_skipped",
            "round_end",
        ]
        assert store.lookup(goblin).status_effects.is_(StatusEffect.DYING)
        assert notifier.announcements[-1] == "Combat ends. The players win."
        assert rng.values == []

    def test_relinquished_turn_is_played_by_the_dm(self, fight, store, notifier, dice, rng, goblin):
        session = CombatSession(dice=dice, player_controllers={"alice": RelinquishingController()})
        rng.push(1, 6, 15, 5)

        log = session.run(fight, store, notifier)

        assert [e.type for e in log][3:5] == ["action", "attack_roll"]
        assert "alice hands control of Hero to the DM." in notifier.announcements
        assert log[4].actor != goblin
        assert notifier.announcements[-1] == "Combat ends. The players win."

    def test_dm_wins_without_a_round(self, fight, store, notifier, dice, hero):
        store.lookup(hero).status_effects.add(StatusEffect.DYING)
        assert CombatSession(dice=dice).run(fight, store, notifier) == []
        assert notifier.announcements == ["Combat ends. The DM's side wins."]

    def test_max_rounds(self, fight, store, notifier, dice, rng):
        session = CombatSession(dice=dice, dm_controller=waiter(), player_controllers={"alice": waiter()})
        rng.push(1, 6, 2, 3)

        log = session.run(fight, store, notifier, max_rounds=2)

        assert sum(1 for e in log if e.type == "round_end") == 2
        assert notifier.announcements[-1] == "Combat ends. No winner (max rounds or draw)."
        assert rng.values == []

    def test_outcome_is_announced_once(self, fight, store, dice, hero, caplog):
        store.lookup(hero).status_effects.add(StatusEffect.DYING)
        with caplog.at_level(logging.INFO):
            CombatSession(dice=dice).run(fight, store, LoggingNotifier())
        assert caplog.text.count("Combat ends. The DM's side wins.") == 1

    def test_events_reach_the_sink(self, fight, store, notifier, dice, rng):
        session = CombatSession(dice=dice, dm_controller=waiter(), player_controllers={"alice": waiter()})
        rng.push(1, 6)
        seen = []
        log = session.run(fight, store, notifier, max_rounds=1, on_event=seen.append)
        assert seen == log


class TestControllers:
    def test_player_without_controller_is_played_by_the_dm(self, fight, store, notifier, dice, rng, caplog):
        session = CombatSession(dice=dice, dm_controller=waiter())
        rng.push(1, 6)
        with caplog.at_level(logging.WARNING, logger="rpgcore.session"):
            session.play_round(fight, store, notifier)
        assert "Hero waits." in notifier.announcements
        assert "no controller for alice" in caplog.text

    def test_second_attack_goes_back_to_the_controller(self, fight, store, notifier, dice, rng, hero, goblin):
        store.lookup(goblin).health.current_hp = 20
        store.lookup(hero).attack_routine = AttackRoutine.of(DamageRoll(1, 6), DamageRoll(1, 6))
        chosen = []

        def pick(fight, prompt, provider):
            chosen.append(prompt.actor)
            return FirstTargetController().choose_action(fight, prompt, provider)

        session = CombatSession(dice=dice, dm_controller=waiter(), player_controllers={"alice": PromptController(pick)})
        rng.push(1, 6)
        rng.push(15, 2, 15, 3)

        session.play_round(fight, store, notifier)

        assert chosen == [hero, hero]
        assert store.lookup(goblin).health.current_hp == 15
