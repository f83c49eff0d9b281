"""
Tests for the built-in controllers and the action menu.
"""

from rpgcore.models import DM, Attack, EnemyId, Maneuver, OtherAction, RelinquishControl, SpecialManeuver
from rpgcore.state import Fight, TurnPrompt, TurnState
from rpgcore.systems.actions.registry import ActionRegistry
from rpgcore.systems.ai.policies import (
    FirstTargetController,
    RelinquishingController,
    WeakestTargetController,
)


def goblins(n):
    return [EnemyId.auto_name("cave", "goblin", i, "Goblin") for i in range(n)]


class TestFirstTarget:
    def test_prefers_the_other_side(self, store, alice, hero):
        ally, = goblins(1)
        fight = Fight(combatants=[(DM, ally), (alice, hero)])
        other = EnemyId.auto_name("cave", "orc", 0, "Orc")
        prompt = TurnPrompt(TurnState.DM_DECISION, actor=other, owner=DM, targets=(ally, hero))
        assert FirstTargetController().choose_action(fight, prompt, store) == Attack(hero)

    def test_falls_back_to_anyone(self, store):
        a, b = goblins(2)
        fight = Fight(combatants=[(DM, a), (DM, b)])
        prompt = TurnPrompt(TurnState.DM_DECISION, actor=a, owner=DM, targets=(b,))
        assert FirstTargetController().choose_action(fight, prompt, store) == Attack(b)

    def test_nobody_to_fight(self, store):
        a, = goblins(1)
        prompt = TurnPrompt(TurnState.DM_DECISION, actor=a, owner=DM)
        action = FirstTargetController().choose_action(Fight(combatants=[(DM, a)]), prompt, store)
        assert isinstance(action, OtherAction)


class TestWeakestTarget:
    def test_lowest_hp(self, store, make_stats, alice, hero):
        a, b, c = goblins(3)
        store.put(a, make_stats(hp=6))
        store.put(b, make_stats(hp=2))
        store.put(c, make_stats(hp=4))
        fight = Fight(combatants=[(alice, hero), (DM, a), (DM, b), (DM, c)])
        prompt = TurnPrompt(TurnState.AWAITING_PLAYER, actor=hero, owner=alice, targets=(a, b, c))
        assert WeakestTargetController().choose_action(fight, prompt, store) == Attack(b)

    def test_ties_are_rolled_for(self, store, make_stats, make_dice, alice, hero):
        a, b, c = goblins(3)
        for g in (a, b, c):
            store.put(g, make_stats(hp=3))
        fight = Fight(combatants=[(alice, hero), (DM, a), (DM, b), (DM, c)])
        prompt = TurnPrompt(TurnState.AWAITING_PLAYER, actor=hero, owner=alice, targets=(a, b, c))
        assert WeakestTargetController(make_dice(3)).choose_action(fight, prompt, store) == Attack(c)


class TestRelinquishing:
    def test_always_relinquishes(self, store, alice, hero):
        prompt = TurnPrompt(TurnState.AWAITING_PLAYER, actor=hero, owner=alice)
        action = RelinquishingController().choose_action(Fight(), prompt, store)
        assert action == RelinquishControl()


class TestActionRegistry:
    def test_dm_menu(self, hero):
        a, = goblins(1)
        prompt = TurnPrompt(TurnState.DM_DECISION, actor=a, owner=DM, targets=(hero,))
        actions = ActionRegistry().list_actions(prompt)

        assert actions[0] == Attack(hero)
        assert sum(isinstance(x, Maneuver) for x in actions) == len(SpecialManeuver)
        assert actions[-1] == OtherAction()
        assert RelinquishControl() not in actions

    def test_player_menu_can_hand_back(self, alice, hero):
        targets = tuple(goblins(2))
        prompt = TurnPrompt(TurnState.AWAITING_PLAYER, actor=hero, owner=alice, targets=targets)
        actions = ActionRegistry(include_maneuvers=False).list_actions(prompt)
        assert actions == [Attack(targets[0]), Attack(targets[1]), OtherAction(), RelinquishControl()]

    def test_nothing_outside_a_decision(self):
        for state in (TurnState.IDLE, TurnState.SKIPPED, TurnState.ROUND_OVER):
            assert ActionRegistry().list_actions(TurnPrompt(state)) == []
