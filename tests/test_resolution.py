"""
Tests for CombatRules: initiative ordering, attack throws and damage.
"""

import pytest

from rpgcore.config import RulesConfig
from rpgcore.models import DM, AttackType, DamageRoll, EnemyId, Owner, SavingThrows, SavingThrowType
from rpgcore.systems.combat.resolution import AttackResult, CombatRules


@pytest.fixture
def rules(dice):
    return CombatRules(dice)


class TestAttackRoll:
    def test_natural_20_explodes_into_a_critical(self, rules, rng, make_stats):
        """d20 shows 20, the extra die shows 5: 25 + 10 - 0 = 35."""
        rng.push(20, 5)
        roll = rules.attack_roll(make_stats(attack_throw=10), make_stats(armor_class=0))
        assert roll.natural == 25
        assert roll.total == 35
        assert roll.result is AttackResult.CRITICAL_SUCCESS

    def test_natural_1_always_fails(self, rules, rng, make_stats):
        rng.push(1)
        roll = rules.attack_roll(make_stats(attack_throw=100), make_stats(armor_class=0), modifier=50)
        assert roll.result is AttackResult.CRITICAL_FAIL
        assert not roll.result.hit

    @pytest.mark.parametrize(
        "natural, armor_class, expected",
        [
            (9, 0, AttackResult.FAIL),
            (10, 0, AttackResult.SUCCESS),
            (19, 0, AttackResult.SUCCESS),
            (19, -1, AttackResult.CRITICAL_SUCCESS),
            (15, 6, AttackResult.FAIL),
        ],
    )
    def test_thresholds(self, rules, rng, make_stats, natural, armor_class, expected):
        rng.push(natural)
        roll = rules.attack_roll(make_stats(attack_throw=10), make_stats(armor_class=armor_class))
        assert roll.result is expected

    def test_modifiers_count(self, rules, rng, make_stats):
        attacker = make_stats(attack_throw=10)
        attacker.modifiers.melee_attack.add("strength", 2)
        target = make_stats(armor_class=4)
        target.modifiers.armor_class.add("dexterity", 1)

        rng.push(12)
        roll = rules.attack_roll(attacker, target, modifier=1)
        # 12 + (10 + 2) - (4 + 1) + 1
        assert roll.total == 20
        assert roll.result is AttackResult.SUCCESS

    def test_missile_uses_missile_modifier(self, rules, rng, make_stats):
        archer = make_stats(attack_throw=10, slots=[DamageRoll(1, 6, attack_type=AttackType.MISSILE)])
        archer.modifiers.melee_attack.add("strength", -3)
        archer.modifiers.missile_attack.add("dexterity", 3)
        rng.push(10)
        assert rules.attack_roll(archer, make_stats()).total == 23

    def test_missing_combatants_fall_back(self, rules, rng):
        rng.push(10)
        roll = rules.attack_roll(None, None)
        assert roll.attack_throw == 10
        assert roll.armor_class == 0
        assert roll.result is AttackResult.SUCCESS

    def test_explosion_cap_comes_from_config(self, rng, dice, make_stats):
        rules = CombatRules(dice, RulesConfig(max_explosions=1))
        rng.push(20, 20)
        roll = rules.attack_roll(make_stats(), make_stats())
        assert roll.natural == 40
        assert rng.values == []


class TestDamageRoll:
    def test_slot_plus_modifier(self, rules, rng, make_stats):
        attacker = make_stats(slots=[DamageRoll(1, 8, 1)])
        attacker.modifiers.melee_damage.add("strength", 2)
        rng.push(5)
        assert rules.damage_roll(attacker, critical=False) == 8

    def test_critical_doubles_the_roll_not_the_bonus(self, rules, rng, make_stats):
        attacker = make_stats(slots=[DamageRoll(1, 8, 1)])
        attacker.modifiers.melee_damage.add("strength", 2)
        rng.push(5)
        assert rules.damage_roll(attacker, critical=True) == 14

    def test_at_least_one(self, rules, rng, make_stats):
        attacker = make_stats(slots=[DamageRoll(1, 4)])
        attacker.modifiers.melee_damage.add("strength", -3)
        rng.push(1)
        assert rules.damage_roll(attacker, critical=False) == 1

    def test_uses_the_current_slot(self, rules, rng, make_stats):
        attacker = make_stats(slots=[DamageRoll(1, 4), DamageRoll(2, 6)])
        attacker.attack_index = 1
        rng.push(3, 4)
        assert rules.damage_roll(attacker, critical=False) == 7
        assert rng.calls == [(1, 6), (1, 6)]

    def test_missing_attacker_does_minimum_damage(self, rules):
        assert rules.damage_roll(None, critical=True) == 1


class TestInitiative:
    def test_highest_goes_first(self, rules, rng, store, make_stats, hero, goblin, alice):
        store.put(hero, make_stats())
        store.put(goblin, make_stats())
        rng.push(2, 5)
        order, events = rules.roll_initiative([(DM, goblin), (alice, hero)], store)
        assert order == [(alice, hero), (DM, goblin)]
        assert [e.data["total"] for e in events] == [2, 5]

    def test_initiative_modifier(self, rules, rng, store, make_stats, hero, goblin, alice):
        quick = make_stats()
        quick.modifiers.initiative.add("dexterity", 2)
        store.put(hero, quick)
        store.put(goblin, make_stats())
        rng.push(4, 3)
        order, _ = rules.roll_initiative([(DM, goblin), (alice, hero)], store)
        assert order[0] == (alice, hero)

    def test_players_win_ties_against_the_dm(self, rules, rng, store, make_stats, hero, goblin, alice):
        store.put(hero, make_stats())
        store.put(goblin, make_stats())
        for combatants in ([(DM, goblin), (alice, hero)], [(alice, hero), (DM, goblin)]):
            rng.push(3, 3)
            order, _ = rules.roll_initiative(combatants, store)
            assert order == [(alice, hero), (DM, goblin)]

    def test_same_side_ties_put_the_later_listed_first(self, rules, rng, store, make_stats, goblin):
        second = EnemyId.auto_name("cave", "goblin", 1, "Goblin")
        store.put(goblin, make_stats())
        store.put(second, make_stats())
        rng.push(4, 4)
        order, _ = rules.roll_initiative([(DM, goblin), (DM, second)], store)
        assert order == [(DM, second), (DM, goblin)]

    def test_missing_stats_roll_flat(self, rules, rng, store, hero):
        rng.push(4)
        order, events = rules.roll_initiative([(Owner.of_player("bob"), hero)], store)
        assert events[0].data == {"roll": 4, "bonus": 0, "total": 4}


class TestFlavor:
    def test_lines_are_picked_by_d6(self, rules, rng, hero, goblin):
        rng.push(1, 3)
        assert rules.critical_fail_line(hero, goblin) == "Hero failed miserably when attacking Goblin!"
        assert rules.critical_hit_line(hero, goblin, 12) == "Hero expertly struck Goblin for 12 damage!"


class TestSavingThrow:
    def test_target_twenty(self, rules, rng, make_stats):
        stats = make_stats()
        stats.saving_throws = SavingThrows(spells=3)
        stats.modifiers.save_spells.add("wisdom", 1)
        rng.push(16, 15)
        assert rules.saving_throw(stats, SavingThrowType.SPELLS) is True
        assert rules.saving_throw(stats, SavingThrowType.SPELLS) is False

    def test_natural_20_always_saves(self, dice, rng, make_stats):
        rules = CombatRules(dice, RulesConfig(saving_throw_target=99))
        rng.push(20)
        assert rules.saving_throw(make_stats(), SavingThrowType.POISON_DEATH) is True
