"""
Tests for the Encounter builder and the in-memory stats store.
"""

import pytest

from rpgcore import Encounter
from rpgcore.models import DM, Owner


class TestEncounter:
    def test_build(self, make_stats, alice, hero, goblin):
        fight = Encounter().add(alice, hero).add(DM, goblin, make_stats()).build()
        assert fight.combatants == [(alice, hero), (DM, goblin)]
        assert fight.ongoing_round is False

    def test_duplicates_rejected(self, alice, hero):
        enc = Encounter().add(alice, hero)
        with pytest.raises(ValueError):
            enc.add(DM, hero)

    def test_set_owner(self, alice, hero):
        enc = Encounter().add(alice, hero).set_owner(hero, DM)
        assert enc.entries == [(DM, hero)]

    def test_set_owner_unknown(self, hero):
        with pytest.raises(KeyError):
            Encounter().set_owner(hero, Owner.of_player("bob"))

    def test_empty_encounter(self):
        with pytest.raises(ValueError):
            Encounter().build()

    def test_max_rounds(self):
        assert Encounter().set_max_rounds(3).max_rounds == 3
        with pytest.raises(ValueError):
            Encounter().set_max_rounds(0)

    def test_populate_only_given_stats(self, store, make_stats, alice, hero, goblin):
        Encounter().add(alice, hero).add(DM, goblin, make_stats(hp=4)).populate(store)
        assert hero not in store
        assert store.lookup(goblin).health.max_hp == 4


class TestStore:
    def test_put_lookup_remove(self, store, make_stats, hero):
        stats = make_stats()
        assert store.lookup(hero) is None
        store.put(hero, stats)
        assert store.lookup(hero) is stats
        assert len(store) == 1
        assert store.remove(hero) is stats
        assert hero not in store

    def test_replace(self, store, make_stats, hero):
        store.put(hero, make_stats(hp=1))
        store.put(hero, make_stats(hp=9))
        assert store.lookup(hero).health.max_hp == 9
        assert len(store) == 1
