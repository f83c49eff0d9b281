"""
Tests for spell slot tables and caster tiers.
"""

import pytest

from rpgcore.spells import (
    ARCANE_SLOTS,
    DIVINE_SLOTS,
    SLOT_TABLES,
    TIER_DELAY_OFFSETS,
    TIER_DIVISORS,
    CasterTier,
    CasterValue,
    MagicType,
    effective_level,
    max_arcane_slots,
    max_divine_slots,
    max_spell_slots,
    repertoire_size,
)

T1 = CasterValue(CasterTier.TIER1)
T2 = CasterValue(CasterTier.TIER2)
T3 = CasterValue(CasterTier.TIER3)
T4 = CasterValue(CasterTier.TIER4)


class TestTables:
    def test_shapes(self):
        assert all(len(row) == 5 for row in DIVINE_SLOTS)
        assert all(len(row) == 6 for row in ARCANE_SLOTS)

    def test_every_tier_and_magic_type_has_an_entry(self):
        casting = set(CasterTier) - {CasterTier.NONE}
        assert set(TIER_DIVISORS) == casting
        assert set(TIER_DELAY_OFFSETS) == casting
        assert set(SLOT_TABLES) == set(MagicType)

    def test_non_caster_has_nothing(self):
        none = CasterValue()
        assert max_arcane_slots(none, 14) == (0, 0, 0, 0, 0, 0)
        assert max_divine_slots(none, 14) == (0, 0, 0, 0, 0)


class TestEffectiveLevel:
    def test_divisors(self):
        assert effective_level(T1, 9) == 3
        assert effective_level(T1, 8) == 2
        assert effective_level(T3, 7) == 7

    def test_half_rounds_up(self):
        assert effective_level(T2, 1) == 1
        assert effective_level(T2, 3) == 2
        assert effective_level(T2, 4) == 2
        assert effective_level(T2, 0) == 0

    def test_delayed_offsets_clamp_at_zero(self):
        assert effective_level(CasterValue(CasterTier.TIER1, delayed=True), 9) == 1
        assert effective_level(CasterValue(CasterTier.TIER1, delayed=True), 5) == 0
        assert effective_level(CasterValue(CasterTier.TIER2, delayed=True), 10) == 6

    def test_negative_level_rejected(self):
        with pytest.raises(ValueError):
            effective_level(T3, -1)


class TestSlots:
    def test_plain_table_lookup(self):
        assert max_arcane_slots(T1, 9) == (2, 1, 0, 0, 0, 0)

    def test_tier3_bonus(self):
        assert max_arcane_slots(T3, 1) == (1, 0, 0, 0, 0, 0)
        assert max_arcane_slots(T3, 14) == (5, 5, 5, 5, 4, 4)

    def test_saturates_past_the_table(self):
        assert max_arcane_slots(T3, 30) == max_arcane_slots(T3, 14)
        assert max_spell_slots(MagicType.DIVINE, T3, 99) == max_divine_slots(T3, 14)

    def test_tier4_bonus(self):
        assert max_divine_slots(T4, 3) == (3, 0, 0, 0, 0)

    def test_tier4_always_has_a_first_rank_slot(self):
        assert max_divine_slots(T4, 1) == (1, 0, 0, 0, 0)
        delayed = CasterValue(CasterTier.TIER4, delayed=True)
        assert max_arcane_slots(delayed, 1) == (1, 0, 0, 0, 0, 0)

    def test_tier4_first_rank_slot_even_at_level_zero(self):
        assert max_divine_slots(T4, 0) == (1, 0, 0, 0, 0)
        assert max_arcane_slots(T4, 0) == (1, 0, 0, 0, 0, 0)


class TestRepertoire:
    def test_int_bonus_only_on_open_ranks(self):
        assert max_arcane_slots(T3, 3) == (3, 1, 0, 0, 0, 0)
        assert repertoire_size(T3, 3, 2) == (5, 3, 0, 0, 0, 0)

    def test_negative_int_is_ignored(self):
        assert repertoire_size(T3, 3, -1) == (3, 1, 0, 0, 0, 0)
