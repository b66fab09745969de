"""
Unit tests for the share allocator.

Expected values are hand-computed from largest-remainder apportionment:
floor every raw value, then hand the leftover units to the largest
fractional remainders, ties going to the smaller key.
"""

import pytest

from muscle_share.core.allocation import (
    absolute_shares,
    even_ratios,
    normalize_ratios,
    ratios_from_shares,
    rescale_to_hundred,
)

RATIO_MAPS = [
    {"a": 0.2, "b": 0.3, "c": 0.5},
    {"x": 1 / 3, "y": 1 / 3, "z": 1 / 3},
    {"p": 0.001, "q": 0.999},
    {"solo": 0.4},
    {"m1": 3.0, "m2": 7.0, "m3": 11.0},  # not normalized on purpose
]


class TestNormalizeRatios:
    def test_scales_to_one(self):
        assert normalize_ratios({"a": 1, "b": 3}) == pytest.approx({"a": 0.25, "b": 0.75})

    def test_drops_non_positive(self):
        result = normalize_ratios({"a": 2.0, "b": 0.0, "c": -1.0})
        assert result == {"a": 1.0}

    def test_empty_when_nothing_positive(self):
        assert normalize_ratios({}) == {}
        assert normalize_ratios({"a": 0.0}) == {}

    @pytest.mark.parametrize("ratios", RATIO_MAPS)
    def test_idempotent(self, ratios):
        once = normalize_ratios(ratios)
        assert normalize_ratios(once) == once

    def test_does_not_mutate_input(self):
        ratios = {"a": 2.0, "b": 0.0}
        normalize_ratios(ratios)
        assert ratios == {"a": 2.0, "b": 0.0}


class TestEvenRatios:
    def test_four_keys_get_a_quarter(self):
        assert even_ratios({"a", "b", "c", "d"}) == {"a": 0.25, "b": 0.25, "c": 0.25, "d": 0.25}

    def test_empty(self):
        assert even_ratios([]) == {}


class TestAbsoluteShares:
    @pytest.mark.parametrize("ratios", RATIO_MAPS)
    def test_sum_equals_group_share_for_every_group_share(self, ratios):
        for g in range(0, 101):
            result = absolute_shares(g, ratios)
            assert sum(result.values()) == g
            assert all(0 <= v <= g for v in result.values())

    def test_even_tie_goes_to_smaller_name(self):
        # raw 3.5 / 3.5 → floors 3/3, one leftover unit, equal remainders → A
        assert absolute_shares(7, {"A": 0.5, "B": 0.5}) == {"A": 4, "B": 3}

    def test_tie_is_independent_of_insertion_order(self):
        assert absolute_shares(7, {"B": 0.5, "A": 0.5}) == {"A": 4, "B": 3}

    def test_largest_remainder_wins(self):
        # raw 33.3 / 33.3 / 33.4 → floors 33 each, leftover unit to B2 (.4)
        assert absolute_shares(100, {"A": 0.333, "B": 0.333, "B2": 0.334}) == {
            "A": 33,
            "B": 33,
            "B2": 34,
        }

    def test_tie_key_orders_by_display_name(self):
        names = {"id-1": "Zygomaticus", "id-2": "Anconeus"}
        result = absolute_shares(7, {"id-1": 0.5, "id-2": 0.5}, tie_key=names.get)
        assert result == {"id-1": 3, "id-2": 4}

    def test_renormalizes_input(self):
        # {1, 3} behaves like {0.25, 0.75}: raw 15 / 45
        assert absolute_shares(60, {"a": 1.0, "b": 3.0}) == {"a": 15, "b": 45}

    def test_chest_split(self):
        assert absolute_shares(60, {"PecMajor": 0.9, "PecMinor": 0.1}) == {
            "PecMajor": 54,
            "PecMinor": 6,
        }

    def test_zero_group_share(self):
        assert absolute_shares(0, {"a": 0.5, "b": 0.5}) == {"a": 0, "b": 0}

    def test_empty_ratios(self):
        assert absolute_shares(50, {}) == {}
        assert absolute_shares(50, {"a": 0.0}) == {}

    @pytest.mark.parametrize("bad", [-1, 101])
    def test_group_share_out_of_range_raises(self, bad):
        with pytest.raises(ValueError):
            absolute_shares(bad, {"a": 1.0})


class TestRescaleToHundred:
    def test_doubles(self):
        assert rescale_to_hundred({"a": 30, "b": 20}) == {"a": 60, "b": 40}

    def test_thirds(self):
        # raw 33.33 each → floors 33, leftover unit to "a" (tie, smallest key)
        assert rescale_to_hundred({"a": 1, "b": 1, "c": 1}) == {"a": 34, "b": 33, "c": 33}

    def test_largest_remainder(self):
        # 50/75 → 66.67, 25/75 → 33.33: floors 66 + 33, leftover to "a"
        assert rescale_to_hundred({"a": 50, "b": 25}) == {"a": 67, "b": 33}

    def test_scales_down(self):
        # 60/120 and 60/120 → 50 / 50
        assert rescale_to_hundred({"a": 60, "b": 60}) == {"a": 50, "b": 50}

    def test_already_hundred_is_unchanged(self):
        shares = {"a": 70, "b": 30}
        result = rescale_to_hundred(shares)
        assert result == shares
        assert result is not shares

    def test_zero_entries_are_dropped(self):
        assert rescale_to_hundred({"a": 0, "b": 40}) == {"b": 100}

    def test_all_zero(self):
        assert rescale_to_hundred({}) == {}
        assert rescale_to_hundred({"a": 0}) == {}

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            rescale_to_hundred({"a": -5, "b": 50})

    def test_result_always_totals_hundred(self):
        for a in range(1, 40):
            for b in (1, 7, 13, 50):
                result = rescale_to_hundred({"a": a, "b": b, "c": 3})
                assert sum(result.values()) == 100


class TestRatiosFromShares:
    def test_rebuilds_ratios(self):
        result = ratios_from_shares(60, {"PecMajor": 54, "PecMinor": 6})
        assert result == pytest.approx({"PecMajor": 0.9, "PecMinor": 0.1})

    def test_renormalizes_rounded_shares(self):
        # stale shares totalling 24 of a 25% group still give ratios summing to 1
        result = ratios_from_shares(25, {"a": 9, "b": 8, "c": 7})
        assert sum(result.values()) == pytest.approx(1.0)

    def test_non_positive_group_share(self):
        assert ratios_from_shares(0, {"a": 5}) == {}

    def test_round_trip_through_absolute_shares(self):
        shares = {"a": 23, "b": 2}
        assert absolute_shares(25, ratios_from_shares(25, shares)) == shares
