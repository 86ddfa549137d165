"""
Unit tests for packaging normalization.

Tests:
1. Case/unit/each carry-over
2. Zero pack sizes
3. On-hand totals (cased, flat, liquid)
4. Applying a counted total back to packaging
"""

import pytest
from decimal import Decimal

from services.unit_normalizer_service import (
    normalize_counts,
    total_eaches,
    total_units_on_hand,
    apply_total_gallons,
    apply_total_units,
)
from tests.factories import ItemSnapshotFactory


# ===================
# TEST 1: CARRY-OVER
# ===================

class TestNormalizeCounts:
    """
    Overflow carries upward.

    total = (cases x upc + units) x epu + eaches
    """

    def test_worked_example(self):
        """
        2 cases x 12, 15 units, 6 eaches/unit, 8 eaches
        total = (24 + 15) x 6 + 8 = 242 eaches
        242 / 6 = 40 units r 2, 40 / 12 = 3 cases r 4
        """
        result = normalize_counts(2, 12, 15, 6, 8)

        assert result.as_tuple() == (3, 12, 4, 6, 2)

    def test_already_normalized_is_unchanged(self):
        result = normalize_counts(3, 12, 4, 6, 2)

        assert result.as_tuple() == (3, 12, 4, 6, 2)

    @pytest.mark.parametrize("counts", [
        (0, 12, 0, 6, 0),
        (1, 24, 30, 10, 55),
        (5, 4, 3, 2, 1),
        (0, 1, 100, 1, 100),
    ])
    def test_preserves_total_and_is_idempotent(self, counts):
        once = normalize_counts(*counts)
        twice = normalize_counts(*once.as_tuple())

        assert total_eaches(*once.as_tuple()) == total_eaches(*counts)
        assert twice == once
        assert once.units < once.units_per_case
        assert once.eaches < once.eaches_per_unit

    def test_negative_inputs_clamp_to_zero(self):
        result = normalize_counts(-2, 12, -5, 6, 13)

        # 13 eaches -> 2 units r 1
        assert result.as_tuple() == (0, 12, 2, 6, 1)


# ===================
# TEST 2: ZERO PACK SIZES
# ===================

class TestZeroPackSizes:
    """Without both pack sizes the hierarchy is undefined: no carry."""

    def test_zero_units_per_case_returns_clamped_input(self):
        result = normalize_counts(-1, 0, 5, 6, 30)

        assert result.as_tuple() == (0, 0, 5, 6, 30)

    def test_zero_eaches_per_unit_returns_input(self):
        result = normalize_counts(1, 12, 40, 0, 3)

        assert result.as_tuple() == (1, 12, 40, 0, 3)


# ===================
# TEST 3: ON-HAND TOTALS
# ===================

class TestTotalUnitsOnHand:

    def test_cased_item(self):
        item = ItemSnapshotFactory.build(cases=2, units_per_case=10, loose_units=4)

        assert total_units_on_hand(item) == 24

    def test_flat_item_adds_cases_and_units(self):
        item = ItemSnapshotFactory.build(cases=3, units_per_case=0, loose_units=4)

        assert total_units_on_hand(item) == 7

    def test_liquid_item_in_ounces(self):
        """3.75 gal x 128 = 480"""
        item = ItemSnapshotFactory.build(is_liquid=True, loose_units=3, gallon_fraction="0.75")

        assert total_units_on_hand(item) == 480

    def test_liquid_rounds_half_up(self):
        """0.00390625 gal x 128 = 0.5 -> 1"""
        item = ItemSnapshotFactory.build(is_liquid=True, loose_units=0, gallon_fraction="0.00390625")

        assert total_units_on_hand(item) == 1


# ===================
# TEST 4: APPLYING TOTALS
# ===================

class TestApplyTotals:

    def test_gallons_split_into_whole_and_fraction(self):
        result = apply_total_gallons(Decimal("3.75"))

        assert result.whole_gallons == 3
        assert result.gallon_fraction == Decimal("0.75")
        assert result.total_gallons == Decimal("3.75")

    def test_negative_gallons_clamp(self):
        result = apply_total_gallons(Decimal("-2"))

        assert result.whole_gallons == 0
        assert result.gallon_fraction == 0

    def test_units_spread_over_cases(self):
        packaging, liquid = apply_total_units(29, units_per_case=12)

        assert liquid is None
        assert packaging.cases == 2
        assert packaging.units == 5

    def test_units_without_case_size(self):
        packaging, liquid = apply_total_units(29, units_per_case=0)

        assert liquid is None
        assert packaging.cases == 29
        assert packaging.units == 0

    def test_liquid_units_become_gallons(self):
        packaging, liquid = apply_total_units(480, units_per_case=0, is_liquid=True)

        assert packaging.as_tuple() == (0, 0, 0, 0, 0)
        assert liquid.whole_gallons == 3
        assert liquid.gallon_fraction == Decimal("0.75")
