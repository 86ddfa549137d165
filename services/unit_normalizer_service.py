"""Packaging normalization for case -> unit -> each counts.

Converts raw count entry into canonical totals and back. Liquid items
never go through the case/unit path; they are a continuous gallon
quantity split into whole gallons plus a fraction.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import structlog

from config.planning import UNITS_PER_GALLON
from models.base import clamp_non_negative, clamp_non_negative_decimal
from models.item import ItemSnapshot, PackagingCounts, LiquidQuantity

logger = structlog.get_logger(__name__)


def normalize_counts(
    cases: int,
    units_per_case: int,
    units: int,
    eaches_per_unit: int,
    eaches: int,
) -> PackagingCounts:
    """
    Carry overflowing eaches into units and units into cases.

    All inputs are clamped to >= 0 first. When either pack size is 0
    the hierarchy is undefined and the clamped counts come back as-is.

    Example:
        2 cases x 12, 15 units, 6 eaches/unit, 8 eaches
        total eaches = ((2*12 + 15) * 6) + 8 = 242
        -> 3 cases, 4 units, 2 eaches
    """
    cases = clamp_non_negative(cases)
    units_per_case = clamp_non_negative(units_per_case)
    units = clamp_non_negative(units)
    eaches_per_unit = clamp_non_negative(eaches_per_unit)
    eaches = clamp_non_negative(eaches)

    if units_per_case == 0 or eaches_per_unit == 0:
        return PackagingCounts(
            cases=cases,
            units_per_case=units_per_case,
            units=units,
            eaches_per_unit=eaches_per_unit,
            eaches=eaches,
        )

    total = total_eaches(cases, units_per_case, units, eaches_per_unit, eaches)
    units_total, eaches_left = divmod(total, eaches_per_unit)
    cases_out, units_left = divmod(units_total, units_per_case)

    return PackagingCounts(
        cases=cases_out,
        units_per_case=units_per_case,
        units=units_left,
        eaches_per_unit=eaches_per_unit,
        eaches=eaches_left,
    )


def total_eaches(
    cases: int,
    units_per_case: int,
    units: int,
    eaches_per_unit: int,
    eaches: int,
) -> int:
    """Grand total in the finest unit. Only meaningful when both pack sizes > 0."""
    return (
        (clamp_non_negative(cases) * clamp_non_negative(units_per_case) + clamp_non_negative(units))
        * clamp_non_negative(eaches_per_unit)
        + clamp_non_negative(eaches)
    )


def total_units_on_hand(item: ItemSnapshot) -> int:
    """
    On-hand quantity in planning units.

    Liquid: gallons x 128, rounded half-up.
    Cased: cases x units_per_case + loose units.
    Flat: cases + loose units.
    """
    if item.is_liquid:
        ounces = gallons_on_hand(item).total_gallons * UNITS_PER_GALLON
        return int(ounces.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if item.units_per_case > 0:
        return item.cases * item.units_per_case + item.loose_units
    return item.cases + item.loose_units


def gallons_on_hand(item: ItemSnapshot) -> LiquidQuantity:
    """Whole + fractional gallons recorded on a liquid item."""
    return LiquidQuantity(
        whole_gallons=item.loose_units,
        gallon_fraction=item.gallon_fraction,
    )


def apply_total_gallons(gallons: Decimal) -> LiquidQuantity:
    """
    Split a counted gallon total into whole + fraction.

    3.75 -> whole 3, fraction 0.75. Negative totals clamp to 0.
    """
    total = clamp_non_negative_decimal(Decimal(gallons))
    whole = math.floor(total)
    return LiquidQuantity(whole_gallons=whole, gallon_fraction=total - whole)


def apply_total_units(
    total_units: int,
    units_per_case: int,
    is_liquid: bool = False,
) -> tuple[PackagingCounts, Optional[LiquidQuantity]]:
    """
    Spread a counted unit total back over the packaging fields.

    Returns (packaging, liquid). Liquid items get their gallons from
    units / 128 and an empty packaging record; loose eaches are not
    touched by a unit-level count so they come back as 0.
    """
    total_units = clamp_non_negative(total_units)
    units_per_case = clamp_non_negative(units_per_case)

    if is_liquid:
        liquid = apply_total_gallons(Decimal(total_units) / UNITS_PER_GALLON)
        logger.debug("liquid_total_applied", total_units=total_units, gallons=str(liquid.total_gallons))
        return PackagingCounts(), liquid

    if units_per_case > 0:
        cases, loose = divmod(total_units, units_per_case)
    else:
        cases, loose = total_units, 0

    return PackagingCounts(cases=cases, units_per_case=units_per_case, units=loose), None
