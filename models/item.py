"""
Item snapshot and inventory event schemas.

Snapshots are owned by the caller (item store) and read-only to the
planning engines. Workspace scoping happens before they get here.
"""

from pydantic import Field, field_validator
from typing import Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from config.planning import DEMAND_SAMPLE_LIMIT
from models.base import (
    BaseSchema,
    FrozenSchema,
    clamp_non_negative,
    clamp_non_negative_decimal,
)


class InventoryEventType(str, Enum):
    """Kinds of logged inventory events."""
    ADJUSTMENT = "adjustment"
    COUNT_CORRECTION = "count_correction"
    RECEIVE = "receive"
    USAGE = "usage"
    TRANSFER = "transfer"


class ItemSnapshot(BaseSchema):
    """
    Point-in-time view of one inventory item.

    Packaging is a three-tier hierarchy: case -> unit -> each.
    Liquid items ignore cases/eaches and hold whole gallons in
    loose_units plus a fractional gallon in gallon_fraction.
    """

    # Identity
    id: str
    name: str = ""
    location: str = ""
    category: str = ""
    workspace_id: Optional[str] = None

    # Packaging
    cases: int = Field(default=0, description="Full cases on hand")
    units_per_case: int = Field(default=0, description="0 = no case level")
    loose_units: int = Field(default=0, description="Units outside full cases (whole gallons if liquid)")
    eaches_per_unit: int = Field(default=0, description="0 = no each level")
    loose_eaches: int = 0
    is_liquid: bool = False
    gallon_fraction: Decimal = Field(default=Decimal("0"), description="Partial gallon in [0, 1)")

    # Demand model
    average_daily_usage: Decimal = Decimal("0")
    moving_average_daily_demand: Optional[Decimal] = None
    demand_samples: list[Decimal] = Field(
        default_factory=list,
        description="Recent daily demand samples, oldest first"
    )
    lead_time_days: int = 0
    lead_time_variance_days: Optional[int] = None
    safety_stock_units: int = 0

    # Supply constraints (0 / blank = unconstrained)
    minimum_order_quantity: int = 0
    reorder_case_pack: int = 0
    preferred_supplier: str = ""
    supplier_sku: str = ""

    # Provenance
    barcode: str = ""
    last_updated_at: datetime

    @field_validator(
        "cases",
        "units_per_case",
        "loose_units",
        "eaches_per_unit",
        "loose_eaches",
        "lead_time_days",
        "safety_stock_units",
        "minimum_order_quantity",
        "reorder_case_pack",
        mode="before",
    )
    @classmethod
    def default_missing_counts(cls, v):
        """Null counts from upstream parsing mean zero."""
        return 0 if v is None else v

    @field_validator(
        "cases",
        "units_per_case",
        "loose_units",
        "eaches_per_unit",
        "loose_eaches",
        "lead_time_days",
        "safety_stock_units",
        "minimum_order_quantity",
        "reorder_case_pack",
    )
    @classmethod
    def clamp_counts(cls, v: int) -> int:
        """Quantities are never negative."""
        return clamp_non_negative(v)

    @field_validator("lead_time_variance_days")
    @classmethod
    def clamp_variance(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return v
        return clamp_non_negative(v)

    @field_validator("average_daily_usage")
    @classmethod
    def clamp_usage(cls, v: Decimal) -> Decimal:
        return clamp_non_negative_decimal(v)

    @field_validator("moving_average_daily_demand")
    @classmethod
    def clamp_moving_average(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        return clamp_non_negative_decimal(v)

    @field_validator("gallon_fraction")
    @classmethod
    def keep_fraction(cls, v: Decimal) -> Decimal:
        """Only the fractional part of a non-negative value is kept."""
        return clamp_non_negative_decimal(v) % 1

    @field_validator("demand_samples")
    @classmethod
    def drop_negative_samples(cls, v: list[Decimal]) -> list[Decimal]:
        return [sample for sample in v if sample >= 0]

    @field_validator("name", "location", "category", "barcode", "preferred_supplier", "supplier_sku", mode="before")
    @classmethod
    def default_missing_text(cls, v):
        return "" if v is None else v

    @property
    def smoothed_daily_demand(self) -> Optional[Decimal]:
        """
        Moving-average demand.

        An explicit moving average wins; otherwise the mean of the
        most recent samples. None when neither exists.
        """
        if self.moving_average_daily_demand is not None:
            return self.moving_average_daily_demand
        samples = self.demand_samples[-DEMAND_SAMPLE_LIMIT:]
        if not samples:
            return None
        return sum(samples, Decimal("0")) / len(samples)

    @property
    def forecast_daily_demand(self) -> Decimal:
        """max(historical average, moving average)."""
        return max(self.average_daily_usage, self.smoothed_daily_demand or Decimal("0"))

    @property
    def sample_count(self) -> int:
        return len(self.demand_samples[-DEMAND_SAMPLE_LIMIT:])


class CorrectionEvent(BaseSchema):
    """
    Logged inventory event, consumed as a risk signal only.

    Correction-like means an explicit count correction, or an
    adjustment that removed stock.
    """

    item_id: Optional[str] = None
    type: InventoryEventType
    delta_units: int = 0
    created_at: datetime

    @property
    def is_correction_like(self) -> bool:
        if self.type == InventoryEventType.COUNT_CORRECTION:
            return True
        return self.type == InventoryEventType.ADJUSTMENT and self.delta_units < 0


class PackagingCounts(FrozenSchema):
    """Case/unit/each counts as entered or normalized."""

    cases: int = 0
    units_per_case: int = 0
    units: int = 0
    eaches_per_unit: int = 0
    eaches: int = 0

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        return (self.cases, self.units_per_case, self.units, self.eaches_per_unit, self.eaches)


class LiquidQuantity(FrozenSchema):
    """Continuous gallon quantity split into whole + fraction."""

    whole_gallons: int = 0
    gallon_fraction: Decimal = Decimal("0")

    @property
    def total_gallons(self) -> Decimal:
        return Decimal(self.whole_gallons) + self.gallon_fraction
