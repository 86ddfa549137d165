"""
Purchase order schemas.

Lines are produced once by the replenishment engine when a draft is
created and are immutable afterwards.
"""

from pydantic import Field, field_validator
from typing import Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from models.base import FrozenSchema, clamp_non_negative, clamp_non_negative_decimal


class PurchaseOrderStatus(str, Enum):
    """
    Purchase order status.

    Only drafts are created here; sending and receiving belong to the
    caller's order store, which advances received_units on the lines.
    """
    DRAFT = "Draft"


class PurchaseOrderLine(FrozenSchema):
    """
    One suggested line on a draft order.

    Supplier fields are None when blank so lines group cleanly;
    constraint fields are None when unconstrained.
    """

    id: str
    item_id: str
    item_name: str
    category: str = ""
    suggested_units: int
    reorder_point: int
    on_hand_units: int
    lead_time_days: int
    forecast_daily_demand: Decimal
    preferred_supplier: Optional[str] = None
    supplier_sku: Optional[str] = None
    minimum_order_quantity: Optional[int] = None
    reorder_case_pack: Optional[int] = None
    lead_time_variance_days: Optional[int] = None
    received_units: int = 0

    @field_validator("suggested_units", "reorder_point", "on_hand_units", "lead_time_days", "received_units")
    @classmethod
    def clamp_counts(cls, v: int) -> int:
        return clamp_non_negative(v)

    @field_validator("minimum_order_quantity", "reorder_case_pack", "lead_time_variance_days")
    @classmethod
    def clamp_constraints(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return v
        return clamp_non_negative(v)

    @field_validator("forecast_daily_demand")
    @classmethod
    def clamp_demand(cls, v: Decimal) -> Decimal:
        return clamp_non_negative_decimal(v)

    @field_validator("preferred_supplier", "supplier_sku")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Whitespace-only supplier text means no supplier."""
        if v is None:
            return v
        v = v.strip()
        return v or None

    @property
    def open_units(self) -> int:
        return max(0, self.suggested_units - self.received_units)


class PurchaseOrderDraft(FrozenSchema):
    """Draft purchase order for a single supplier."""

    id: str
    reference: str = Field(..., description="PO-#### reference")
    supplier_label: str
    workspace_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    source: str = "manual"
    notes: str = ""
    lines: tuple[PurchaseOrderLine, ...]

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def total_suggested_units(self) -> int:
        return sum(line.suggested_units for line in self.lines)

    @property
    def total_received_units(self) -> int:
        return sum(line.received_units for line in self.lines)

    @property
    def open_units(self) -> int:
        return max(0, self.total_suggested_units - self.total_received_units)

    @property
    def fulfillment_progress(self) -> Decimal:
        """Received / suggested, capped at 1."""
        if self.total_suggested_units <= 0:
            return Decimal("0")
        return min(
            Decimal("1"),
            Decimal(self.total_received_units) / Decimal(self.total_suggested_units),
        )
