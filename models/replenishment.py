"""
Replenishment schemas for reorder signals and auto-reorder suggestions.

Provides "what to order now" from demand, lead time and safety stock,
adjusted for supplier MOQ and case packs.
"""

from pydantic import Field
from typing import Literal, Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from models.base import BaseSchema, FrozenSchema
from models.item import ItemSnapshot
from models.purchase_order import PurchaseOrderDraft


class ReplenishmentStatus(str, Enum):
    """Reorder status per item, most urgent first."""
    URGENT = "URGENT"          # Order needed and cover is inside half the lead time
    DUE_SOON = "DUE_SOON"      # Order needed, some cover left
    HEALTHY = "HEALTHY"        # At or above reorder point
    NEEDS_DATA = "NEEDS_DATA"  # No demand or no lead time

    @property
    def sort_order(self) -> int:
        return _STATUS_ORDER[self]


_STATUS_ORDER = {
    ReplenishmentStatus.URGENT: 0,
    ReplenishmentStatus.DUE_SOON: 1,
    ReplenishmentStatus.HEALTHY: 2,
    ReplenishmentStatus.NEEDS_DATA: 3,
}


class SuggestionConfidence(str, Enum):
    """How much demand history backs an auto-reorder suggestion."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ReplenishmentSignal(FrozenSchema):
    """Reorder signal for a single item."""

    item_id: str
    item_name: str
    category: str = ""
    location: str = ""
    status: ReplenishmentStatus
    on_hand_units: int
    reorder_point: int
    suggested_units: int = Field(..., description="0 unless an order is needed")
    lead_time_days: int
    forecast_daily_demand: Decimal
    sample_count: int = 0
    days_of_supply: Optional[Decimal] = None


class AutoReorderSuggestion(FrozenSchema):
    """Forecast-based order covering lead time plus a review window."""

    item_id: str
    item_name: str
    on_hand_units: int
    reorder_point: int
    target_units: int
    recommended_units: int
    lead_time_days: int
    review_window_days: Decimal
    velocity_per_day: Decimal
    safety_stock_units: int
    sample_count: int
    days_of_cover: Decimal
    risk_score: Decimal = Field(..., description="(cover - lead) / lead; lower is riskier")
    confidence: SuggestionConfidence


# ===================
# API REQUESTS / RESPONSES
# ===================

class ReplenishmentRequest(BaseSchema):
    """Item snapshot sent by the client."""

    items: list[ItemSnapshot] = Field(default_factory=list)


class DraftOrdersRequest(BaseSchema):
    """Create supplier-grouped draft orders from a snapshot."""

    items: list[ItemSnapshot] = Field(default_factory=list)
    source: Literal["replenishment", "auto-reorder"] = "replenishment"
    can_manage_purchasing: bool = False
    workspace_id: Optional[str] = None
    notes: str = ""
    reference_start: Optional[int] = Field(default=None, ge=1)
    now: Optional[datetime] = None


class DraftOrdersResponse(BaseSchema):
    """Drafts plus batch totals."""

    drafts: list[PurchaseOrderDraft]
    draft_count: int
    total_items: int
    total_units: int
    total_open_units: int
