"""
Pydantic models for validation and serialization.

Inputs are caller-owned snapshots; engine outputs are frozen.
"""

from models.base import (
    BaseSchema,
    FrozenSchema,
)
from models.item import (
    InventoryEventType,
    ItemSnapshot,
    CorrectionEvent,
    PackagingCounts,
    LiquidQuantity,
)
from models.count_plan import (
    PlanMode,
    PlanModeProfile,
    PriorityBand,
    CountPlanInput,
    CountPlanCandidate,
    CountPlanSummary,
    CountPlanResult,
    CountPlanRequest,
    NormalizeCountsRequest,
)
from models.purchase_order import (
    PurchaseOrderStatus,
    PurchaseOrderLine,
    PurchaseOrderDraft,
)
from models.replenishment import (
    ReplenishmentStatus,
    SuggestionConfidence,
    ReplenishmentSignal,
    AutoReorderSuggestion,
    ReplenishmentRequest,
    DraftOrdersRequest,
    DraftOrdersResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",

    # Items
    "InventoryEventType",
    "ItemSnapshot",
    "CorrectionEvent",
    "PackagingCounts",
    "LiquidQuantity",

    # Count plan
    "PlanMode",
    "PlanModeProfile",
    "PriorityBand",
    "CountPlanInput",
    "CountPlanCandidate",
    "CountPlanSummary",
    "CountPlanResult",
    "CountPlanRequest",
    "NormalizeCountsRequest",

    # Purchase orders
    "PurchaseOrderStatus",
    "PurchaseOrderLine",
    "PurchaseOrderDraft",

    # Replenishment
    "ReplenishmentStatus",
    "SuggestionConfidence",
    "ReplenishmentSignal",
    "AutoReorderSuggestion",
    "ReplenishmentRequest",
    "DraftOrdersRequest",
    "DraftOrdersResponse",
]
