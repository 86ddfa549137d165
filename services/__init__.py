"""
Business logic services.

Each service handles one domain area. None of them hold state between
calls; snapshots and the clock are always passed in.
"""

from services.unit_normalizer_service import (
    normalize_counts,
    total_eaches,
    total_units_on_hand,
    apply_total_units,
    apply_total_gallons,
)
from services.count_plan_service import (
    CountPlanService,
    get_count_plan_service,
    recent_correction_counts,
    assign_band,
)
from services.plan_summary_service import summarize
from services.replenishment_service import (
    ReplenishmentService,
    get_replenishment_service,
    adjust_for_supplier,
)
from services.purchase_order_service import PurchaseOrderService, get_purchase_order_service

__all__ = [
    "normalize_counts",
    "total_eaches",
    "total_units_on_hand",
    "apply_total_units",
    "apply_total_gallons",
    "CountPlanService",
    "get_count_plan_service",
    "recent_correction_counts",
    "assign_band",
    "summarize",
    "ReplenishmentService",
    "get_replenishment_service",
    "adjust_for_supplier",
    "PurchaseOrderService",
    "get_purchase_order_service",
]
