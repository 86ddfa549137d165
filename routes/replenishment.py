"""
Replenishment API routes.

Reorder signals, auto-reorder suggestions and supplier-grouped draft
purchase orders, all computed from the posted item snapshot.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from config import settings
from exceptions import AppError, NoActionableLinesError
from models.replenishment import (
    ReplenishmentRequest,
    ReplenishmentSignal,
    AutoReorderSuggestion,
    DraftOrdersRequest,
    DraftOrdersResponse,
)
from services.replenishment_service import get_replenishment_service
from services.purchase_order_service import get_purchase_order_service

logger = structlog.get_logger(__name__)

router = APIRouter()

DRAFT_NOTES = {
    "replenishment": "Generated from Replenishment Planner.",
    "auto-reorder": "Generated from Auto-Reorder Suggestions.",
}


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post("/signals", response_model=list[ReplenishmentSignal])
async def get_replenishment_signals(request: ReplenishmentRequest):
    """
    Reorder status for every posted item.

    Sorted URGENT > DUE_SOON > HEALTHY > NEEDS_DATA, then by
    suggested units (largest first), then item name.
    """
    try:
        service = get_replenishment_service()
        return service.signals(request.items)

    except Exception as e:
        return handle_error(e)


@router.post("/suggestions", response_model=list[AutoReorderSuggestion])
async def get_auto_reorder_suggestions(request: ReplenishmentRequest):
    """
    Forecast-based reorder suggestions.

    Covers lead time plus a 7-21 day review window using blended
    moving-average and baseline demand.
    """
    try:
        service = get_replenishment_service()
        return service.auto_reorder_suggestions(request.items)

    except Exception as e:
        return handle_error(e)


@router.post("/drafts", response_model=DraftOrdersResponse)
async def create_draft_orders(request: DraftOrdersRequest):
    """
    Create one draft purchase order per supplier.

    Requires can_manage_purchasing. Items without a supplier are
    batched under "Unassigned Supplier".
    """
    try:
        replenishment = get_replenishment_service()
        if request.source == "auto-reorder":
            lines = replenishment.auto_draft_lines(request.items)
        else:
            lines = replenishment.draft_lines(request.items)

        notes = " ".join(part for part in (request.notes.strip(), DRAFT_NOTES[request.source]) if part)
        drafts = get_purchase_order_service().create_drafts_grouped_by_supplier(
            lines,
            created_at=request.now or datetime.now(timezone.utc),
            can_manage_purchasing=request.can_manage_purchasing,
            workspace_id=request.workspace_id,
            source=request.source,
            notes=notes,
            reference_start=request.reference_start or settings.purchase_order_reference_start,
        )
        if not drafts:
            raise NoActionableLinesError(request.source, len(request.items))

        return DraftOrdersResponse(
            drafts=drafts,
            draft_count=len(drafts),
            total_items=sum(d.item_count for d in drafts),
            total_units=sum(d.total_suggested_units for d in drafts),
            total_open_units=sum(d.open_units for d in drafts),
        )

    except Exception as e:
        return handle_error(e)
