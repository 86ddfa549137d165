"""
Count plan API routes.

Stateless: the client posts its item snapshot and correction events,
and gets back an ordered count queue with a summary.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from config import settings
from exceptions import AppError, InvalidPlanModeError
from models.count_plan import CountPlanRequest, CountPlanResult, NormalizeCountsRequest, PlanMode
from models.item import PackagingCounts
from services.count_plan_service import get_count_plan_service
from services.unit_normalizer_service import normalize_counts

logger = structlog.get_logger(__name__)

router = APIRouter()


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


def resolve_mode(mode: Optional[str]) -> PlanMode:
    """Request mode, or the configured default. Case-insensitive."""
    name = (mode or settings.default_plan_mode).strip().lower()
    try:
        return PlanMode(name)
    except ValueError:
        raise InvalidPlanModeError(name, [m.value for m in PlanMode])


# ===================
# ROUTES
# ===================

@router.post("", response_model=CountPlanResult)
async def build_count_plan(request: CountPlanRequest):
    """
    Build a cycle count queue from an item snapshot.

    Items are scored on count age, demand since last count, cover vs
    lead time, missing data and corrections in the last 30 days.
    Returns candidates highest risk first plus a per-band summary.
    """
    try:
        mode = resolve_mode(request.mode)
        include_routine = (
            settings.include_routine_default
            if request.include_routine is None
            else request.include_routine
        )
        now = request.now or datetime.now(timezone.utc)

        service = get_count_plan_service()
        return service.plan_session(
            items=request.items,
            events=request.events,
            mode=mode,
            now=now,
            include_routine=include_routine,
        )

    except Exception as e:
        return handle_error(e)


@router.get("/modes")
async def list_plan_modes():
    """Available plan modes with queue size and target session length."""
    return [
        {
            "mode": mode.value,
            "title": mode.label,
            "subtitle": mode.profile.subtitle,
            "item_limit": mode.item_limit,
            "target_duration_minutes": mode.target_duration_minutes,
        }
        for mode in PlanMode
    ]


@router.post("/normalize", response_model=PackagingCounts)
async def normalize_packaging(request: NormalizeCountsRequest):
    """
    Normalize a case/unit/each count entry.

    Overflowing eaches roll into units and units into cases. With a
    zero pack size the counts come back clamped but otherwise as entered.
    """
    try:
        return normalize_counts(
            request.cases,
            request.units_per_case,
            request.units,
            request.eaches_per_unit,
            request.eaches,
        )

    except Exception as e:
        return handle_error(e)
