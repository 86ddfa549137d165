"""
Cycle count planning schemas.

Plan modes and priority bands are closed enums; each mode carries its
own factor weights and session sizing as associated data.
"""

from dataclasses import dataclass
from pydantic import Field
from typing import Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from models.base import BaseSchema, FrozenSchema
from models.item import ItemSnapshot, CorrectionEvent


@dataclass(frozen=True)
class PlanModeProfile:
    """Weights and sizing for one plan mode. Weights are never negative."""
    title: str
    subtitle: str
    staleness_weight: Decimal
    demand_weight: Decimal
    lead_time_weight: Decimal
    correction_weight: Decimal
    item_limit: int
    target_duration_minutes: int


class PlanMode(str, Enum):
    """Count session modes."""
    EXPRESS = "express"
    BALANCED = "balanced"
    DEEP = "deep"
    SHRINK_FOCUS = "shrink_focus"
    FAST_MOVER = "fast_mover"

    @property
    def profile(self) -> PlanModeProfile:
        return _MODE_PROFILES[self]

    @property
    def label(self) -> str:
        return self.profile.title

    @property
    def item_limit(self) -> int:
        return self.profile.item_limit

    @property
    def target_duration_minutes(self) -> int:
        return self.profile.target_duration_minutes


_ONE = Decimal("1")

_MODE_PROFILES = {
    PlanMode.EXPRESS: PlanModeProfile(
        title="Express",
        subtitle="Fast top risks",
        staleness_weight=_ONE,
        demand_weight=_ONE,
        lead_time_weight=_ONE,
        correction_weight=_ONE,
        item_limit=12,
        target_duration_minutes=15,
    ),
    PlanMode.BALANCED: PlanModeProfile(
        title="Balanced",
        subtitle="Most locations",
        staleness_weight=_ONE,
        demand_weight=_ONE,
        lead_time_weight=_ONE,
        correction_weight=_ONE,
        item_limit=24,
        target_duration_minutes=30,
    ),
    PlanMode.DEEP: PlanModeProfile(
        title="Deep",
        subtitle="Full sweep",
        staleness_weight=_ONE,
        demand_weight=_ONE,
        lead_time_weight=_ONE,
        correction_weight=_ONE,
        item_limit=40,
        target_duration_minutes=60,
    ),
    PlanMode.SHRINK_FOCUS: PlanModeProfile(
        title="Shrink Focus",
        subtitle="Recent corrections first",
        staleness_weight=_ONE,
        demand_weight=Decimal("0.75"),
        lead_time_weight=Decimal("0.75"),
        correction_weight=Decimal("2"),
        item_limit=24,
        target_duration_minutes=30,
    ),
    PlanMode.FAST_MOVER: PlanModeProfile(
        title="Fast Movers",
        subtitle="High demand, long lead",
        staleness_weight=_ONE,
        demand_weight=Decimal("2"),
        lead_time_weight=Decimal("1.5"),
        correction_weight=Decimal("0.5"),
        item_limit=24,
        target_duration_minutes=30,
    ),
}


class PriorityBand(str, Enum):
    """Count priority bands, highest first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _BAND_RANKS[self]


_BAND_RANKS = {
    PriorityBand.LOW: 0,
    PriorityBand.MEDIUM: 1,
    PriorityBand.HIGH: 2,
    PriorityBand.CRITICAL: 3,
}


class CountPlanInput(BaseSchema):
    """
    Engine-facing projection of an ItemSnapshot.

    Built fresh per planning call; average_daily_usage here already is
    the effective demand (max of historical and moving average).
    """

    id: str
    item_name: str
    location_label: str = ""
    on_hand_units: int = 0
    average_daily_usage: Decimal = Decimal("0")
    lead_time_days: int = 0
    last_counted_at: datetime
    missing_barcode: bool = False
    missing_planning_inputs: bool = False
    recent_correction_count: int = 0
    is_liquid: bool = False


class CountPlanCandidate(FrozenSchema):
    """One item in the count queue."""

    id: str
    item_name: str
    location_label: str
    zone_key: str
    on_hand_units: int
    days_since_count: int
    score: int
    band: PriorityBand
    is_routine: bool = False
    reasons: tuple[str, ...] = Field(..., description="Most significant first")
    estimated_seconds: int


class CountPlanSummary(FrozenSchema):
    """Aggregate view of a count queue."""

    candidate_count: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    routine_count: int = Field(default=0, description="Subset of low_count")
    estimated_minutes: int = 0
    recommended_zone_label: Optional[str] = None


class CountPlanResult(FrozenSchema):
    """Queue plus summary for one planning call."""

    mode: PlanMode
    target_duration_minutes: int
    generated_at: datetime
    candidates: tuple[CountPlanCandidate, ...]
    summary: CountPlanSummary


# ===================
# API REQUESTS
# ===================

class CountPlanRequest(BaseSchema):
    """Snapshot sent by the client to build a count plan."""

    items: list[ItemSnapshot] = Field(default_factory=list)
    events: list[CorrectionEvent] = Field(default_factory=list)
    mode: Optional[str] = None
    include_routine: Optional[bool] = None
    now: Optional[datetime] = None


class NormalizeCountsRequest(BaseSchema):
    """Raw packaging entry from a count form."""

    cases: int = 0
    units_per_case: int = 0
    units: int = 0
    eaches_per_unit: int = 0
    eaches: int = 0
