"""
Cycle count planning service: Core "what to count next" logic.

Scores every item for recount risk and builds an ordered count queue.
All factors add into one integer score:

    count age (staleness)         x mode staleness weight
    units moved since last count  x mode demand weight
    cover vs lead time            x mode lead-time weight
    lead time length              x mode lead-time weight
    recent corrections            x mode correction weight
    missing planning inputs, missing barcode, no zone   (fixed)

Every factor is non-decreasing in its input and every weight is
non-negative, so an older count or more corrections never lowers a score.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
import structlog

from config.planning import (
    CORRECTION_WINDOW_DAYS,
    UNNAMED_ITEM_LABEL,
    NO_LOCATION_LABEL,
    NO_LOCATION_ZONE_KEY,
    ROUTINE_REASON,
    MAX_REASONS,
    COUNT_AGE_TIERS,
    DEMAND_EXPOSURE_TIERS,
    LEAD_TIME_TIERS,
    OUT_OF_STOCK_POINTS,
    URGENT_COVER_POINTS,
    AT_RISK_COVER_POINTS,
    URGENT_COVER_RATIO,
    MISSING_PLANNING_INPUTS_POINTS,
    MISSING_BARCODE_POINTS,
    NO_LOCATION_POINTS,
    CORRECTION_TIERS,
    CRITICAL_THRESHOLD,
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
    LOW_THRESHOLD,
    COUNT_BASE_SECONDS,
    COUNT_SECONDS_PER_STEP,
    COUNT_UNITS_PER_STEP,
    COUNT_UNIT_SECONDS_CAP,
    LIQUID_EXTRA_SECONDS,
    MISSING_BARCODE_EXTRA_SECONDS,
    NO_LOCATION_EXTRA_SECONDS,
)
from models.count_plan import (
    CountPlanInput,
    CountPlanCandidate,
    CountPlanResult,
    PlanMode,
    PriorityBand,
)
from models.item import ItemSnapshot, CorrectionEvent
from services.plan_summary_service import summarize
from services.unit_normalizer_service import total_units_on_hand
from utils.date_utils import as_utc, whole_days_between
from utils.text_utils import clean_label, normalize_zone_key, name_sort_key

logger = structlog.get_logger(__name__)


def recent_correction_counts(
    events: Iterable[CorrectionEvent],
    now: datetime,
) -> dict[str, int]:
    """
    Count correction-like events per item in the trailing window.

    Window lower bound is now - 30 days, inclusive. Events without an
    item reference are ignored.
    """
    cutoff = as_utc(now) - timedelta(days=CORRECTION_WINDOW_DAYS)
    counts: dict[str, int] = defaultdict(int)

    for event in events:
        if event.item_id is None:
            continue
        if as_utc(event.created_at) < cutoff:
            continue
        if not event.is_correction_like:
            continue
        counts[event.item_id] += 1

    return dict(counts)


def assign_band(
    score: int,
    missing_barcode: bool = False,
    missing_planning_inputs: bool = False,
) -> Optional[PriorityBand]:
    """
    Map a score to a band, then apply minimum-band overrides.

    Thresholds: critical >= 58, high >= 40, medium >= 24, low >= 12.
    Missing planning inputs -> at least MEDIUM.
    Missing barcode -> at least LOW.

    Returns:
        The band, or None when the item is routine (below LOW).
    """
    if score >= CRITICAL_THRESHOLD:
        band = PriorityBand.CRITICAL
    elif score >= HIGH_THRESHOLD:
        band = PriorityBand.HIGH
    elif score >= MEDIUM_THRESHOLD:
        band = PriorityBand.MEDIUM
    elif score >= LOW_THRESHOLD:
        band = PriorityBand.LOW
    else:
        band = None

    if missing_planning_inputs:
        floor = PriorityBand.MEDIUM
    elif missing_barcode:
        floor = PriorityBand.LOW
    else:
        floor = None

    if floor is not None and (band is None or band.rank < floor.rank):
        band = floor

    return band


def estimate_count_seconds(
    on_hand_units: int,
    is_liquid: bool = False,
    missing_barcode: bool = False,
    has_location: bool = True,
) -> int:
    """
    Seconds to physically count one item.

    Base 60s, +4s per 10 units on hand (capped at +90s), +45s for
    liquids, +16s without a barcode to scan, +14s without a zone.
    """
    steps = max(0, on_hand_units) // COUNT_UNITS_PER_STEP
    seconds = COUNT_BASE_SECONDS + min(COUNT_UNIT_SECONDS_CAP, steps * COUNT_SECONDS_PER_STEP)
    if is_liquid:
        seconds += LIQUID_EXTRA_SECONDS
    if missing_barcode:
        seconds += MISSING_BARCODE_EXTRA_SECONDS
    if not has_location:
        seconds += NO_LOCATION_EXTRA_SECONDS
    return seconds


def _tier_points(value, tiers) -> int:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def _weighted(points: int, weight: Decimal) -> int:
    return int((Decimal(points) * weight).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _format_days(value: Decimal) -> str:
    return f"{value:.1f}"


def _format_units(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CountPlanService:
    """
    Cycle count planning business logic.

    Stateless: every method works only on its arguments, and `now` is
    always passed in.
    """

    def build_plan_inputs(
        self,
        items: Iterable[ItemSnapshot],
        events: Iterable[CorrectionEvent],
        now: datetime,
    ) -> list[CountPlanInput]:
        """
        Project item snapshots into engine inputs.

        Demand is max(historical average, moving average). Planning
        inputs are "missing" when demand or lead time is not positive.
        """
        correction_counts = recent_correction_counts(events, now)

        inputs = []
        for item in items:
            demand = item.forecast_daily_demand
            lead_time = item.lead_time_days
            inputs.append(CountPlanInput(
                id=item.id,
                item_name=clean_label(item.name) or UNNAMED_ITEM_LABEL,
                location_label=item.location,
                on_hand_units=total_units_on_hand(item),
                average_daily_usage=demand,
                lead_time_days=lead_time,
                last_counted_at=item.last_updated_at,
                missing_barcode=not clean_label(item.barcode),
                missing_planning_inputs=demand <= 0 or lead_time <= 0,
                recent_correction_count=correction_counts.get(item.id, 0),
                is_liquid=item.is_liquid,
            ))

        return inputs

    def evaluate(
        self,
        plan_input: CountPlanInput,
        mode: PlanMode,
        now: datetime,
    ) -> CountPlanCandidate:
        """Score one input and build its candidate (routine or not)."""
        profile = mode.profile

        location = clean_label(plan_input.location_label)
        zone_key = normalize_zone_key(location) or NO_LOCATION_ZONE_KEY
        on_hand = max(0, plan_input.on_hand_units)
        demand = max(Decimal("0"), plan_input.average_daily_usage)
        lead_time = max(0, plan_input.lead_time_days)
        corrections = max(0, plan_input.recent_correction_count)
        days_since_count = whole_days_between(plan_input.last_counted_at, now)
        missing_inputs = plan_input.missing_planning_inputs or demand <= 0 or lead_time <= 0

        # (points, reason) in a fixed order; order breaks reason ties
        factors: list[tuple[int, str]] = []

        # Staleness
        age_points = _weighted(_tier_points(days_since_count, COUNT_AGE_TIERS), profile.staleness_weight)
        if age_points > 0:
            factors.append((age_points, f"Count age is {days_since_count}d."))

        # Demand-adjusted staleness: fast movers drift faster
        units_moved = demand * days_since_count
        exposure_points = _weighted(_tier_points(units_moved, DEMAND_EXPOSURE_TIERS), profile.demand_weight)
        if exposure_points > 0:
            factors.append((
                exposure_points,
                f"About {_format_units(units_moved)} units moved since last count.",
            ))

        # Cover vs lead time
        if missing_inputs:
            factors.append((MISSING_PLANNING_INPUTS_POINTS, "Missing demand or lead-time inputs."))
        else:
            cover_points, cover_reason = self._cover_risk(on_hand, demand, lead_time)
            cover_points = _weighted(cover_points, profile.lead_time_weight)
            if cover_points > 0:
                factors.append((cover_points, cover_reason))

        # Lead-time exposure
        lead_points = _weighted(_tier_points(lead_time, LEAD_TIME_TIERS), profile.lead_time_weight)
        if lead_points > 0:
            factors.append((lead_points, f"Lead time is {lead_time}d."))

        if plan_input.missing_barcode:
            factors.append((MISSING_BARCODE_POINTS, "Barcode missing."))

        if not location:
            factors.append((NO_LOCATION_POINTS, "No zone assigned."))

        # Correction pressure
        correction_points = _weighted(_tier_points(corrections, CORRECTION_TIERS), profile.correction_weight)
        if correction_points > 0:
            if corrections >= CORRECTION_TIERS[0][0]:
                reason = f"{corrections} corrections in last 30 days."
            else:
                reason = f"{corrections} recent correction(s)."
            factors.append((correction_points, reason))

        score = sum(points for points, _ in factors)
        band = assign_band(
            score,
            missing_barcode=plan_input.missing_barcode,
            missing_planning_inputs=missing_inputs,
        )
        is_routine = band is None

        ranked = sorted(range(len(factors)), key=lambda i: (-factors[i][0], i))
        reasons = [factors[i][1] for i in ranked]
        if is_routine or not reasons:
            reasons.insert(0, ROUTINE_REASON)

        return CountPlanCandidate(
            id=plan_input.id,
            item_name=plan_input.item_name,
            location_label=location or NO_LOCATION_LABEL,
            zone_key=zone_key,
            on_hand_units=on_hand,
            days_since_count=days_since_count,
            score=score,
            band=band or PriorityBand.LOW,
            is_routine=is_routine,
            reasons=tuple(reasons[:MAX_REASONS]),
            estimated_seconds=estimate_count_seconds(
                on_hand,
                is_liquid=plan_input.is_liquid,
                missing_barcode=plan_input.missing_barcode,
                has_location=bool(location),
            ),
        )

    def _cover_risk(self, on_hand: int, demand: Decimal, lead_time: int) -> tuple[int, str]:
        """
        Days-of-cover risk against the supplier lead time.

        Out of stock > cover within half the lead time > cover within lead time.
        """
        if on_hand == 0:
            return OUT_OF_STOCK_POINTS, "Out of stock with active demand."

        days_of_cover = Decimal(on_hand) / demand
        urgent_threshold = max(Decimal("1"), lead_time * URGENT_COVER_RATIO)
        risk_threshold = max(Decimal("1"), Decimal(lead_time))

        if days_of_cover <= urgent_threshold:
            return URGENT_COVER_POINTS, (
                f"Cover is {_format_days(days_of_cover)}d vs urgent {_format_days(urgent_threshold)}d."
            )
        if days_of_cover <= risk_threshold:
            return AT_RISK_COVER_POINTS, (
                f"Cover is {_format_days(days_of_cover)}d vs lead {_format_days(risk_threshold)}d."
            )
        return 0, ""

    def build_plan(
        self,
        inputs: Iterable[CountPlanInput],
        mode: PlanMode,
        now: datetime,
        include_routine: bool = False,
    ) -> list[CountPlanCandidate]:
        """
        Build the ordered count queue.

        Order: score desc, then days since count desc, then item name
        (case-insensitive) asc, then id. Routine items are dropped unless
        include_routine. The queue is capped at the mode's item limit.

        Returns:
            Candidates, highest risk first. Empty input gives [].
        """
        candidates = [self.evaluate(plan_input, mode, now) for plan_input in inputs]
        evaluated_count = len(candidates)

        if not include_routine:
            candidates = [c for c in candidates if not c.is_routine]

        candidates.sort(key=lambda c: (
            -c.score,
            -c.days_since_count,
            name_sort_key(c.item_name),
            c.id,
        ))
        queue = candidates[:mode.item_limit]

        logger.info(
            "count_plan_built",
            mode=mode.value,
            evaluated=evaluated_count,
            eligible=len(candidates),
            queued=len(queue),
            include_routine=include_routine,
        )

        return queue

    def plan_session(
        self,
        items: Iterable[ItemSnapshot],
        events: Iterable[CorrectionEvent],
        mode: PlanMode,
        now: datetime,
        include_routine: bool = False,
    ) -> CountPlanResult:
        """Snapshot -> inputs -> queue -> summary in one call."""
        inputs = self.build_plan_inputs(items, events, now)
        candidates = self.build_plan(inputs, mode, now, include_routine=include_routine)

        return CountPlanResult(
            mode=mode,
            target_duration_minutes=mode.target_duration_minutes,
            generated_at=now,
            candidates=tuple(candidates),
            summary=summarize(candidates),
        )


# Singleton instance
_count_plan_service: Optional[CountPlanService] = None


def get_count_plan_service() -> CountPlanService:
    """Get or create CountPlanService instance."""
    global _count_plan_service
    if _count_plan_service is None:
        _count_plan_service = CountPlanService()
    return _count_plan_service
