"""
Count plan summary: reduces a count queue to headline numbers.

Pure reduction over already-sorted candidates: per-band counts, total
estimated minutes and the zone to start in.
"""

from typing import Iterable, Optional
import structlog

from models.count_plan import CountPlanCandidate, CountPlanSummary, PriorityBand

logger = structlog.get_logger(__name__)

# Bands that count toward the recommended zone
FOCUS_BANDS = (PriorityBand.CRITICAL, PriorityBand.HIGH)


def summarize(candidates: Iterable[CountPlanCandidate]) -> CountPlanSummary:
    """
    Summarize a count queue.

    estimated_minutes = ceil(sum(estimated_seconds) / 60)

    The recommended zone is the location holding the most critical or
    high candidates. Ties go to the zone seen first in queue order.
    An empty queue (or one without critical/high items) has no zone.
    """
    band_counts = {band: 0 for band in PriorityBand}
    routine_count = 0
    total_seconds = 0
    candidate_count = 0

    # zone_key -> [focus_count, label]; insertion order = first occurrence
    zones: dict[str, list] = {}

    for candidate in candidates:
        candidate_count += 1
        band_counts[candidate.band] += 1
        if candidate.is_routine:
            routine_count += 1
        total_seconds += max(0, candidate.estimated_seconds)

        if candidate.band in FOCUS_BANDS:
            zone = zones.setdefault(candidate.zone_key, [0, candidate.location_label])
            zone[0] += 1

    recommended_zone_label = _pick_zone(zones)

    return CountPlanSummary(
        candidate_count=candidate_count,
        critical_count=band_counts[PriorityBand.CRITICAL],
        high_count=band_counts[PriorityBand.HIGH],
        medium_count=band_counts[PriorityBand.MEDIUM],
        low_count=band_counts[PriorityBand.LOW],
        routine_count=routine_count,
        estimated_minutes=-(-total_seconds // 60),  # Ceiling division
        recommended_zone_label=recommended_zone_label,
    )


def _pick_zone(zones: dict[str, list]) -> Optional[str]:
    """Highest focus count wins; strict > keeps the earliest on ties."""
    best_label = None
    best_count = 0
    for focus_count, label in zones.values():
        if focus_count > best_count:
            best_count = focus_count
            best_label = label
    return best_label
