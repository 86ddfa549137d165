"""Datetime helpers shared by the planning services."""

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Full days elapsed from start to end, never negative."""
    return max(0, (as_utc(end) - as_utc(start)).days)
