"""Calendar decomposition of event timestamps (always UTC, no timezone negotiation)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class CalendarDate:
    """Calendar components of a UTC instant."""

    year: int
    month: int
    day: int
    hour: int
    minute: int


def to_utc(timestamp: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def decompose(timestamp: datetime) -> CalendarDate:
    """Split an instant into UTC calendar components."""
    utc = to_utc(timestamp)
    return CalendarDate(
        year=utc.year,
        month=utc.month,
        day=utc.day,
        hour=utc.hour,
        minute=utc.minute,
    )


def date_only(timestamp: datetime) -> str:
    """Format an instant as ``YYYY-MM-DD`` in UTC."""
    return to_utc(timestamp).date().isoformat()
