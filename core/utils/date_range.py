"""
Interval arithmetic for calendar events.

Intervals are half-open: [start, end). Two intervals that only touch
(one ends exactly when the other starts) do not overlap.
"""

from datetime import datetime

from dateutil.relativedelta import relativedelta

from core.domain.models import OverlapKind

_UNITS = {
    "day": lambda n: relativedelta(days=n),
    "week": lambda n: relativedelta(weeks=n),
    "month": lambda n: relativedelta(months=n),
}


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share any instant."""
    return a_start < b_end and a_end > b_start


def classify(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> OverlapKind:
    """
    Describe where interval B sits relative to query interval A.

    Checks run in precedence order; ADJACENT is the fallback for
    intervals that passed the overlaps() pre-filter but match no other kind.
    """
    if b_start < a_start and b_end > a_end:
        return OverlapKind.ENCOMPASSES
    if b_start >= a_start and b_end <= a_end:
        return OverlapKind.WITHIN
    if b_start < a_start and b_end > a_start:
        return OverlapKind.OVERLAPS_START
    if b_start < a_end and b_end > a_end:
        return OverlapKind.OVERLAPS_END
    return OverlapKind.ADJACENT


def add_interval(date: datetime, unit: str, count: int) -> datetime:
    """
    Add `count` calendar units ("day", "week", "month") to `date`.

    Month steps clamp to the last day of the target month,
    so Jan 31 + 1 month is Feb 28 (or 29), never Mar 3.
    """
    try:
        step = _UNITS[unit]
    except KeyError:
        raise ValueError(f"Unknown interval unit: {unit}") from None
    return date + step(count)
