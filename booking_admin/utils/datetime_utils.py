"""
Datetime helpers.

Timestamps are persisted as naive UTC so range comparisons behave the same
on every database backend.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    """Current UTC time without tzinfo"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[Union[datetime, date]]) -> Optional[datetime]:
    """
    Normalise a date or datetime to a naive UTC datetime.

    Plain dates become midnight; aware datetimes are converted to UTC first.
    """
    if value is None:
        return None
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open interval overlap: [a, b) and [c, d) overlap iff a < d and c < b"""
    return start_a < end_b and start_b < end_a
