# assetline/engine/instants.py
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

_US = timedelta(microseconds=1)


def as_utc(dt: datetime) -> datetime:
    # naive => UTC (sqlite отдаёт naive)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_millis(dt: datetime) -> datetime:
    """UTC instant truncated to millisecond resolution."""
    dt = as_utc(dt)
    return dt.replace(microsecond=dt.microsecond - dt.microsecond % 1000)


def utc_midnight(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def micros_between(a: datetime, b: datetime) -> int:
    """Whole microseconds from ``a`` to ``b`` (exact for datetimes)."""
    return (as_utc(b) - as_utc(a)) // _US
