# assetline/engine/assemble.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional, Sequence

from assetline.config import CHART_DEFAULT_DAYS
from assetline.engine.instants import as_utc
from assetline.errors import InvalidRangeError
from assetline.models.timeseries import CryptoValues, FinanceValues, UnifiedPoint, UnifiedSeriesOptions


class Window(NamedTuple):
    start: datetime
    end: datetime
    include_crypto: bool
    include_finance: bool


def resolve_window(
    options: Optional[UnifiedSeriesOptions] = None,
    now: Optional[datetime] = None,
    default_days: int = CHART_DEFAULT_DAYS,
) -> Window:
    """Fill in defaults: last ``default_days`` days, both series enabled."""
    options = options or UnifiedSeriesOptions()

    end = as_utc(options.end_date) if options.end_date else as_utc(now or datetime.now(timezone.utc))
    start = as_utc(options.start_date) if options.start_date else end - timedelta(days=default_days)

    if start > end:
        raise InvalidRangeError(f"start {start.isoformat()} is after end {end.isoformat()}")

    return Window(start, end, options.include_crypto, options.include_finance)


def assemble(
    timeline: Sequence[datetime],
    values: Sequence[tuple[Optional[CryptoValues], Optional[FinanceValues]]],
) -> list[UnifiedPoint]:
    if len(timeline) != len(values):
        raise ValueError(f"timeline has {len(timeline)} points but {len(values)} values")

    return [
        UnifiedPoint(timestamp=t, crypto=crypto, finance=finance)
        for t, (crypto, finance) in zip(timeline, values)
    ]
