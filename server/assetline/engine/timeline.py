# assetline/engine/timeline.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from assetline.engine.instants import as_utc
from assetline.models.timeseries import CryptoSample, FinanceDayPoint

logger = logging.getLogger(__name__)


def merge_timelines(
    crypto_series: Sequence[CryptoSample],
    finance_series: Sequence[FinanceDayPoint],
) -> list[datetime]:
    """Sorted, de-duplicated union of timestamps of both series.

    Empty in, empty out: whether that is an error is up to the caller.
    """
    stamps = {as_utc(p.timestamp) for p in crypto_series}
    stamps.update(as_utc(p.timestamp) for p in finance_series)

    timeline = sorted(stamps)
    logger.debug(
        "timeline: %d crypto + %d finance -> %d points",
        len(crypto_series), len(finance_series), len(timeline),
    )
    return timeline
