# assetline/engine/builders.py
"""Source series builders.

Finance statements arrive sparse and per account, so they are folded into a
per-day forward-filled series. Crypto samples are already full portfolio
snapshots and only need ordering.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from itertools import groupby
from typing import Iterable

from assetline.engine.instants import as_utc, to_millis, utc_midnight
from assetline.models.timeseries import CryptoSample, FinanceDayPoint, FinanceStatement, SourceBalance

logger = logging.getLogger(__name__)


def _statement_day(s: FinanceStatement) -> date:
    return as_utc(s.statement_date).date()


def build_finance_series(statements: Iterable[FinanceStatement]) -> list[FinanceDayPoint]:
    """Forward-fill raw statements into one point per calendar date (UTC).

    Every point carries the latest known balance of each source seen so far;
    within a single day the last statement of a source wins.
    """
    # sorted() стабилен: при равных датах сохраняется порядок входа
    ordered = sorted(statements, key=lambda s: as_utc(s.statement_date))

    latest: dict[str, SourceBalance] = {}
    out: list[FinanceDayPoint] = []

    for day, group in groupby(ordered, key=_statement_day):
        for s in group:
            latest[s.source_id] = SourceBalance(
                source_id=s.source_id,
                source_name=s.source_name,
                source_type=s.source_type,
                balance=s.balance_usd,
            )

        balances = list(latest.values())
        out.append(
            FinanceDayPoint(
                timestamp=utc_midnight(day),
                total_balance=sum((b.balance for b in balances), Decimal("0")),
                source_balances=balances,
            )
        )

    logger.debug("finance series: %d statements -> %d day points", len(ordered), len(out))
    return out


def build_crypto_series(samples: Iterable[CryptoSample]) -> list[CryptoSample]:
    """Sort snapshots ascending at millisecond resolution.

    Samples that land on the same millisecond collapse to the later input.
    """
    by_ts: dict[datetime, CryptoSample] = {}
    dupes = 0
    for s in samples:
        ts = to_millis(s.timestamp)
        if ts in by_ts:
            dupes += 1
        by_ts[ts] = s.model_copy(update={"timestamp": ts})

    if dupes:
        logger.warning("crypto series: dropped %d samples with duplicate timestamps", dupes)
    return [by_ts[ts] for ts in sorted(by_ts)]


def order_finance_series(points: Iterable[FinanceDayPoint]) -> list[FinanceDayPoint]:
    """Day points from an outside source, made strictly ascending.

    Points on the same millisecond collapse to the later input.
    """
    by_ts: dict[datetime, FinanceDayPoint] = {}
    for p in points:
        ts = to_millis(p.timestamp)
        by_ts[ts] = p.model_copy(update={"timestamp": ts})
    return [by_ts[ts] for ts in sorted(by_ts)]
