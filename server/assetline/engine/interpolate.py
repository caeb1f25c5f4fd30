# assetline/engine/interpolate.py
"""Per-timestamp lookup over a sorted source series.

For a target instant T the value comes from, in order of preference:

* the sample stamped exactly T (verbatim)
* linear interpolation between the nearest samples before and after T
* the nearest sample on the only side that exists (clamp, no extrapolation)

An empty or disabled series yields ``None`` and the caller omits it.
"""
from __future__ import annotations

from bisect import bisect_left
from datetime import datetime
from decimal import Decimal
from typing import Any, NamedTuple, Optional, Sequence, TypeVar

from assetline.engine.instants import as_utc, micros_between
from assetline.errors import SeriesIntegrityError
from assetline.models.timeseries import (
    CryptoSample,
    CryptoValues,
    FinanceDayPoint,
    FinanceValues,
    SourceBalance,
)

P = TypeVar("P", CryptoSample, FinanceDayPoint)

_ZERO = Decimal("0")


class Neighbours(NamedTuple):
    exact: Optional[Any]
    before: Optional[Any]
    after: Optional[Any]


def _stamps(series: Sequence[P]) -> list[datetime]:
    stamps = [as_utc(p.timestamp) for p in series]
    for a, b in zip(stamps, stamps[1:]):
        if a >= b:
            raise SeriesIntegrityError(f"series is not strictly ascending at {b.isoformat()}")
    return stamps


def find_neighbours(series: Sequence[P], t: datetime, stamps: Optional[list[datetime]] = None) -> Neighbours:
    if stamps is None:
        stamps = _stamps(series)
    t = as_utc(t)

    i = bisect_left(stamps, t)
    if i < len(stamps) and stamps[i] == t:
        return Neighbours(series[i], None, None)

    before = series[i - 1] if i > 0 else None
    after = series[i] if i < len(series) else None
    return Neighbours(None, before, after)


def _ratio(before: datetime, after: datetime, t: datetime) -> Decimal:
    return Decimal(micros_between(before, t)) / Decimal(micros_between(before, after))


def _lerp(a: Decimal, b: Decimal, ratio: Decimal) -> Decimal:
    return a + ratio * (b - a)


# ===== crypto =====

def _crypto_values(p: CryptoSample) -> CryptoValues:
    return CryptoValues(
        total_value_usd=p.total_value_usd,
        wallets_value_usd=p.wallets_value_usd,
        exchange_value_usd=p.exchange_value_usd,
    )


def interpolate_crypto(
    series: Sequence[CryptoSample],
    t: datetime,
    stamps: Optional[list[datetime]] = None,
) -> Optional[CryptoValues]:
    if not series:
        return None

    n = find_neighbours(series, t, stamps)
    if n.exact is not None:
        return _crypto_values(n.exact)
    if n.before is not None and n.after is not None:
        r = _ratio(n.before.timestamp, n.after.timestamp, t)
        return CryptoValues(
            total_value_usd=_lerp(n.before.total_value_usd, n.after.total_value_usd, r),
            wallets_value_usd=_lerp(n.before.wallets_value_usd, n.after.wallets_value_usd, r),
            exchange_value_usd=_lerp(n.before.exchange_value_usd, n.after.exchange_value_usd, r),
        )

    # clamp
    edge = n.before if n.before is not None else n.after
    return _crypto_values(edge)


# ===== finance =====

def _finance_values(p: FinanceDayPoint) -> FinanceValues:
    return FinanceValues(total_balance=p.total_balance, source_balances=list(p.source_balances))


def _interpolate_sources(before: FinanceDayPoint, after: FinanceDayPoint, ratio: Decimal) -> list[SourceBalance]:
    after_by_id = {b.source_id: b for b in after.source_balances}
    out: list[SourceBalance] = []

    for b in before.source_balances:
        a = after_by_id.pop(b.source_id, None)
        if a is None:
            out.append(b)
            continue
        # имя/тип берём из before
        out.append(b.model_copy(update={"balance": _lerp(b.balance, a.balance, ratio)}))

    # источники, появившиеся только в after
    out.extend(after_by_id.values())
    return out


def interpolate_finance(
    series: Sequence[FinanceDayPoint],
    t: datetime,
    stamps: Optional[list[datetime]] = None,
) -> Optional[FinanceValues]:
    if not series:
        return None

    n = find_neighbours(series, t, stamps)
    if n.exact is not None:
        return _finance_values(n.exact)
    if n.before is not None and n.after is not None:
        r = _ratio(n.before.timestamp, n.after.timestamp, t)
        sources = _interpolate_sources(n.before, n.after, r)
        return FinanceValues(
            total_balance=sum((s.balance for s in sources), _ZERO),
            source_balances=sources,
        )

    edge = n.before if n.before is not None else n.after
    return _finance_values(edge)


def interpolate(
    timeline: Sequence[datetime],
    crypto_series: Sequence[CryptoSample],
    finance_series: Sequence[FinanceDayPoint],
    include_crypto: bool = True,
    include_finance: bool = True,
) -> list[tuple[Optional[CryptoValues], Optional[FinanceValues]]]:
    """Crypto and finance sub-values for every timestamp of ``timeline``."""
    crypto = crypto_series if include_crypto else ()
    finance = finance_series if include_finance else ()

    crypto_stamps = _stamps(crypto)
    finance_stamps = _stamps(finance)

    return [
        (
            interpolate_crypto(crypto, t, crypto_stamps),
            interpolate_finance(finance, t, finance_stamps),
        )
        for t in timeline
    ]
