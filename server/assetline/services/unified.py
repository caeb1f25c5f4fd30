# assetline/services/unified.py
"""Unified asset series: crypto snapshots and finance balances on one timeline.

``build_unified_series`` is the entry point. It fetches the enabled series,
merges their timestamps and fills each point by exact lookup, interpolation or
clamping. The only exceptional exit is :class:`NoDataError`.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import NamedTuple, Optional, Protocol, Sequence

from assetline.engine.assemble import assemble, resolve_window
from assetline.engine.builders import build_crypto_series, order_finance_series
from assetline.engine.interpolate import interpolate
from assetline.engine.timeline import merge_timelines
from assetline.errors import NoDataError
from assetline.models.timeseries import (
    CryptoSample,
    FinanceDayPoint,
    UnifiedPoint,
    UnifiedSeriesOptions,
)

logger = logging.getLogger(__name__)


class CryptoSampleSource(Protocol):
    def get_crypto_samples(self, start: datetime, end: datetime) -> list[CryptoSample]: ...


class FinanceSeriesSource(Protocol):
    def get_finance_day_points(self, start: datetime, end: datetime) -> list[FinanceDayPoint]: ...


class ChartRenderer(Protocol):
    def render(
        self,
        points: Sequence[UnifiedPoint],
        *,
        title: str,
        show_crypto: bool,
        show_finance: bool,
        show_individual_sources: bool,
    ) -> bytes: ...


class UnifiedSeries(NamedTuple):
    start_date: datetime
    end_date: datetime
    points: list[UnifiedPoint]


def build_unified_series(
    crypto_source: CryptoSampleSource,
    finance_source: FinanceSeriesSource,
    options: Optional[UnifiedSeriesOptions] = None,
    now: Optional[datetime] = None,
) -> UnifiedSeries:
    w = resolve_window(options, now=now)
    logger.info(
        "unified series %s..%s crypto=%s finance=%s",
        w.start.isoformat(), w.end.isoformat(), w.include_crypto, w.include_finance,
    )

    crypto = build_crypto_series(crypto_source.get_crypto_samples(w.start, w.end)) if w.include_crypto else []
    finance = order_finance_series(finance_source.get_finance_day_points(w.start, w.end)) if w.include_finance else []

    if not crypto and not finance:
        logger.warning("no crypto or finance data in %s..%s", w.start.isoformat(), w.end.isoformat())
        raise NoDataError()

    timeline = merge_timelines(crypto, finance)
    values = interpolate(timeline, crypto, finance, w.include_crypto, w.include_finance)
    return UnifiedSeries(w.start, w.end, assemble(timeline, values))


def generate_unified_chart(
    crypto_source: CryptoSampleSource,
    finance_source: FinanceSeriesSource,
    renderer: ChartRenderer,
    options: Optional[UnifiedSeriesOptions] = None,
    title: str = "Unified Asset Overview",
    show_individual_sources: bool = False,
    now: Optional[datetime] = None,
) -> bytes:
    """Build the unified series and hand it to ``renderer``."""
    options = options or UnifiedSeriesOptions()
    series = build_unified_series(crypto_source, finance_source, options, now=now)

    return renderer.render(
        series.points,
        title=title,
        show_crypto=options.include_crypto,
        show_finance=options.include_finance,
        show_individual_sources=show_individual_sources,
    )
