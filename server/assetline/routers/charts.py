# assetline/routers/charts.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from assetline.db import get_db
from assetline.engine.assemble import resolve_window
from assetline.engine.builders import build_crypto_series
from assetline.models.timeseries import (
    CryptoSample,
    FinanceDayPoint,
    UnifiedSeriesOptions,
    UnifiedSeriesResponse,
)
from assetline.repositories import CryptoPortfolioRepository, FinanceSourceRepository
from assetline.services.unified import build_unified_series

router = APIRouter()


@router.get("/charts/unified", response_model=UnifiedSeriesResponse)
def unified_chart(
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    crypto: bool = Query(default=True),
    finance: bool = Query(default=True),
    db: Session = Depends(get_db),
):
    opts = UnifiedSeriesOptions(start_date=start, end_date=end, include_crypto=crypto, include_finance=finance)
    series = build_unified_series(CryptoPortfolioRepository(db), FinanceSourceRepository(db), opts)
    return UnifiedSeriesResponse(start_date=series.start_date, end_date=series.end_date, points=series.points)


@router.get("/charts/finance", response_model=list[FinanceDayPoint])
def finance_chart(
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    db: Session = Depends(get_db),
):
    w = resolve_window(UnifiedSeriesOptions(start_date=start, end_date=end))
    return FinanceSourceRepository(db).get_finance_day_points(w.start, w.end)


@router.get("/charts/crypto", response_model=list[CryptoSample])
def crypto_chart(
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    db: Session = Depends(get_db),
):
    w = resolve_window(UnifiedSeriesOptions(start_date=start, end_date=end))
    return build_crypto_series(CryptoPortfolioRepository(db).get_crypto_samples(w.start, w.end))
