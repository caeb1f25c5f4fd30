# assetline/routers/crypto.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from assetline.db import get_db
from assetline.engine.instants import as_utc
from assetline.models.crypto import CryptoReportCreate, CryptoReportItem, DeletedCount
from assetline.orm_models import CryptoPortfolioReportORM
from assetline.repositories import CryptoPortfolioRepository

router = APIRouter()


def _report_item(r: CryptoPortfolioReportORM) -> CryptoReportItem:
    return CryptoReportItem(
        id=UUID(r.id),
        total_value_usd=r.total_value_usd,
        wallets_value_usd=r.wallets_value_usd,
        exchange_value_usd=r.exchange_value_usd,
        data=r.data or {},
        timestamp=as_utc(r.timestamp),
        created_at=as_utc(r.created_at),
    )


@router.post("/crypto/reports", response_model=CryptoReportItem, status_code=status.HTTP_201_CREATED)
def create_report(body: CryptoReportCreate, db: Session = Depends(get_db)):
    r = CryptoPortfolioRepository(db).save(
        total_value_usd=body.total_value_usd,
        wallets_value_usd=body.wallets_value_usd,
        exchange_value_usd=body.exchange_value_usd,
        data=body.data,
        timestamp=body.timestamp,
    )
    return _report_item(r)


@router.get("/crypto/reports", response_model=list[CryptoReportItem])
def list_reports(
    start: datetime = Query(...),
    end: datetime = Query(...),
    limit: int = Query(default=100, ge=0, le=1000),
    db: Session = Depends(get_db),
):
    return [_report_item(r) for r in CryptoPortfolioRepository(db).get_by_date_range(start, end, limit)]


# /latest объявлен раньше /{rid}, иначе "latest" уйдёт в UUID
@router.get("/crypto/reports/latest", response_model=CryptoReportItem)
def latest_report(db: Session = Depends(get_db)):
    r = CryptoPortfolioRepository(db).get_latest()
    if not r:
        raise HTTPException(status_code=404, detail="No crypto reports yet")
    return _report_item(r)


@router.get("/crypto/reports/{rid}", response_model=CryptoReportItem)
def get_report(rid: UUID, db: Session = Depends(get_db)):
    r = CryptoPortfolioRepository(db).get_by_id(str(rid))
    if not r:
        raise HTTPException(status_code=404, detail="Report not found")
    return _report_item(r)


@router.delete("/crypto/reports", response_model=DeletedCount)
def delete_old_reports(before: datetime = Query(...), db: Session = Depends(get_db)):
    return DeletedCount(deleted=CryptoPortfolioRepository(db).delete_older_than(before))
