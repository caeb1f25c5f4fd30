# assetline/routers/finance.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from assetline.db import get_db
from assetline.engine.instants import as_utc
from assetline.models.finance import (
    FinanceSourceCreate,
    FinanceSourceItem,
    FinanceSourceUpdate,
    FinanceBalance,
    LatestStatementItem,
    StatementCreate,
    StatementItem,
)
from assetline.orm_models import FinanceSourceORM, FinanceStatementORM
from assetline.repositories import FinanceSourceRepository

router = APIRouter()


def _s_or_404(repo: FinanceSourceRepository, sid: UUID) -> FinanceSourceORM:
    s = repo.get_by_id(str(sid))
    if not s:
        raise HTTPException(status_code=404, detail="Finance source not found")
    return s


def _source_item(s: FinanceSourceORM) -> FinanceSourceItem:
    return FinanceSourceItem(
        id=UUID(s.id),
        name=s.name,
        type=s.type,
        account_number=s.account_number,
        description=s.description,
        currency=s.currency,
        created_at=as_utc(s.created_at),
    )


def _statement_item(st: FinanceStatementORM) -> StatementItem:
    return StatementItem(
        id=UUID(st.id),
        finance_source_id=UUID(st.finance_source_id),
        statement_date=as_utc(st.statement_date),
        account_balance=st.account_balance,
        account_balance_usd=st.account_balance_usd,
        file_name=st.file_name,
    )


# ===== Sources =====

# /latest объявлен раньше /{sid}
@router.get("/finance/sources/latest", response_model=list[LatestStatementItem])
def latest_statements(db: Session = Depends(get_db)):
    return [
        LatestStatementItem(**_statement_item(st).model_dump(), source_name=s.name, source_type=s.type)
        for st, s in FinanceSourceRepository(db).get_latest_statements()
    ]


@router.get("/finance/balance", response_model=FinanceBalance)
def finance_balance(db: Session = Depends(get_db)):
    repo = FinanceSourceRepository(db)
    return FinanceBalance(
        total_balance_usd=repo.get_total_balance(),
        sources=len(repo.get_latest_statements()),
    )


@router.get("/finance/sources", response_model=list[FinanceSourceItem])
def list_sources(db: Session = Depends(get_db)):
    return [_source_item(s) for s in FinanceSourceRepository(db).get_all()]


@router.post("/finance/sources", response_model=FinanceSourceItem, status_code=status.HTTP_201_CREATED)
def create_source(body: FinanceSourceCreate, db: Session = Depends(get_db)):
    s = FinanceSourceRepository(db).create(
        name=body.name.strip(),
        type=body.type.strip().lower(),
        account_number=(body.account_number.strip() if body.account_number else None),
        description=body.description,
        currency=body.currency.value,
    )
    return _source_item(s)


@router.get("/finance/sources/{sid}", response_model=FinanceSourceItem)
def get_source(sid: UUID, db: Session = Depends(get_db)):
    return _source_item(_s_or_404(FinanceSourceRepository(db), sid))


@router.put("/finance/sources/{sid}", response_model=FinanceSourceItem)
def update_source(sid: UUID, body: FinanceSourceUpdate, db: Session = Depends(get_db)):
    repo = FinanceSourceRepository(db)
    s = _s_or_404(repo, sid)
    s = repo.update(
        s,
        name=(body.name.strip() if body.name else None),
        type=(body.type.strip().lower() if body.type else None),
        account_number=body.account_number,
        description=body.description,
    )
    return _source_item(s)


@router.delete("/finance/sources/{sid}", status_code=status.HTTP_204_NO_CONTENT)
def delete_source(sid: UUID, db: Session = Depends(get_db)):
    repo = FinanceSourceRepository(db)
    repo.delete(_s_or_404(repo, sid))
    return None


# ===== Statements =====

@router.get("/finance/sources/{sid}/statements", response_model=list[StatementItem])
def list_statements(sid: UUID, db: Session = Depends(get_db)):
    repo = FinanceSourceRepository(db)
    _s_or_404(repo, sid)
    return [_statement_item(st) for st in repo.get_statements(str(sid))]


@router.post("/finance/sources/{sid}/statements", response_model=StatementItem, status_code=status.HTTP_201_CREATED)
def add_statement(sid: UUID, body: StatementCreate, db: Session = Depends(get_db)):
    repo = FinanceSourceRepository(db)
    _s_or_404(repo, sid)
    st = repo.add_statement(
        source_id=str(sid),
        statement_date=body.statement_date,
        account_balance=body.account_balance,
        account_balance_usd=body.account_balance_usd,
        file_name=body.file_name,
    )
    return _statement_item(st)
