# assetline/repositories.py
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from assetline.config import CRYPTO_SAMPLE_LIMIT
from assetline.engine.builders import build_finance_series
from assetline.engine.instants import as_utc
from assetline.orm_models import CryptoPortfolioReportORM, FinanceSourceORM, FinanceStatementORM
from assetline.models.timeseries import CryptoSample, FinanceDayPoint, FinanceStatement

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown Source"
UNKNOWN_TYPE = "Unknown Type"


class CryptoPortfolioRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(
        self,
        total_value_usd: Decimal,
        wallets_value_usd: Decimal,
        exchange_value_usd: Decimal,
        data: Optional[dict[str, Any]] = None,
        timestamp: Optional[datetime] = None,
    ) -> CryptoPortfolioReportORM:
        r = CryptoPortfolioReportORM(
            total_value_usd=total_value_usd,
            wallets_value_usd=wallets_value_usd,
            exchange_value_usd=exchange_value_usd,
            data=data or {},
        )
        if timestamp is not None:
            r.timestamp = as_utc(timestamp)

        self.db.add(r)
        self.db.commit()
        self.db.refresh(r)
        return r

    def get_by_id(self, rid: str) -> Optional[CryptoPortfolioReportORM]:
        return self.db.get(CryptoPortfolioReportORM, rid)

    def get_latest(self) -> Optional[CryptoPortfolioReportORM]:
        return self.db.execute(
            select(CryptoPortfolioReportORM)
            .order_by(CryptoPortfolioReportORM.timestamp.desc())
            .limit(1)
        ).scalar_one_or_none()

    def get_by_date_range(self, start: datetime, end: datetime, limit: int = 100) -> list[CryptoPortfolioReportORM]:
        # полные отчёты, свежие первыми
        stmt = (
            select(CryptoPortfolioReportORM)
            .where(
                CryptoPortfolioReportORM.timestamp >= as_utc(start),
                CryptoPortfolioReportORM.timestamp <= as_utc(end),
            )
            .order_by(CryptoPortfolioReportORM.timestamp.desc())
        )
        if limit > 0:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_crypto_samples(self, start: datetime, end: datetime, limit: int = CRYPTO_SAMPLE_LIMIT) -> list[CryptoSample]:
        stmt = (
            select(CryptoPortfolioReportORM)
            .where(
                CryptoPortfolioReportORM.timestamp >= as_utc(start),
                CryptoPortfolioReportORM.timestamp <= as_utc(end),
            )
            .order_by(CryptoPortfolioReportORM.timestamp.asc())
        )
        if limit > 0:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        return [
            CryptoSample(
                timestamp=as_utc(r.timestamp),
                total_value_usd=Decimal(r.total_value_usd),
                wallets_value_usd=Decimal(r.wallets_value_usd),
                exchange_value_usd=Decimal(r.exchange_value_usd),
            )
            for r in rows
        ]

    def delete_older_than(self, ts: datetime) -> int:
        res = self.db.execute(
            delete(CryptoPortfolioReportORM)
            .where(CryptoPortfolioReportORM.timestamp < as_utc(ts))
            .execution_options(synchronize_session="fetch")
        )
        n = res.rowcount or 0
        self.db.commit()
        logger.info("deleted %d crypto reports older than %s", n, ts.isoformat())
        return n


class FinanceSourceRepository:
    def __init__(self, db: Session):
        self.db = db

    # ===== sources =====

    def create(
        self,
        name: str,
        type: str,
        account_number: Optional[str] = None,
        description: Optional[str] = None,
        currency: str = "USD",
    ) -> FinanceSourceORM:
        s = FinanceSourceORM(
            name=name,
            type=type,
            account_number=account_number,
            description=description,
            currency=currency,
        )
        self.db.add(s)
        self.db.commit()
        self.db.refresh(s)
        return s

    def get_all(self) -> list[FinanceSourceORM]:
        return list(
            self.db.execute(select(FinanceSourceORM).order_by(FinanceSourceORM.name.asc())).scalars().all()
        )

    def get_by_id(self, sid: str) -> Optional[FinanceSourceORM]:
        return self.db.get(FinanceSourceORM, sid)

    def update(self, s: FinanceSourceORM, **fields: Any) -> FinanceSourceORM:
        for k, v in fields.items():
            if v is not None:
                setattr(s, k, v)
        self.db.add(s)
        self.db.commit()
        self.db.refresh(s)
        return s

    def delete(self, s: FinanceSourceORM) -> None:
        self.db.delete(s)
        self.db.commit()

    # ===== statements =====

    def add_statement(
        self,
        source_id: str,
        statement_date: datetime,
        account_balance: Decimal,
        account_balance_usd: Optional[Decimal] = None,
        file_name: Optional[str] = None,
    ) -> FinanceStatementORM:
        st = FinanceStatementORM(
            finance_source_id=source_id,
            statement_date=as_utc(statement_date),
            account_balance=account_balance,
            account_balance_usd=(account_balance if account_balance_usd is None else account_balance_usd),
            file_name=file_name,
        )
        self.db.add(st)
        self.db.commit()
        self.db.refresh(st)
        return st

    def get_statements(self, source_id: str) -> list[FinanceStatementORM]:
        return list(
            self.db.execute(
                select(FinanceStatementORM)
                .where(FinanceStatementORM.finance_source_id == source_id)
                .order_by(FinanceStatementORM.statement_date.desc())
            ).scalars().all()
        )

    def get_latest_statement(self, source_id: str) -> Optional[FinanceStatementORM]:
        return self.db.execute(
            select(FinanceStatementORM)
            .where(FinanceStatementORM.finance_source_id == source_id)
            .order_by(FinanceStatementORM.statement_date.desc())
            .limit(1)
        ).scalar_one_or_none()

    def get_latest_statements(self) -> list[tuple[FinanceStatementORM, FinanceSourceORM]]:
        """Latest statement of every source that has one, by source name."""
        out: list[tuple[FinanceStatementORM, FinanceSourceORM]] = []
        for s in self.get_all():
            st = self.get_latest_statement(s.id)
            if st is not None:
                out.append((st, s))
        return out

    def get_total_balance(self) -> Decimal:
        return sum((Decimal(st.account_balance_usd) for st, _ in self.get_latest_statements()), Decimal("0"))

    def get_finance_statements(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> list[FinanceStatement]:
        stmt = (
            select(FinanceStatementORM, FinanceSourceORM)
            .outerjoin(FinanceSourceORM, FinanceStatementORM.finance_source_id == FinanceSourceORM.id)
            .order_by(FinanceStatementORM.statement_date.asc(), FinanceStatementORM.created_at.asc())
        )
        if start is not None:
            stmt = stmt.where(FinanceStatementORM.statement_date >= as_utc(start))
        if end is not None:
            stmt = stmt.where(FinanceStatementORM.statement_date <= as_utc(end))

        out: list[FinanceStatement] = []
        for st, src in self.db.execute(stmt).all():
            out.append(
                FinanceStatement(
                    source_id=st.finance_source_id,
                    source_name=(src.name if src and src.name else UNKNOWN_SOURCE),
                    source_type=(src.type if src and src.type else UNKNOWN_TYPE),
                    statement_date=as_utc(st.statement_date),
                    balance_usd=Decimal(st.account_balance_usd),
                )
            )
        return out

    def get_finance_day_points(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> list[FinanceDayPoint]:
        return build_finance_series(self.get_finance_statements(start, end))
