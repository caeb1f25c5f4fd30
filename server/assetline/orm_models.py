# assetline/orm_models.py
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, String, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assetline.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CryptoPortfolioReportORM(Base):
    __tablename__ = "crypto_portfolio_report"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    total_value_usd: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    wallets_value_usd: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    exchange_value_usd: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))

    # сырые данные отчёта (кошельки, биржи) — движку не нужны
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class FinanceSourceORM(Base):
    __tablename__ = "finance_source"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)

    account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    statements: Mapped[list["FinanceStatementORM"]] = relationship(
        back_populates="source",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class FinanceStatementORM(Base):
    __tablename__ = "finance_statement"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    finance_source_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("finance_source.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    statement_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    # в валюте источника и в USD
    account_balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    account_balance_usd: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    source: Mapped["FinanceSourceORM"] = relationship(back_populates="statements")
