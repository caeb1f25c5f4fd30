from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CryptoSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    total_value_usd: Decimal
    wallets_value_usd: Decimal
    exchange_value_usd: Decimal


class FinanceStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_id: str
    source_name: str
    source_type: str
    statement_date: datetime
    balance_usd: Decimal


class SourceBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_id: str
    source_name: str
    source_type: str
    balance: Decimal


class FinanceDayPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    total_balance: Decimal
    source_balances: List[SourceBalance] = Field(default_factory=list)


class CryptoValues(BaseModel):
    total_value_usd: Decimal
    wallets_value_usd: Decimal
    exchange_value_usd: Decimal


class FinanceValues(BaseModel):
    total_balance: Decimal
    source_balances: List[SourceBalance]


class UnifiedPoint(BaseModel):
    timestamp: datetime
    crypto: Optional[CryptoValues] = None
    finance: Optional[FinanceValues] = None


class UnifiedSeriesOptions(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    include_crypto: bool = True
    include_finance: bool = True


class UnifiedSeriesResponse(BaseModel):
    start_date: datetime
    end_date: datetime
    points: List[UnifiedPoint]
