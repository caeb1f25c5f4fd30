from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, condecimal

from assetline.models.common import Currency


class FinanceSourceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    type: str = Field(min_length=1, max_length=32)  # bank, broker, savings...
    account_number: Optional[str] = Field(default=None, max_length=64)
    description: Optional[str] = None
    currency: Currency = Currency.usd

class FinanceSourceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=64)
    type: Optional[str] = Field(default=None, min_length=1, max_length=32)
    account_number: Optional[str] = Field(default=None, max_length=64)
    description: Optional[str] = None

class FinanceSourceItem(BaseModel):
    id: UUID
    name: str
    type: str
    account_number: Optional[str]
    description: Optional[str]
    currency: Currency
    created_at: datetime

class StatementCreate(BaseModel):
    statement_date: datetime
    account_balance: condecimal(max_digits=18, decimal_places=2)
    # если не указано — считаем, что источник уже в USD
    account_balance_usd: Optional[condecimal(max_digits=18, decimal_places=2)] = None
    file_name: Optional[str] = Field(default=None, max_length=255)

class StatementItem(BaseModel):
    id: UUID
    finance_source_id: UUID
    statement_date: datetime
    account_balance: condecimal(max_digits=18, decimal_places=2)
    account_balance_usd: condecimal(max_digits=18, decimal_places=2)
    file_name: Optional[str]

class LatestStatementItem(StatementItem):
    source_name: str
    source_type: str

class FinanceBalance(BaseModel):
    total_balance_usd: condecimal(max_digits=18, decimal_places=2)
    sources: int  # источников с хотя бы одной выпиской
