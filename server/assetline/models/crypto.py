from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, condecimal


class CryptoReportCreate(BaseModel):
    total_value_usd: condecimal(max_digits=18, decimal_places=2)
    wallets_value_usd: condecimal(max_digits=18, decimal_places=2) = Decimal("0.00")
    exchange_value_usd: condecimal(max_digits=18, decimal_places=2) = Decimal("0.00")
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None  # None => now

class CryptoReportItem(BaseModel):
    id: UUID
    total_value_usd: condecimal(max_digits=18, decimal_places=2)
    wallets_value_usd: condecimal(max_digits=18, decimal_places=2)
    exchange_value_usd: condecimal(max_digits=18, decimal_places=2)
    data: dict[str, Any]
    timestamp: datetime
    created_at: datetime

class DeletedCount(BaseModel):
    deleted: int
