from enum import Enum

from pydantic import BaseModel

class Currency(str, Enum):
    czk = "CZK"
    eur = "EUR"
    usd = "USD"

class ApiError(BaseModel):
    code: str
    message: str
