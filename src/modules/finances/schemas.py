# src/modules/finances/schemas.py

from datetime import date as Date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from src.models.models import FinanceType

class FinanceEntryCreate(BaseModel):
    type: FinanceType
    category: str = Field(..., min_length=1, max_length=100)
    value: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    date: Date
    description: Optional[str] = None

class FinanceBatchCreate(BaseModel):
    entries: List[FinanceEntryCreate] = Field(..., min_length=1, max_length=500)

class FinanceEntryResponse(BaseModel):
    id: UUID
    type: FinanceType
    category: str
    value: Decimal
    date: Date
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class FinanceCreateResponse(BaseModel):
    entries: List[FinanceEntryResponse]
    points_awarded: bool = False
    achievement_unlocked: bool = False

class FinanceDeleteResponse(BaseModel):
    message: str
