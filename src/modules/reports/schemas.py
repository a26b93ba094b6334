# src/modules/reports/schemas.py

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel

class MonthSummary(BaseModel):
    month: int
    income: Decimal
    expenses: Decimal
    balance: Decimal

class MonthlyReportResponse(BaseModel):
    year: int
    income: Decimal
    expenses: Decimal
    balance: Decimal
    months: List[MonthSummary]

class CategoryShare(BaseModel):
    category: str
    value: Decimal
    percentage: float

class CategoryReportResponse(BaseModel):
    year: int
    month: int
    total_expenses: Decimal
    categories: List[CategoryShare]

class WeekSummary(BaseModel):
    week_start: date
    week_end: date
    income: Decimal
    expenses: Decimal
    categories: Dict[str, Decimal]

class WeeklyReportResponse(BaseModel):
    year: int
    month: int
    weeks: List[WeekSummary]

class CategoryComparison(BaseModel):
    category: str
    current: Decimal
    previous: Decimal
    difference: Decimal
    variation: Optional[float] = None

class ComparisonReportResponse(BaseModel):
    year: int
    month: int
    income_variation: Optional[float] = None
    expenses_variation: Optional[float] = None
    categories: List[CategoryComparison]
