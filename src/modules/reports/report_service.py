# src/modules/reports/report_service.py

"""
Report aggregation over a user's finance entries.

Income is `income` plus `receivable`; every other type counts as an
expense. Amounts stay Decimal; percentages are rounded to one decimal.
"""

import calendar
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.models import FinanceEntry, FinanceType
from src.modules.finances import finance_service

INCOME_TYPES = (FinanceType.INCOME, FinanceType.RECEIVABLE)
ZERO = Decimal("0")

def is_income(entry: FinanceEntry) -> bool:
    return entry.type in INCOME_TYPES

def percentage(part: Decimal, whole: Decimal) -> float:
    if not whole:
        return 0.0
    return round(float(part / whole * 100), 1)

def variation(current: Decimal, previous: Decimal) -> Optional[float]:
    """Percent change from previous to current; None when there is no baseline."""
    if not previous:
        return None
    return round(float((current - previous) / previous * 100), 1)

def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)

def week_start(day: date) -> date:
    # Weeks run Sunday to Saturday
    return day - timedelta(days=(day.weekday() + 1) % 7)

def totals(entries: Iterable[FinanceEntry]) -> Dict[str, Decimal]:
    income = ZERO
    expenses = ZERO
    for entry in entries:
        if is_income(entry):
            income += entry.value
        else:
            expenses += entry.value
    return {"income": income, "expenses": expenses, "balance": income - expenses}

def group_by_month(entries: Iterable[FinanceEntry], year: int) -> List[dict]:
    months = OrderedDict((m, {"income": ZERO, "expenses": ZERO}) for m in range(1, 13))
    for entry in entries:
        if entry.date.year != year:
            continue
        bucket = months[entry.date.month]
        bucket["expenses" if not is_income(entry) else "income"] += entry.value
    return [
        {"month": m, "income": b["income"], "expenses": b["expenses"], "balance": b["income"] - b["expenses"]}
        for m, b in months.items()
    ]

def expenses_by_category(entries: Iterable[FinanceEntry]) -> Dict[str, Decimal]:
    categories: Dict[str, Decimal] = {}
    for entry in entries:
        if is_income(entry):
            continue
        categories[entry.category] = categories.get(entry.category, ZERO) + entry.value
    return categories

def category_breakdown(entries: Iterable[FinanceEntry]) -> List[dict]:
    """Expenses per category with their share of total expenses, largest first."""
    categories = expenses_by_category(entries)
    total = sum(categories.values(), ZERO)
    return [
        {"category": name, "value": value, "percentage": percentage(value, total)}
        for name, value in sorted(categories.items(), key=lambda item: item[1], reverse=True)
    ]

def group_by_week(entries: Iterable[FinanceEntry], year: int, month: int) -> List[dict]:
    """Sunday-to-Saturday weeks touching the month, with income, expenses and expenses per category."""
    first, last = month_bounds(year, month)
    weeks: "OrderedDict[date, dict]" = OrderedDict()
    start = week_start(first)
    while start <= last:
        weeks[start] = {"income": ZERO, "expenses": ZERO, "categories": {}}
        start += timedelta(days=7)

    for entry in entries:
        bucket = weeks.get(week_start(entry.date))
        if bucket is None:
            continue
        if is_income(entry):
            bucket["income"] += entry.value
        else:
            bucket["expenses"] += entry.value
            bucket["categories"][entry.category] = bucket["categories"].get(entry.category, ZERO) + entry.value

    return [
        {"week_start": s, "week_end": s + timedelta(days=6), **b}
        for s, b in weeks.items()
    ]

def compare_categories(current: Iterable[FinanceEntry], previous: Iterable[FinanceEntry]) -> List[dict]:
    now = expenses_by_category(current)
    before = expenses_by_category(previous)
    rows = []
    for name in sorted(set(now) | set(before)):
        cur = now.get(name, ZERO)
        prev = before.get(name, ZERO)
        rows.append({
            "category": name,
            "current": cur,
            "previous": prev,
            "difference": cur - prev,
            "variation": variation(cur, prev),
        })
    return rows

async def monthly_report(user_id: UUID, year: int, db: AsyncSession) -> dict:
    entries = await finance_service.get_entries(user_id, db, date(year, 1, 1), date(year, 12, 31))
    return {"year": year, "months": group_by_month(entries, year), **totals(entries)}

async def category_report(user_id: UUID, year: int, month: int, db: AsyncSession) -> dict:
    first, last = month_bounds(year, month)
    entries = await finance_service.get_entries(user_id, db, first, last)
    summary = totals(entries)
    return {"year": year, "month": month, "total_expenses": summary["expenses"], "categories": category_breakdown(entries)}

async def weekly_report(user_id: UUID, year: int, month: int, db: AsyncSession) -> dict:
    first, last = month_bounds(year, month)
    entries = await finance_service.get_entries(user_id, db, week_start(first), last + timedelta(days=6))
    return {"year": year, "month": month, "weeks": group_by_week(entries, year, month)}

async def comparison_report(user_id: UUID, year: int, month: int, db: AsyncSession) -> dict:
    first, last = month_bounds(year, month)
    prev_year, prev_month = previous_month(year, month)
    prev_first, prev_last = month_bounds(prev_year, prev_month)
    current = await finance_service.get_entries(user_id, db, first, last)
    previous = await finance_service.get_entries(user_id, db, prev_first, prev_last)
    cur_totals = totals(current)
    prev_totals = totals(previous)
    return {
        "year": year,
        "month": month,
        "income_variation": variation(cur_totals["income"], prev_totals["income"]),
        "expenses_variation": variation(cur_totals["expenses"], prev_totals["expenses"]),
        "categories": compare_categories(current, previous),
    }
