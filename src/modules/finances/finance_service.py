# src/modules/finances/finance_service.py

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.models.models import FinanceEntry, FinanceType

async def count_entries(user_id: UUID, db: AsyncSession) -> int:
    total = await db.scalar(select(func.count(FinanceEntry.id)).where(FinanceEntry.user_id == user_id))
    return int(total or 0)

async def create_entries(user_id: UUID, entries: List[dict], db: AsyncSession) -> List[FinanceEntry]:
    """
    Insert one or many entries in a single commit.
    """
    rows = [FinanceEntry(user_id=user_id, **data) for data in entries]
    db.add_all(rows)
    await db.commit()
    for row in rows:
        await db.refresh(row)
    return rows

async def get_entries(
    user_id: UUID,
    db: AsyncSession,
    start: Optional[date] = None,
    end: Optional[date] = None,
    entry_type: Optional[FinanceType] = None,
    category: Optional[str] = None,
) -> List[FinanceEntry]:
    """
    Entries of a user, newest first. `start` and `end` are inclusive.
    """
    stmt = select(FinanceEntry).where(FinanceEntry.user_id == user_id)
    if start is not None:
        stmt = stmt.where(FinanceEntry.date >= start)
    if end is not None:
        stmt = stmt.where(FinanceEntry.date <= end)
    if entry_type is not None:
        stmt = stmt.where(FinanceEntry.type == entry_type)
    if category is not None:
        stmt = stmt.where(FinanceEntry.category == category)
    res = await db.execute(stmt.order_by(FinanceEntry.date.desc()))
    return res.scalars().all()

async def delete_entry(entry_id: UUID, user_id: UUID, db: AsyncSession) -> bool:
    res = await db.execute(
        select(FinanceEntry).where(FinanceEntry.id == entry_id, FinanceEntry.user_id == user_id)
    )
    entry = res.scalars().first()
    if not entry:
        return False
    await db.delete(entry)
    await db.commit()
    return True
