# src/modules/finances/finance_controller.py

from datetime import date
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.finances import finance_service, schemas
from src.modules.goals import goal_service
from src.modules.gamification.catalog import AchievementKey, ActionType
from src.modules.gamification.ledger import GamificationLedger
from src.common.database.database import get_db_session
from src.common.utils.global_messages import GlobalMessages
from src.auth.dependencies import get_current_user
from src.models.models import FinanceType, Profile

router = APIRouter(prefix="/finances", tags=["finances"])

@router.get("", response_model=List[schemas.FinanceEntryResponse])
async def list_entries(
    start: Optional[date] = None,
    end: Optional[date] = None,
    type: Optional[FinanceType] = None,
    category: Optional[str] = None,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await finance_service.get_entries(current_user.id, db, start, end, type, category)

@router.post("", response_model=schemas.FinanceCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: schemas.FinanceEntryCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Record one income or expense. The user's very first entry earns XP,
    and any entry may complete `full_control`.
    """
    user_id = current_user.id
    is_first = await finance_service.count_entries(user_id, db) == 0
    rows = await finance_service.create_entries(user_id, [payload.model_dump()], db)
    entries = [schemas.FinanceEntryResponse.model_validate(row) for row in rows]

    ledger = await GamificationLedger.for_user(user_id, db)
    awarded = False
    if is_first:
        awarded = await ledger.award_points(ActionType.FIRST_TRANSACTION)
    unlocked = await goal_service.check_full_control(ledger)
    return schemas.FinanceCreateResponse(entries=entries, points_awarded=awarded, achievement_unlocked=unlocked)

@router.post("/batch", response_model=schemas.FinanceCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(
    payload: schemas.FinanceBatchCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Import many entries at once (the batch text import tool).
    """
    user_id = current_user.id
    rows = await finance_service.create_entries(user_id, [e.model_dump() for e in payload.entries], db)
    entries = [schemas.FinanceEntryResponse.model_validate(row) for row in rows]

    ledger = await GamificationLedger.for_user(user_id, db)
    unlocked = await ledger.unlock_achievement(AchievementKey.BATCH_IMPORT)
    awarded = await ledger.award_points(ActionType.BATCH_IMPORT, f"Importou {len(rows)} lançamentos")
    await goal_service.check_full_control(ledger)
    return schemas.FinanceCreateResponse(entries=entries, points_awarded=awarded, achievement_unlocked=unlocked)

@router.delete("/{entry_id}", response_model=schemas.FinanceDeleteResponse)
async def delete_entry(
    entry_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    deleted = await finance_service.delete_entry(entry_id, current_user.id, db)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.FINANCE_ENTRY_NOT_FOUND
        )
    return schemas.FinanceDeleteResponse(message=GlobalMessages.FINANCE_ENTRY_DELETED)
