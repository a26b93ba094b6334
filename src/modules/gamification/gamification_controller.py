# src/modules/gamification/gamification_controller.py

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.gamification import catalog, engagement_service, ledger as ledger_service, schemas
from src.modules.gamification.catalog import AchievementKey
from src.modules.gamification.ledger import GamificationLedger
from src.common.database.database import get_db_session
from src.common.utils.global_messages import GlobalMessages
from src.modules.user import user_service
from src.auth.dependencies import get_current_user, require_admin
from src.models.models import Profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gamification", tags=["gamification"])
admin_router = APIRouter(prefix="/admin/gamification", tags=["admin"])

def _level(level: catalog.LevelDefinition) -> schemas.LevelResponse:
    return schemas.LevelResponse.model_validate(level)

def build_state(ledger: GamificationLedger) -> schemas.GamificationStateResponse:
    current = ledger.get_current_level()
    next_level = ledger.get_next_level(current)
    return schemas.GamificationStateResponse(
        total_xp=ledger.total_xp,
        current_level=_level(current),
        next_level=_level(next_level) if next_level else None,
        progress=round(ledger.get_xp_progress(), 1),
        xp_to_next_level=max(0, next_level.min_xp - ledger.total_xp) if next_level else 0,
        levels_remaining=len(catalog.LEVELS) - current.level,
        achievements=sorted(ledger.achievement_keys),
    )

@router.get("/state", response_model=schemas.GamificationStateResponse)
async def get_state(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Total XP, level and unlocked achievements of the current user.
    """
    ledger = await GamificationLedger.for_user(current_user.id, db)
    return build_state(ledger)

@router.get("/levels", response_model=List[schemas.LevelResponse])
async def get_levels():
    return [_level(level) for level in catalog.LEVELS]

@router.get("/achievements", response_model=List[schemas.AchievementResponse])
async def get_achievements(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    The achievement catalog, flagged with what the current user has unlocked.
    """
    ledger = await GamificationLedger.for_user(current_user.id, db)
    return [
        schemas.AchievementResponse(
            key=a.key.value,
            name=a.name,
            description=a.description,
            icon=a.icon,
            category=a.category,
            xp_reward=a.xp_reward,
            unlocked=ledger.has_achievement(a.key),
        )
        for a in catalog.ACHIEVEMENTS
    ]

@router.get("/history", response_model=List[schemas.PointEntryResponse])
async def get_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await ledger_service.get_point_history(current_user.id, db, limit, offset)

@router.post("/check-in", response_model=schemas.CheckInResponse)
async def check_in(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Daily check-in: welcome achievement, daily login points and streaks.
    """
    ledger = await GamificationLedger.for_user(current_user.id, db)
    result = await engagement_service.record_check_in(ledger)
    return schemas.CheckInResponse(total_xp=ledger.total_xp, **result)

async def _target_ledger(user_id: UUID, db: AsyncSession) -> GamificationLedger:
    if await user_service.get_profile(user_id, db) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.USER_NOT_FOUND
        )
    return await GamificationLedger.for_user(user_id, db)

@admin_router.post("/users/{user_id}/points", response_model=schemas.AwardPointsResponse)
async def award_points(
    user_id: UUID,
    payload: schemas.AwardPointsRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Award the fixed points of an action (video watched, exercise completed...)
    to a user. Clients cannot credit themselves since the XP is spendable.
    """
    admin_id = admin.id
    ledger = await _target_ledger(user_id, db)
    awarded = await ledger.award_points(payload.action_type, payload.description)
    if not awarded:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=GlobalMessages.POINTS_NOT_AWARDED
        )
    logger.info(f"Admin {admin_id} awarded '{payload.action_type.value}' to user {user_id}")
    return schemas.AwardPointsResponse(awarded=True, total_xp=ledger.total_xp)

@admin_router.post("/users/{user_id}/achievements/{achievement_key}/unlock", response_model=schemas.UnlockAchievementResponse)
async def unlock_achievement(
    user_id: UUID,
    achievement_key: AchievementKey,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Unlock an achievement for a user. Unlocking one the user already has is
    not an error; the response just reports `unlocked: false`.
    """
    admin_id = admin.id
    ledger = await _target_ledger(user_id, db)
    unlocked = await ledger.unlock_achievement(achievement_key)
    if unlocked:
        logger.info(f"Admin {admin_id} unlocked '{achievement_key.value}' for user {user_id}")
    return schemas.UnlockAchievementResponse(unlocked=unlocked, total_xp=ledger.total_xp)
