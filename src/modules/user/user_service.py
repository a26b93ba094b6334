# src/modules/user/user_service.py

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.models.models import Profile
from src.modules.gamification.catalog import AchievementKey, ActionType
from src.modules.gamification.ledger import GamificationLedger

async def get_profile(user_id: UUID, db: AsyncSession) -> Optional[Profile]:
    res = await db.execute(select(Profile).where(Profile.id == user_id))
    return res.scalars().first()

async def update_user_profile(current_user: Profile, profile_data: dict, db: AsyncSession) -> Profile:
    """
    Update the current user's profile with provided data.

    Only the fields provided (non-None) will be updated.
    """
    for key, value in profile_data.items():
        if value is not None:
            setattr(current_user, key, value)
    db.add(current_user)
    await db.commit()
    await db.refresh(current_user)
    return current_user

async def reward_profile_update(user_id, complete: bool, db: AsyncSession) -> dict:
    """
    Points for updating the profile, plus `profile_complete` once every
    optional field is filled.
    """
    ledger = await GamificationLedger.for_user(user_id, db)
    awarded = await ledger.award_points(ActionType.PROFILE_UPDATED)
    unlocked = False
    if complete:
        unlocked = await ledger.unlock_achievement(AchievementKey.PROFILE_COMPLETE)
    return {"awarded": awarded, "profile_complete_unlocked": unlocked, "total_xp": ledger.total_xp}
