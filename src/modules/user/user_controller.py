# src/modules/user/user_controller.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.user import user_service, schemas
from src.modules.gamification.engagement_service import is_profile_complete
from src.common.database.database import get_db_session
from src.models.models import Profile
from src.auth.dependencies import get_current_user

router = APIRouter(prefix="/user", tags=["user"])

@router.get("/profile", response_model=schemas.ProfileResponse)
async def get_profile(current_user: Profile = Depends(get_current_user)):
    """
    Retrieve the profile for the currently authenticated user.
    """
    return current_user

@router.put("/profile", response_model=schemas.UpdateProfileResponse)
async def update_profile(
    profile_data: schemas.UpdateProfileRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Update the profile of the currently authenticated user.

    Only the provided fields will be updated. Every update earns XP, and
    filling all fields unlocks the "Perfil Completo" achievement.
    """
    updated_user = await user_service.update_user_profile(current_user, profile_data.model_dump(), db)
    # Serialize before the ledger runs; a failed award rolls back and expires the profile
    profile = schemas.ProfileResponse.model_validate(updated_user)
    result = await user_service.reward_profile_update(profile.id, is_profile_complete(updated_user), db)
    return schemas.UpdateProfileResponse(
        profile=profile,
        points_awarded=result["awarded"],
        profile_complete_unlocked=result["profile_complete_unlocked"],
        total_xp=result["total_xp"],
    )
