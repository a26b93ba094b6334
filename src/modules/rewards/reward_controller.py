# src/modules/rewards/reward_controller.py

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.rewards import reward_service, schemas
from src.modules.gamification.ledger import GamificationLedger
from src.common.database.database import get_db_session
from src.common.exceptions import InsufficientPoints, InvalidClaimTransition, RewardUnavailable
from src.common.utils.global_messages import GlobalMessages
from src.auth.dependencies import get_current_user, require_admin
from src.models.models import ClaimStatus, Profile

router = APIRouter(prefix="/rewards", tags=["rewards"])
admin_router = APIRouter(prefix="/admin/rewards", tags=["admin"])

@router.get("", response_model=List[schemas.RewardResponse])
async def list_rewards(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Active rewards, cheapest first.
    """
    return await reward_service.get_active_rewards(db)

@router.get("/claims", response_model=List[schemas.RewardClaimResponse])
async def list_my_claims(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await reward_service.get_user_claims(current_user.id, db)

@router.post("/{reward_id}/claim", response_model=schemas.RewardClaimResponse, status_code=status.HTTP_201_CREATED)
async def claim_reward(
    reward_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Redeem a reward, paying its price in XP.
    """
    ledger = await GamificationLedger.for_user(current_user.id, db)
    try:
        return await reward_service.claim_reward(reward_id, ledger)
    except RewardUnavailable:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.REWARD_UNAVAILABLE
        )
    except InsufficientPoints:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=GlobalMessages.INSUFFICIENT_POINTS
        )

@admin_router.get("", response_model=List[schemas.RewardResponse])
async def admin_list_rewards(
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    return await reward_service.get_all_rewards(db)

@admin_router.post("", response_model=schemas.RewardResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_reward(
    payload: schemas.RewardCreateRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    return await reward_service.create_reward(payload.model_dump(), db)

@admin_router.get("/claims", response_model=List[schemas.RewardClaimResponse])
async def admin_list_claims(
    claim_status: Optional[ClaimStatus] = None,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    return await reward_service.get_all_claims(db, claim_status)

@admin_router.patch("/claims/{claim_id}", response_model=schemas.RewardClaimResponse)
async def admin_update_claim(
    claim_id: UUID,
    payload: schemas.ClaimStatusUpdateRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Move a claim through pending, approved and delivered. Pending and
    approved claims may be rejected; delivered and rejected are final.
    """
    try:
        claim = await reward_service.update_claim_status(claim_id, payload.status, db)
    except InvalidClaimTransition:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=GlobalMessages.INVALID_CLAIM_TRANSITION
        )
    if not claim:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.CLAIM_NOT_FOUND
        )
    return claim

@admin_router.put("/{reward_id}", response_model=schemas.RewardResponse)
async def admin_update_reward(
    reward_id: UUID,
    payload: schemas.RewardUpdateRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    reward = await reward_service.get_reward(reward_id, db)
    if not reward:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.REWARD_NOT_FOUND
        )
    return await reward_service.update_reward(reward, payload.model_dump(), db)

@admin_router.patch("/{reward_id}/toggle", response_model=schemas.RewardResponse)
async def admin_toggle_reward(
    reward_id: UUID,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    reward = await reward_service.get_reward(reward_id, db)
    if not reward:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.REWARD_NOT_FOUND
        )
    return await reward_service.toggle_reward(reward, db)
