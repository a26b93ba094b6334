# src/modules/rewards/reward_service.py

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from src.common.exceptions import InsufficientPoints, InvalidClaimTransition, RewardUnavailable
from src.events.dispatcher import dispatcher
from src.models.models import ClaimStatus, Profile, Reward, RewardClaim
from src.modules.gamification.ledger import GamificationLedger

logger = logging.getLogger(__name__)

REWARD_CLAIMED_ACTION = "reward_claimed"
UNLIMITED_STOCK = -1

# Delivered and rejected are final
CLAIM_TRANSITIONS = {
    ClaimStatus.PENDING: {ClaimStatus.APPROVED, ClaimStatus.REJECTED},
    ClaimStatus.APPROVED: {ClaimStatus.DELIVERED, ClaimStatus.REJECTED},
    ClaimStatus.DELIVERED: set(),
    ClaimStatus.REJECTED: set(),
}

async def get_active_rewards(db: AsyncSession) -> List[Reward]:
    res = await db.execute(
        select(Reward).where(Reward.is_active.is_(True)).order_by(Reward.points_required.asc())
    )
    return res.scalars().all()

async def get_all_rewards(db: AsyncSession) -> List[Reward]:
    res = await db.execute(select(Reward).order_by(Reward.created_at.desc()))
    return res.scalars().all()

async def get_reward(reward_id: UUID, db: AsyncSession, for_update: bool = False) -> Optional[Reward]:
    stmt = select(Reward).where(Reward.id == reward_id)
    if for_update:
        stmt = stmt.with_for_update()
    res = await db.execute(stmt)
    return res.scalars().first()

async def create_reward(data: dict, db: AsyncSession) -> Reward:
    reward = Reward(**data)
    db.add(reward)
    await db.commit()
    await db.refresh(reward)
    return reward

async def update_reward(reward: Reward, data: dict, db: AsyncSession) -> Reward:
    """Only the fields provided (non-None) are updated."""
    for key, value in data.items():
        if value is not None:
            setattr(reward, key, value)
    await db.commit()
    await db.refresh(reward)
    return reward

async def toggle_reward(reward: Reward, db: AsyncSession) -> Reward:
    reward.is_active = not reward.is_active
    await db.commit()
    await db.refresh(reward)
    return reward

async def claim_reward(reward_id: UUID, ledger: GamificationLedger) -> RewardClaim:
    """
    Redeem a reward for the ledger's user.

    The claim row, the negative ledger entry and the stock decrement are
    committed together. The profile row is locked and the balance re-summed
    first, so concurrent claims by the same user are serialized and cannot
    overspend. The reward row is locked for the stock check.

    Raises:
        RewardUnavailable: missing, inactive or out of stock.
        InsufficientPoints: the user's XP total is below the reward's price.
        DataAccessError: the write failed.
    """
    db = ledger.db
    await db.execute(select(Profile.id).where(Profile.id == ledger.user_id).with_for_update())
    await ledger.refresh()
    reward = await get_reward(reward_id, db, for_update=True)
    if reward is None or not reward.is_active or reward.stock == 0:
        raise RewardUnavailable(str(reward_id))
    if ledger.total_xp < reward.points_required:
        raise InsufficientPoints(ledger.total_xp, reward.points_required)

    claim = RewardClaim(user_id=ledger.user_id, reward_id=reward.id, status=ClaimStatus.PENDING)
    db.add(claim)
    ledger.stage_entry(REWARD_CLAIMED_ACTION, -reward.points_required, f"Resgate: {reward.name}")
    if reward.stock != UNLIMITED_STOCK:
        reward.stock -= 1
    await ledger.commit()

    logger.info(f"User {ledger.user_id} claimed reward '{reward.name}' for {reward.points_required} XP")
    await dispatcher.dispatch("reward_claimed", user_id=str(ledger.user_id), reward_name=reward.name)
    return await get_claim(claim.id, db)

async def get_claim(claim_id: UUID, db: AsyncSession) -> Optional[RewardClaim]:
    res = await db.execute(
        select(RewardClaim)
        .where(RewardClaim.id == claim_id)
        .options(selectinload(RewardClaim.reward))
        .execution_options(populate_existing=True)
    )
    return res.scalars().first()

async def get_user_claims(user_id: UUID, db: AsyncSession) -> List[RewardClaim]:
    res = await db.execute(
        select(RewardClaim)
        .where(RewardClaim.user_id == user_id)
        .options(selectinload(RewardClaim.reward))
        .order_by(RewardClaim.claimed_at.desc())
    )
    return res.scalars().all()

async def get_all_claims(db: AsyncSession, status: Optional[ClaimStatus] = None) -> List[RewardClaim]:
    stmt = select(RewardClaim).options(selectinload(RewardClaim.reward)).order_by(RewardClaim.claimed_at.desc())
    if status is not None:
        stmt = stmt.where(RewardClaim.status == status)
    res = await db.execute(stmt)
    return res.scalars().all()

async def update_claim_status(claim_id: UUID, status: ClaimStatus, db: AsyncSession) -> Optional[RewardClaim]:
    """
    Move a claim along pending -> approved -> delivered. Pending and approved
    claims may also be rejected.

    Raises:
        InvalidClaimTransition: the move is not allowed from the current status.
    """
    claim = await get_claim(claim_id, db)
    if not claim:
        return None
    if status not in CLAIM_TRANSITIONS[claim.status]:
        raise InvalidClaimTransition(claim.status.value, status.value)
    claim.status = status
    await db.commit()
    await dispatcher.dispatch(
        "claim_status_changed",
        user_id=str(claim.user_id),
        reward_name=claim.reward.name,
        status=status.value,
    )
    return claim
