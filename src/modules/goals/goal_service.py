# src/modules/goals/goal_service.py

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.models.models import FinanceEntry, Goal, GoalStatus, ReductionGoal, ReductionGoalStatus
from src.modules.gamification.catalog import AchievementKey, ActionType
from src.modules.gamification.ledger import GamificationLedger

logger = logging.getLogger(__name__)

GOAL_CREATED_DESCRIPTION = "Criou objetivo financeiro"

def goal_status_for(current_value: Decimal, target_value: Decimal) -> GoalStatus:
    return GoalStatus.COMPLETED if current_value >= target_value else GoalStatus.IN_PROGRESS

async def _count(model, user_id: UUID, db: AsyncSession) -> int:
    total = await db.scalar(select(func.count(model.id)).where(model.user_id == user_id))
    return int(total or 0)

async def has_full_control(user_id: UUID, db: AsyncSession) -> bool:
    """True once the user has a savings goal, a finance entry and a reduction goal."""
    for model in (Goal, FinanceEntry, ReductionGoal):
        if await _count(model, user_id, db) == 0:
            return False
    return True

async def check_full_control(ledger: GamificationLedger) -> bool:
    """
    Unlock `full_control` when the user uses every planning tool.

    Returns True only when this call performed the unlock.
    """
    if ledger.has_achievement(AchievementKey.FULL_CONTROL):
        return False
    if not await has_full_control(ledger.user_id, ledger.db):
        return False
    return await ledger.unlock_achievement(AchievementKey.FULL_CONTROL)

async def reward_goal_created(ledger: GamificationLedger) -> dict:
    """
    Gamification for a new savings goal: the `first_goal` achievement, the
    fixed goal-creation points, then the `full_control` check.
    """
    first_goal = await ledger.unlock_achievement(AchievementKey.FIRST_GOAL)
    awarded = await ledger.award_points(ActionType.FIRST_TRANSACTION, GOAL_CREATED_DESCRIPTION)
    full_control = await check_full_control(ledger)
    return {
        "points_awarded": awarded,
        "first_goal_unlocked": first_goal,
        "full_control_unlocked": full_control,
    }

# Savings goals

async def get_goals(user_id: UUID, db: AsyncSession) -> List[Goal]:
    res = await db.execute(
        select(Goal).where(Goal.user_id == user_id).order_by(Goal.created_at.desc())
    )
    return res.scalars().all()

async def get_goal(goal_id: UUID, user_id: UUID, db: AsyncSession) -> Optional[Goal]:
    res = await db.execute(select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id))
    return res.scalars().first()

async def create_goal(user_id: UUID, data: dict, db: AsyncSession) -> Goal:
    current_value = data.get("current_value") or Decimal("0")
    goal = Goal(
        user_id=user_id,
        goal_name=data["goal_name"],
        target_value=data["target_value"],
        current_value=current_value,
        deadline=data.get("deadline"),
        status=goal_status_for(current_value, data["target_value"]),
    )
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    logger.info(f"User {user_id} created goal '{goal.goal_name}'")
    return goal

async def update_goal(goal: Goal, data: dict, db: AsyncSession) -> Goal:
    """
    Only the fields provided (non-None) are updated. The status always
    follows current_value against target_value.
    """
    for key, value in data.items():
        if value is not None:
            setattr(goal, key, value)
    goal.status = goal_status_for(goal.current_value, goal.target_value)
    await db.commit()
    await db.refresh(goal)
    return goal

async def update_goal_progress(goal: Goal, current_value: Decimal, db: AsyncSession) -> Goal:
    return await update_goal(goal, {"current_value": current_value}, db)

async def delete_goal(goal_id: UUID, user_id: UUID, db: AsyncSession) -> bool:
    goal = await get_goal(goal_id, user_id, db)
    if not goal:
        return False
    await db.delete(goal)
    await db.commit()
    return True

# Reduction goals

async def get_reduction_goals(user_id: UUID, db: AsyncSession) -> List[ReductionGoal]:
    res = await db.execute(
        select(ReductionGoal)
        .where(ReductionGoal.user_id == user_id)
        .order_by(ReductionGoal.created_at.desc())
    )
    return res.scalars().all()

async def get_reduction_goal(goal_id: UUID, user_id: UUID, db: AsyncSession) -> Optional[ReductionGoal]:
    res = await db.execute(
        select(ReductionGoal).where(ReductionGoal.id == goal_id, ReductionGoal.user_id == user_id)
    )
    return res.scalars().first()

async def create_reduction_goal(user_id: UUID, data: dict, db: AsyncSession) -> ReductionGoal:
    goal = ReductionGoal(user_id=user_id, **data)
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    logger.info(f"User {user_id} created a reduction goal for '{goal.category}'")
    return goal

async def update_reduction_goal(goal: ReductionGoal, data: dict, db: AsyncSession) -> ReductionGoal:
    for key, value in data.items():
        if value is not None:
            setattr(goal, key, value)
    await db.commit()
    await db.refresh(goal)
    return goal

async def toggle_reduction_goal(goal: ReductionGoal, db: AsyncSession) -> ReductionGoal:
    if goal.status == ReductionGoalStatus.ACTIVE:
        goal.status = ReductionGoalStatus.COMPLETED
    else:
        goal.status = ReductionGoalStatus.ACTIVE
    await db.commit()
    await db.refresh(goal)
    return goal

async def delete_reduction_goal(goal_id: UUID, user_id: UUID, db: AsyncSession) -> bool:
    goal = await get_reduction_goal(goal_id, user_id, db)
    if not goal:
        return False
    await db.delete(goal)
    await db.commit()
    return True
