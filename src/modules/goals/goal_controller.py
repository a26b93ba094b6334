# src/modules/goals/goal_controller.py

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.goals import goal_service, schemas
from src.modules.gamification.ledger import GamificationLedger
from src.common.database.database import get_db_session
from src.common.utils.global_messages import GlobalMessages
from src.auth.dependencies import get_current_user
from src.models.models import Profile

router = APIRouter(prefix="/goals", tags=["goals"])

def _not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=GlobalMessages.GOAL_NOT_FOUND
    )

@router.get("", response_model=List[schemas.GoalResponse])
async def list_goals(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Savings goals of the current user, newest first.
    """
    return await goal_service.get_goals(current_user.id, db)

@router.post("", response_model=schemas.GoalCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: schemas.GoalCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Create a savings goal. Earns XP and may unlock `first_goal` and `full_control`.
    """
    user_id = current_user.id
    goal = await goal_service.create_goal(user_id, payload.model_dump(), db)
    response = schemas.GoalResponse.model_validate(goal)

    ledger = await GamificationLedger.for_user(user_id, db)
    result = await goal_service.reward_goal_created(ledger)
    return schemas.GoalCreateResponse(goal=response, **result)

# Declared before /{goal_id} so "reduction" is not parsed as a goal id
@router.get("/reduction", response_model=List[schemas.ReductionGoalResponse])
async def list_reduction_goals(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await goal_service.get_reduction_goals(current_user.id, db)

@router.post("/reduction", response_model=schemas.ReductionGoalCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_reduction_goal(
    payload: schemas.ReductionGoalCreate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Cap the spending of one category per week or month.
    """
    user_id = current_user.id
    goal = await goal_service.create_reduction_goal(user_id, payload.model_dump(), db)
    response = schemas.ReductionGoalResponse.model_validate(goal)

    ledger = await GamificationLedger.for_user(user_id, db)
    unlocked = await goal_service.check_full_control(ledger)
    return schemas.ReductionGoalCreateResponse(goal=response, full_control_unlocked=unlocked)

@router.put("/reduction/{goal_id}", response_model=schemas.ReductionGoalResponse)
async def update_reduction_goal(
    goal_id: UUID,
    payload: schemas.ReductionGoalUpdate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    goal = await goal_service.get_reduction_goal(goal_id, current_user.id, db)
    if not goal:
        raise _not_found()
    return await goal_service.update_reduction_goal(goal, payload.model_dump(), db)

@router.patch("/reduction/{goal_id}/toggle", response_model=schemas.ReductionGoalResponse)
async def toggle_reduction_goal(
    goal_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Flip a reduction goal between active and completed.
    """
    goal = await goal_service.get_reduction_goal(goal_id, current_user.id, db)
    if not goal:
        raise _not_found()
    return await goal_service.toggle_reduction_goal(goal, db)

@router.delete("/reduction/{goal_id}", response_model=schemas.GoalDeleteResponse)
async def delete_reduction_goal(
    goal_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    if not await goal_service.delete_reduction_goal(goal_id, current_user.id, db):
        raise _not_found()
    return schemas.GoalDeleteResponse(message=GlobalMessages.GOAL_DELETED)

@router.put("/{goal_id}", response_model=schemas.GoalResponse)
async def update_goal(
    goal_id: UUID,
    payload: schemas.GoalUpdate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    goal = await goal_service.get_goal(goal_id, current_user.id, db)
    if not goal:
        raise _not_found()
    return await goal_service.update_goal(goal, payload.model_dump(), db)

@router.patch("/{goal_id}/progress", response_model=schemas.GoalResponse)
async def update_goal_progress(
    goal_id: UUID,
    payload: schemas.GoalProgressUpdate,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Set how much has been saved so far. Reaching the target completes the goal.
    """
    goal = await goal_service.get_goal(goal_id, current_user.id, db)
    if not goal:
        raise _not_found()
    return await goal_service.update_goal_progress(goal, payload.current_value, db)

@router.delete("/{goal_id}", response_model=schemas.GoalDeleteResponse)
async def delete_goal(
    goal_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    if not await goal_service.delete_goal(goal_id, current_user.id, db):
        raise _not_found()
    return schemas.GoalDeleteResponse(message=GlobalMessages.GOAL_DELETED)
