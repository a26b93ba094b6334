# src/modules/goals/schemas.py

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from src.models.models import GoalStatus, PeriodType, ReductionGoalStatus

class GoalCreate(BaseModel):
    goal_name: str = Field(..., min_length=1, max_length=255)
    target_value: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    current_value: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None

class GoalUpdate(BaseModel):
    goal_name: Optional[str] = Field(None, min_length=1, max_length=255)
    target_value: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    current_value: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None

class GoalProgressUpdate(BaseModel):
    current_value: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

class GoalResponse(BaseModel):
    id: UUID
    goal_name: str
    target_value: Decimal
    current_value: Decimal
    deadline: Optional[date] = None
    status: GoalStatus
    created_at: datetime

    class Config:
        from_attributes = True

class GoalCreateResponse(BaseModel):
    goal: GoalResponse
    points_awarded: bool = False
    first_goal_unlocked: bool = False
    full_control_unlocked: bool = False

class ReductionGoalCreate(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)
    period_type: PeriodType = PeriodType.MONTHLY
    target_value: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None

class ReductionGoalUpdate(BaseModel):
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    period_type: Optional[PeriodType] = None
    target_value: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None

class ReductionGoalResponse(BaseModel):
    id: UUID
    category: str
    period_type: PeriodType
    target_value: Decimal
    deadline: Optional[date] = None
    status: ReductionGoalStatus
    created_at: datetime

    class Config:
        from_attributes = True

class ReductionGoalCreateResponse(BaseModel):
    goal: ReductionGoalResponse
    full_control_unlocked: bool = False

class GoalDeleteResponse(BaseModel):
    message: str
