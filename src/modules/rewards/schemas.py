# src/modules/rewards/schemas.py

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from src.models.models import ClaimStatus

class RewardResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    points_required: int
    image_url: Optional[str] = None
    stock: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class RewardCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    points_required: int = Field(..., gt=0)
    image_url: Optional[str] = None
    # -1 means unlimited
    stock: int = Field(-1, ge=-1)
    is_active: bool = True

class RewardUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    points_required: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = None
    stock: Optional[int] = Field(None, ge=-1)

class ClaimRewardSummary(BaseModel):
    id: UUID
    name: str
    points_required: int

    class Config:
        from_attributes = True

class RewardClaimResponse(BaseModel):
    id: UUID
    user_id: UUID
    reward_id: UUID
    status: ClaimStatus
    claimed_at: datetime
    reward: Optional[ClaimRewardSummary] = None

    class Config:
        from_attributes = True

class ClaimStatusUpdateRequest(BaseModel):
    status: ClaimStatus
