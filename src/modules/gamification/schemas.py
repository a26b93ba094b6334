# src/modules/gamification/schemas.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from src.modules.gamification.catalog import AchievementCategory, ActionType

class LevelResponse(BaseModel):
    level: int
    name: str
    min_xp: int
    icon: str

    class Config:
        from_attributes = True

class GamificationStateResponse(BaseModel):
    total_xp: int
    current_level: LevelResponse
    next_level: Optional[LevelResponse] = None
    progress: float
    xp_to_next_level: int
    levels_remaining: int
    achievements: List[str]

class AchievementResponse(BaseModel):
    key: str
    name: str
    description: str
    icon: str
    category: AchievementCategory
    xp_reward: int
    unlocked: bool = False

class PointEntryResponse(BaseModel):
    id: UUID
    action_type: str
    points: int
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AwardPointsRequest(BaseModel):
    action_type: ActionType
    description: Optional[str] = Field(None, max_length=255)

class AwardPointsResponse(BaseModel):
    awarded: bool
    total_xp: int

class UnlockAchievementResponse(BaseModel):
    unlocked: bool
    total_xp: int

class CheckInResponse(BaseModel):
    awarded: List[str]
    unlocked: List[str]
    total_xp: int

class ReconcileResponse(BaseModel):
    checked: int
    repaired: int
