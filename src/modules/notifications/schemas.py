# src/modules/notifications/schemas.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from src.models.models import NotificationType

class NotificationResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    type: NotificationType
    title: str
    message: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    total: int
    unread: int
    has_more: bool

class NotificationUpdateResponse(BaseModel):
    message: str
    updated: Optional[int] = None

class SendNotificationRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    # Omit to broadcast to every user
    user_id: Optional[UUID] = None
