from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.notifications import notification_service, schemas
from src.common.database.database import get_db_session
from src.common.utils.global_messages import GlobalMessages
from src.auth.dependencies import get_current_user, require_admin
from src.events.sse_manager import sse_manager
from src.models.models import Profile

router = APIRouter(prefix="/notifications", tags=["notifications"])
admin_router = APIRouter(prefix="/admin/notifications", tags=["admin"])

@router.get("", response_model=schemas.NotificationListResponse)
async def get_user_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Retrieve notifications visible to the current user.
    """
    items, total, unread = await notification_service.get_notifications(current_user.id, db, limit, offset)
    return schemas.NotificationListResponse(
        items=items,
        total=total,
        unread=unread,
        has_more=(offset + limit) < total,
    )

@router.get("/stream")
async def stream_notifications(current_user: Profile = Depends(get_current_user)):
    """
    Server-sent events stream of new notifications for the current user.
    """
    return StreamingResponse(
        sse_manager.stream(str(current_user.id)),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

@router.put("/read-all", response_model=schemas.NotificationUpdateResponse)
async def mark_all_notifications_read(
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    updated = await notification_service.mark_all_as_read(current_user.id, db)
    return schemas.NotificationUpdateResponse(message=GlobalMessages.NOTIFICATIONS_MARKED_READ, updated=updated)

@router.put("/{notification_id}/read", response_model=schemas.NotificationUpdateResponse)
async def mark_notification_read(
    notification_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Mark a specific notification as read for the current user.
    """
    success = await notification_service.mark_notification_as_read(notification_id, current_user.id, db)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=GlobalMessages.NOTIFICATION_NOT_FOUND
        )
    return schemas.NotificationUpdateResponse(message=GlobalMessages.NOTIFICATION_MARKED_READ)

@admin_router.post("", response_model=schemas.NotificationResponse, status_code=status.HTTP_201_CREATED)
async def send_notification(
    payload: schemas.SendNotificationRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Send a notification to one user, or to everybody when no user is given.
    """
    return await notification_service.create_notification(
        title=payload.title,
        message=payload.message,
        db=db,
        user_id=payload.user_id,
        notif_type=payload.type,
    )
