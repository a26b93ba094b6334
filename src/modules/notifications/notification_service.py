# src/modules/notifications/notification_service.py

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import func, or_, update
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.models import Notification, NotificationType
from src.events.sse_manager import sse_manager

def _visible_to(user_id: UUID):
    # Own notifications plus broadcasts
    return or_(Notification.user_id == user_id, Notification.user_id.is_(None))

async def get_notifications(user_id: UUID, db: AsyncSession, limit: int = 20, offset: int = 0) -> Tuple[List[Notification], int, int]:
    """
    Returns (page, total, unread_count) of the notifications visible to the user,
    newest first.

    Broadcasts carry a single `read` flag, so marking one read marks it for
    everybody; this mirrors how the admin panel has always sent them.
    """
    total = await db.scalar(select(func.count(Notification.id)).where(_visible_to(user_id)))
    unread = await db.scalar(
        select(func.count(Notification.id)).where(_visible_to(user_id), Notification.read.is_(False))
    )
    res = await db.execute(
        select(Notification)
        .where(_visible_to(user_id))
        .order_by(Notification.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return res.scalars().all(), int(total or 0), int(unread or 0)

async def mark_notification_as_read(notification_id: UUID, user_id: UUID, db: AsyncSession) -> bool:
    """Returns False when the notification does not exist or belongs to someone else."""
    res = await db.execute(
        select(Notification).where(Notification.id == notification_id, _visible_to(user_id))
    )
    notif = res.scalars().first()
    if not notif:
        return False
    notif.read = True
    await db.commit()
    return True

async def mark_all_as_read(user_id: UUID, db: AsyncSession) -> int:
    """Marks the user's own notifications read. Broadcasts are left alone."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    await db.commit()
    return int(result.rowcount or 0)

def _sse_payload(notification: Notification) -> dict:
    return {
        "id": str(notification.id),
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
        "read": False,
    }

async def create_notification(
    title: str,
    message: str,
    db: AsyncSession,
    user_id: Optional[UUID] = None,
    notif_type: NotificationType = NotificationType.INFO,
    commit: bool = True,
) -> Notification:
    """
    Create a notification for one user, or a broadcast when user_id is None,
    and push it to live SSE connections.

    Args:
        commit: If False, only flushes; the caller commits the transaction
                (event listeners rely on the dispatcher's commit).
    """
    if isinstance(user_id, str):
        user_id = UUID(user_id)

    notification = Notification(
        title=title,
        message=message,
        user_id=user_id,
        type=notif_type,
    )
    db.add(notification)
    if commit:
        await db.commit()
    else:
        await db.flush()
    await db.refresh(notification)

    payload = _sse_payload(notification)
    if notification.user_id is not None:
        await sse_manager.send_to_user(str(notification.user_id), payload)
    else:
        await sse_manager.broadcast(payload)
    return notification
