import logging
from sqlalchemy.ext.asyncio import AsyncSession
from src.events.dispatcher import dispatcher
from src.models.models import NotificationType
from src.modules.notifications.notification_service import create_notification

logger = logging.getLogger(__name__)

async def notify_points_awarded(user_id: str, points: int, description: str, db: AsyncSession, **kwargs):
    """
    Listens for 'points_awarded'.
    """
    try:
        await create_notification(
            user_id=user_id,
            title=f"+{points} XP!",
            message=description,
            db=db,
            notif_type=NotificationType.SUCCESS,
            commit=False  # The dispatcher will commit
        )
        logger.info(f"Notification queued for +{points} XP for user {user_id}")
    except Exception as e:
        logger.error(f"Error creating points notification for user {user_id}: {e}")

async def notify_achievement_unlocked(user_id: str, achievement_name: str, icon: str, xp: int, db: AsyncSession, **kwargs):
    """
    Listens for 'achievement_unlocked'.
    """
    try:
        await create_notification(
            user_id=user_id,
            title="🏆 Nova Conquista!",
            message=f"{icon} {achievement_name} (+{xp} XP)",
            db=db,
            notif_type=NotificationType.SUCCESS,
            commit=False
        )
        logger.info(f"Notification queued for unlocked achievement '{achievement_name}' for user {user_id}")
    except Exception as e:
        logger.error(f"Error creating notification for achievement {achievement_name}: {e}")

async def notify_reward_claimed(user_id: str, reward_name: str, db: AsyncSession, **kwargs):
    """
    Listens for 'reward_claimed'.
    """
    try:
        await create_notification(
            user_id=user_id,
            title="🎁 Brinde resgatado!",
            message=f"Você resgatou: {reward_name}. Aguarde a confirmação.",
            db=db,
            notif_type=NotificationType.SUCCESS,
            commit=False
        )
    except Exception as e:
        logger.error(f"Error creating notification for reward {reward_name}: {e}")

async def notify_claim_status_changed(user_id: str, reward_name: str, status: str, db: AsyncSession, **kwargs):
    """
    Listens for 'claim_status_changed'.
    """
    messages = {
        "approved": f"Seu resgate de '{reward_name}' foi aprovado.",
        "delivered": f"Seu brinde '{reward_name}' foi entregue.",
        "rejected": f"Seu resgate de '{reward_name}' foi recusado.",
    }
    message = messages.get(status)
    if message is None:
        return
    try:
        await create_notification(
            user_id=user_id,
            title="Atualização de resgate",
            message=message,
            db=db,
            notif_type=NotificationType.WARNING if status == "rejected" else NotificationType.INFO,
            commit=False
        )
    except Exception as e:
        logger.error(f"Error creating claim status notification for user {user_id}: {e}")

# Subscription rules
dispatcher.subscribe("points_awarded", notify_points_awarded)
dispatcher.subscribe("achievement_unlocked", notify_achievement_unlocked)
dispatcher.subscribe("reward_claimed", notify_reward_claimed)
dispatcher.subscribe("claim_status_changed", notify_claim_status_changed)
