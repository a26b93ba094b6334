# src/modules/gamification/reconciliation.py

import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.common.exceptions import DataAccessError
from src.models.models import PointEntry, UnlockedAchievement
from src.modules.gamification import catalog

logger = logging.getLogger(__name__)

async def reconcile_achievement_points(db: AsyncSession) -> Dict[str, int]:
    """
    Insert the XP grant for every unlocked achievement that has no matching
    ``achievement_<key>`` ledger entry.

    Unlocks written by current code carry their grant in the same
    transaction; this repairs rows that predate that or were imported.
    """
    try:
        unlocked = (await db.execute(
            select(UnlockedAchievement.user_id, UnlockedAchievement.achievement_key)
        )).all()
        granted = {
            (row.user_id, row.action_type)
            for row in (await db.execute(
                select(PointEntry.user_id, PointEntry.action_type)
                .where(PointEntry.action_type.like("achievement_%"))
            )).all()
        }
    except SQLAlchemyError as e:
        logger.error(f"Error reading ledger for reconciliation: {e}")
        raise DataAccessError("Could not read ledger for reconciliation") from e

    repaired = 0
    for user_id, key in unlocked:
        action_type = catalog.achievement_action_type(key)
        if (user_id, action_type) in granted:
            continue
        achievement = catalog.get_achievement(key)
        if achievement is None:
            logger.warning(f"Skipping unknown achievement '{key}' unlocked by user {user_id}")
            continue
        db.add(PointEntry(
            user_id=user_id,
            action_type=action_type,
            points=achievement.xp_reward,
            description=f"Conquista: {achievement.name}",
        ))
        granted.add((user_id, action_type))
        repaired += 1

    if repaired:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Error writing reconciled ledger entries: {e}")
            raise DataAccessError("Could not write reconciled ledger entries") from e

    logger.info(f"Reconciled achievement XP: checked {len(unlocked)}, repaired {repaired}")
    return {"checked": len(unlocked), "repaired": repaired}
