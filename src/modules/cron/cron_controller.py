from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.ext.asyncio import AsyncSession
from src.common.database.database import get_db_session as get_db
from src.common.utils.global_messages import GlobalMessages
from src.modules.gamification import reconciliation
from src.modules.gamification.schemas import ReconcileResponse
from src.common.config import settings
from typing import Optional

router = APIRouter(prefix="/cron", tags=["Cron Jobs"])

@router.post("/reconcile-achievements", response_model=ReconcileResponse)
async def reconcile_achievements(
    x_cron_secret: Optional[str] = Header(None, alias="X-Cron-Secret"),
    db: AsyncSession = Depends(get_db)
):
    """
    Grant the missing XP of unlocked achievements.
    Protected by X-Cron-Secret header.
    """
    if x_cron_secret != settings.CRON_SECRET:
        raise HTTPException(status_code=403, detail=GlobalMessages.INVALID_CRON_SECRET)

    return await reconciliation.reconcile_achievement_points(db)
