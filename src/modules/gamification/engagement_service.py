# src/modules/gamification/engagement_service.py

import logging
from datetime import date, datetime, timezone, timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select

from src.common.exceptions import DataAccessError
from src.models.models import Profile, UserLogin
from src.modules.gamification.catalog import AchievementKey, ActionType
from src.modules.gamification.ledger import GamificationLedger

logger = logging.getLogger(__name__)

STREAK_ACHIEVEMENTS = (
    (7, AchievementKey.STREAK_7),
    (30, AchievementKey.STREAK_30),
)

PROFILE_FIELDS = ("full_name", "phone", "profession", "avatar_url")

def _as_date(value: datetime) -> date:
    # SQLite hands back naive datetimes; they are stored in UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()

def has_consecutive_days(login_dates: List[date], days: int) -> bool:
    """
    True when the `days` most recent distinct dates are consecutive.
    """
    unique_dates = sorted(set(login_dates), reverse=True)
    if len(unique_dates) < days:
        return False
    for i in range(days - 1):
        if (unique_dates[i] - unique_dates[i + 1]).days != 1:
            return False
    return True

async def record_check_in(ledger: GamificationLedger, now: Optional[datetime] = None) -> dict:
    """
    Record a login for the ledger's user and apply the engagement rules:
    `welcome` on the first check-in ever, `daily_login` points once per UTC
    day, and the streak achievements.
    """
    db = ledger.db
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(timezone.utc).date()
    window_start = now - timedelta(days=max(d for d, _ in STREAK_ACHIEVEMENTS) + 5)

    try:
        res = await db.execute(
            select(UserLogin.login_at)
            .where(UserLogin.user_id == ledger.user_id, UserLogin.login_at >= window_start)
        )
        previous = [_as_date(login_at) for login_at in res.scalars().all()]
        db.add(UserLogin(user_id=ledger.user_id, login_at=now))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to record check-in for user {ledger.user_id}: {e}")
        raise DataAccessError("Could not record check-in") from e

    awarded = []
    unlocked = []

    if await ledger.unlock_achievement(AchievementKey.WELCOME):
        unlocked.append(AchievementKey.WELCOME.value)

    if today not in previous:
        if await ledger.award_points(ActionType.DAILY_LOGIN):
            awarded.append(ActionType.DAILY_LOGIN.value)

    login_dates = previous + [today]
    for days, key in STREAK_ACHIEVEMENTS:
        if not ledger.has_achievement(key) and has_consecutive_days(login_dates, days):
            if await ledger.unlock_achievement(key):
                unlocked.append(key.value)

    return {"awarded": awarded, "unlocked": unlocked}

def is_profile_complete(profile: Profile) -> bool:
    return all(getattr(profile, field) for field in PROFILE_FIELDS)
