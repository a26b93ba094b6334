from sqlalchemy import select

from src.models.models import PointEntry, UnlockedAchievement
from src.modules.gamification.ledger import GamificationLedger
from src.modules.gamification.reconciliation import reconcile_achievement_points


async def test_repairs_missing_grants(db, profile, other_profile, events):
    user_id, other_id = profile.id, other_profile.id

    # Current code path: unlock and grant together
    ledger = await GamificationLedger.for_user(user_id, db, events)
    await ledger.unlock_achievement("welcome")

    # Legacy rows with no grant
    db.add_all([
        UnlockedAchievement(user_id=user_id, achievement_key="first_video"),
        UnlockedAchievement(user_id=other_id, achievement_key="streak_7"),
        UnlockedAchievement(user_id=other_id, achievement_key="retired_badge"),
    ])
    await db.commit()

    result = await reconcile_achievement_points(db)
    assert result == {"checked": 4, "repaired": 2}

    rows = (await db.execute(
        select(PointEntry.user_id, PointEntry.action_type, PointEntry.points)
        .where(PointEntry.action_type.like("achievement_%"))
    )).all()
    assert sorted((r.action_type, r.points) for r in rows if r.user_id == user_id) == [
        ("achievement_first_video", 20),
        ("achievement_welcome", 10),
    ]
    assert [(r.action_type, r.points) for r in rows if r.user_id == other_id] == [
        ("achievement_streak_7", 100),
    ]

    refreshed = await GamificationLedger.for_user(other_id, db, events)
    assert refreshed.total_xp == 100


async def test_reconcile_is_idempotent(db, profile):
    db.add(UnlockedAchievement(user_id=profile.id, achievement_key="first_goal"))
    await db.commit()

    assert (await reconcile_achievement_points(db))["repaired"] == 1
    assert await reconcile_achievement_points(db) == {"checked": 1, "repaired": 0}


async def test_nothing_to_reconcile(db):
    assert await reconcile_achievement_points(db) == {"checked": 0, "repaired": 0}
