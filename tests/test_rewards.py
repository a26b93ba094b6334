from uuid import uuid4

import pytest
from sqlalchemy import func, select

import src.events.listeners.notification_listener  # noqa: F401  registers listeners
from src.common.exceptions import InsufficientPoints, InvalidClaimTransition, RewardUnavailable
from src.models.models import ClaimStatus, Notification, PointEntry, RewardClaim
from src.modules.gamification.ledger import GamificationLedger
from src.modules.rewards import reward_service


async def _reward(db, **fields):
    data = {"name": "Caneca Economiza", "points_required": 200, "stock": 2}
    data.update(fields)
    return await reward_service.create_reward(data, db)


async def _notifications(db, user_id):
    res = await db.execute(select(Notification).where(Notification.user_id == user_id))
    return res.scalars().all()


async def test_claim_deducts_points_and_stock(db, profile, grant_xp):
    user_id = profile.id
    await grant_xp(user_id, 300)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(user_id, db)

    claim = await reward_service.claim_reward(reward.id, ledger)

    assert claim.status == ClaimStatus.PENDING
    assert claim.reward.name == "Caneca Economiza"
    assert ledger.total_xp == 100
    assert (await reward_service.get_reward(reward.id, db)).stock == 1

    entry = (await db.execute(
        select(PointEntry).where(PointEntry.user_id == user_id, PointEntry.action_type == "reward_claimed")
    )).scalars().one()
    assert entry.points == -200
    assert entry.description == "Resgate: Caneca Economiza"

    reloaded = await GamificationLedger.for_user(user_id, db)
    assert reloaded.total_xp == 100

    titles = [n.title for n in await _notifications(db, user_id)]
    assert "🎁 Brinde resgatado!" in titles


async def test_unlimited_stock_is_never_decremented(db, profile, grant_xp):
    await grant_xp(profile.id, 500)
    reward = await _reward(db, stock=-1)
    ledger = await GamificationLedger.for_user(profile.id, db)

    await reward_service.claim_reward(reward.id, ledger)
    await reward_service.claim_reward(reward.id, ledger)

    assert (await reward_service.get_reward(reward.id, db)).stock == -1
    assert ledger.total_xp == 100


async def test_insufficient_points(db, profile, grant_xp):
    await grant_xp(profile.id, 150)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(profile.id, db)

    with pytest.raises(InsufficientPoints) as exc:
        await reward_service.claim_reward(reward.id, ledger)

    assert exc.value.available == 150
    assert exc.value.required == 200
    assert await db.scalar(select(func.count(RewardClaim.id))) == 0


@pytest.mark.parametrize("fields", [{"is_active": False}, {"stock": 0}])
async def test_unavailable_reward(db, profile, grant_xp, fields):
    await grant_xp(profile.id, 1000)
    reward = await _reward(db, **fields)
    ledger = await GamificationLedger.for_user(profile.id, db)

    with pytest.raises(RewardUnavailable):
        await reward_service.claim_reward(reward.id, ledger)
    assert ledger.total_xp == 1000


async def test_active_rewards_cheapest_first(db):
    await _reward(db, name="Mochila", points_required=800)
    await _reward(db, name="Adesivo", points_required=50)
    await _reward(db, name="Oculto", points_required=10, is_active=False)

    names = [r.name for r in await reward_service.get_active_rewards(db)]
    assert names == ["Adesivo", "Mochila"]
    assert len(await reward_service.get_all_rewards(db)) == 3


async def test_update_and_toggle_reward(db):
    reward = await _reward(db)

    reward = await reward_service.update_reward(reward, {"name": "Caneca Nova", "stock": None}, db)
    assert reward.name == "Caneca Nova"
    assert reward.stock == 2

    reward = await reward_service.toggle_reward(reward, db)
    assert reward.is_active is False


async def test_claim_status_flow(db, profile, grant_xp):
    user_id = profile.id
    await grant_xp(user_id, 300)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(user_id, db)
    claim = await reward_service.claim_reward(reward.id, ledger)

    updated = await reward_service.update_claim_status(claim.id, ClaimStatus.APPROVED, db)
    assert updated.status == ClaimStatus.APPROVED

    pending = await reward_service.get_all_claims(db, ClaimStatus.PENDING)
    approved = await reward_service.get_all_claims(db, ClaimStatus.APPROVED)
    assert pending == []
    assert [c.id for c in approved] == [claim.id]
    assert len(await reward_service.get_user_claims(user_id, db)) == 1

    messages = [n.message for n in await _notifications(db, user_id)]
    assert "Seu resgate de 'Caneca Economiza' foi aprovado." in messages


async def test_update_missing_claim(db):
    assert await reward_service.update_claim_status(uuid4(), ClaimStatus.DELIVERED, db) is None


async def test_claim_rechecks_balance_spent_elsewhere(db, profile, grant_xp):
    user_id = profile.id
    await grant_xp(user_id, 300)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(user_id, db)
    assert ledger.total_xp == 300

    # Another request spends the same XP after this ledger was loaded
    await grant_xp(user_id, -200, action_type="reward_claimed")

    with pytest.raises(InsufficientPoints) as exc:
        await reward_service.claim_reward(reward.id, ledger)

    assert exc.value.available == 100
    assert await db.scalar(select(func.count(RewardClaim.id))) == 0
    total = await db.scalar(select(func.sum(PointEntry.points)).where(PointEntry.user_id == user_id))
    assert total == 100


async def test_back_to_back_claims_never_overspend(db, profile, grant_xp):
    user_id = profile.id
    await grant_xp(user_id, 250)
    reward = await _reward(db, stock=-1)
    first = await GamificationLedger.for_user(user_id, db)
    second = await GamificationLedger.for_user(user_id, db)

    await reward_service.claim_reward(reward.id, first)
    with pytest.raises(InsufficientPoints):
        await reward_service.claim_reward(reward.id, second)

    assert (await GamificationLedger.for_user(user_id, db)).total_xp == 50


async def test_claim_walks_through_to_delivered(db, profile, grant_xp):
    await grant_xp(profile.id, 300)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(profile.id, db)
    claim = await reward_service.claim_reward(reward.id, ledger)
    claim_id = claim.id

    await reward_service.update_claim_status(claim_id, ClaimStatus.APPROVED, db)
    delivered = await reward_service.update_claim_status(claim_id, ClaimStatus.DELIVERED, db)

    assert delivered.status == ClaimStatus.DELIVERED


@pytest.mark.parametrize("path, rejected", [
    ([], ClaimStatus.DELIVERED),
    ([], ClaimStatus.PENDING),
    ([ClaimStatus.APPROVED], ClaimStatus.PENDING),
    ([ClaimStatus.APPROVED, ClaimStatus.DELIVERED], ClaimStatus.PENDING),
    ([ClaimStatus.APPROVED, ClaimStatus.DELIVERED], ClaimStatus.REJECTED),
    ([ClaimStatus.REJECTED], ClaimStatus.APPROVED),
])
async def test_claim_status_cannot_skip_or_leave_final_states(db, profile, grant_xp, path, rejected):
    await grant_xp(profile.id, 300)
    reward = await _reward(db)
    ledger = await GamificationLedger.for_user(profile.id, db)
    claim = await reward_service.claim_reward(reward.id, ledger)
    claim_id = claim.id
    for step in path:
        await reward_service.update_claim_status(claim_id, step, db)
    current = path[-1] if path else ClaimStatus.PENDING

    with pytest.raises(InvalidClaimTransition):
        await reward_service.update_claim_status(claim_id, rejected, db)

    assert (await reward_service.get_claim(claim_id, db)).status == current
