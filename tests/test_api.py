from uuid import uuid4

from src.models.models import UnlockedAchievement


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_levels_are_public(client):
    response = await client.get("/gamification/levels")
    assert response.status_code == 200
    levels = response.json()
    assert len(levels) == 7
    assert levels[-1]["name"] == "Lenda Financeira"


async def test_state_requires_token(client, profile, token_for):
    response = await client.get("/gamification/state")
    assert response.status_code in (401, 403)

    response = await client.get("/gamification/state", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

    forged = token_for(profile.id, secret="someone-elses-secret")
    response = await client.get("/gamification/state", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401

    stranger = token_for(uuid4())
    response = await client.get("/gamification/state", headers={"Authorization": f"Bearer {stranger}"})
    assert response.status_code == 401


async def test_award_points_and_state(client, profile, auth_headers, admin_headers):
    url = f"/admin/gamification/users/{profile.id}/points"
    response = await client.post(url, json={"action_type": "video_watched"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"awarded": True, "total_xp": 20}

    state = (await client.get("/gamification/state", headers=auth_headers)).json()
    assert state["total_xp"] == 20
    assert state["current_level"]["name"] == "Iniciante"
    assert state["next_level"]["name"] == "Aprendiz"
    assert state["xp_to_next_level"] == 180
    assert state["progress"] == 10.0

    history = (await client.get("/gamification/history", headers=auth_headers)).json()
    assert [h["action_type"] for h in history] == ["video_watched"]


async def test_users_cannot_credit_themselves(client, profile, auth_headers):
    points = await client.post(
        f"/admin/gamification/users/{profile.id}/points",
        json={"action_type": "module_completed"},
        headers=auth_headers,
    )
    unlock = await client.post(
        f"/admin/gamification/users/{profile.id}/achievements/streak_30/unlock",
        headers=auth_headers,
    )

    assert points.status_code == 403
    assert unlock.status_code == 403
    assert (await client.post("/gamification/points", json={"action_type": "module_completed"}, headers=auth_headers)).status_code in (404, 405)

    state = (await client.get("/gamification/state", headers=auth_headers)).json()
    assert state["total_xp"] == 0
    assert state["achievements"] == []


async def test_award_to_unknown_user(client, admin_headers):
    response = await client.post(
        f"/admin/gamification/users/{uuid4()}/points", json={"action_type": "video_watched"}, headers=admin_headers
    )
    assert response.status_code == 404


async def test_unknown_action_is_rejected(client, profile, admin_headers):
    response = await client.post(
        f"/admin/gamification/users/{profile.id}/points", json={"action_type": "hacked"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_unlock_is_idempotent(client, profile, auth_headers, admin_headers):
    url = f"/admin/gamification/users/{profile.id}/achievements/first_video/unlock"
    first = await client.post(url, headers=admin_headers)
    second = await client.post(url, headers=admin_headers)

    assert first.json() == {"unlocked": True, "total_xp": 20}
    assert second.json() == {"unlocked": False, "total_xp": 20}

    catalog = (await client.get("/gamification/achievements", headers=auth_headers)).json()
    unlocked = [a["key"] for a in catalog if a["unlocked"]]
    assert unlocked == ["first_video"]
    assert len(catalog) == 14


async def test_unknown_achievement_is_rejected(client, profile, admin_headers):
    response = await client.post(f"/admin/gamification/users/{profile.id}/achievements/nope/unlock", headers=admin_headers)
    assert response.status_code == 422


async def test_check_in(client, auth_headers):
    response = await client.post("/gamification/check-in", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["unlocked"] == ["welcome"]
    assert body["awarded"] == ["daily_login"]
    assert body["total_xp"] == 20


async def test_achievement_notification_is_delivered(client, profile, auth_headers, admin_headers):
    await client.post(f"/admin/gamification/users/{profile.id}/achievements/welcome/unlock", headers=admin_headers)

    response = await client.get("/notifications", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["unread"] == 1
    assert body["items"][0]["message"] == "👋 Boas-vindas (+10 XP)"

    notification_id = body["items"][0]["id"]
    response = await client.put(f"/notifications/{notification_id}/read", headers=auth_headers)
    assert response.status_code == 200
    assert (await client.get("/notifications", headers=auth_headers)).json()["unread"] == 0


async def test_first_finance_entry_earns_points(client, auth_headers):
    entry = {"type": "income", "category": "Salário", "value": "2500.00", "date": "2024-06-05"}

    first = await client.post("/finances", json=entry, headers=auth_headers)
    second = await client.post("/finances", json=entry, headers=auth_headers)

    assert first.status_code == 201
    assert first.json()["points_awarded"] is True
    assert second.json()["points_awarded"] is False
    assert len((await client.get("/finances", headers=auth_headers)).json()) == 2


async def test_batch_import(client, auth_headers):
    payload = {"entries": [
        {"type": "fixed_expense", "category": "Moradia", "value": "900.00", "date": "2024-06-01"},
        {"type": "variable_expense", "category": "Lazer", "value": "80.50", "date": "2024-06-03"},
    ]}

    response = await client.post("/finances/batch", json=payload, headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    assert len(body["entries"]) == 2
    assert body["achievement_unlocked"] is True
    assert body["points_awarded"] is True

    state = (await client.get("/gamification/state", headers=auth_headers)).json()
    assert state["total_xp"] == 40 + 40

    report = (await client.get("/reports/categories?year=2024&month=6", headers=auth_headers)).json()
    assert report["categories"][0]["category"] == "Moradia"


async def test_profile_update_rewards(client, auth_headers):
    payload = {"phone": "11 98888-7777", "profession": "Designer", "avatar_url": "https://cdn.example.com/ana.png"}

    response = await client.put("/user/profile", json=payload, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["profession"] == "Designer"
    assert body["points_awarded"] is True
    assert body["profile_complete_unlocked"] is True
    assert body["total_xp"] == 20 + 50


async def test_reward_admin_and_claim(client, profile, auth_headers, admin_headers, grant_xp):
    reward = {"name": "Caneca Economiza", "points_required": 30, "stock": 1}

    forbidden = await client.post("/admin/rewards", json=reward, headers=auth_headers)
    assert forbidden.status_code == 403

    created = await client.post("/admin/rewards", json=reward, headers=admin_headers)
    assert created.status_code == 201
    reward_id = created.json()["id"]

    poor = await client.post(f"/rewards/{reward_id}/claim", headers=auth_headers)
    assert poor.status_code == 402

    await grant_xp(profile.id, 30)
    claimed = await client.post(f"/rewards/{reward_id}/claim", headers=auth_headers)
    assert claimed.status_code == 201
    assert claimed.json()["status"] == "pending"
    assert claimed.json()["reward"]["name"] == "Caneca Economiza"

    sold_out = await client.post(f"/rewards/{reward_id}/claim", headers=auth_headers)
    assert sold_out.status_code == 404

    claim_id = claimed.json()["id"]
    url = f"/admin/rewards/claims/{claim_id}"
    skipped = await client.patch(url, json={"status": "delivered"}, headers=admin_headers)
    assert skipped.status_code == 409

    approved = await client.patch(url, json={"status": "approved"}, headers=admin_headers)
    delivered = await client.patch(url, json={"status": "delivered"}, headers=admin_headers)
    assert approved.json()["status"] == "approved"
    assert delivered.status_code == 200
    assert delivered.json()["status"] == "delivered"

    reopened = await client.patch(url, json={"status": "pending"}, headers=admin_headers)
    assert reopened.status_code == 409


async def test_cron_reconcile(client, db, profile):
    db.add(UnlockedAchievement(user_id=profile.id, achievement_key="first_bank"))
    await db.commit()

    denied = await client.post("/cron/reconcile-achievements", headers={"X-Cron-Secret": "wrong"})
    assert denied.status_code == 403

    response = await client.post("/cron/reconcile-achievements", headers={"X-Cron-Secret": "test-cron-secret"})
    assert response.status_code == 200
    assert response.json() == {"checked": 1, "repaired": 1}
