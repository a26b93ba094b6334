import json
from uuid import uuid4

from sqlalchemy import select

from src.events.dispatcher import EventDispatcher
from src.events.listeners.notification_listener import (
    notify_achievement_unlocked, notify_claim_status_changed, notify_points_awarded,
)
from src.events.sse_manager import SSEManager, sse_manager
from src.models.models import Notification, NotificationType
from src.modules.notifications import notification_service


async def test_user_sees_own_and_broadcast(db, profile, other_profile):
    await notification_service.create_notification("Olá", "Bem-vinda", db, user_id=profile.id)
    await notification_service.create_notification("Novidade", "Nova ferramenta", db)
    await notification_service.create_notification("Só Bruno", "Privado", db, user_id=other_profile.id)

    items, total, unread = await notification_service.get_notifications(profile.id, db)
    assert sorted(n.title for n in items) == ["Novidade", "Olá"]
    assert total == 2
    assert unread == 2

    items, total, _ = await notification_service.get_notifications(other_profile.id, db, limit=1)
    assert len(items) == 1
    assert total == 2


async def test_mark_as_read(db, profile, other_profile):
    mine = await notification_service.create_notification("A", "a", db, user_id=profile.id)
    theirs = await notification_service.create_notification("B", "b", db, user_id=other_profile.id)

    assert await notification_service.mark_notification_as_read(mine.id, profile.id, db) is True
    assert await notification_service.mark_notification_as_read(theirs.id, profile.id, db) is False
    assert await notification_service.mark_notification_as_read(uuid4(), profile.id, db) is False

    _, _, unread = await notification_service.get_notifications(profile.id, db)
    assert unread == 0


async def test_mark_all_leaves_broadcasts(db, profile):
    await notification_service.create_notification("A", "a", db, user_id=profile.id)
    await notification_service.create_notification("B", "b", db, user_id=profile.id)
    await notification_service.create_notification("Geral", "g", db)

    assert await notification_service.mark_all_as_read(profile.id, db) == 2

    _, total, unread = await notification_service.get_notifications(profile.id, db)
    assert total == 3
    assert unread == 1


async def test_new_notification_is_pushed_to_open_streams(db, profile):
    queue = sse_manager.connect(str(profile.id))
    try:
        await notification_service.create_notification(
            "+20 XP!", "Assistiu vídeo", db, user_id=profile.id, notif_type=NotificationType.SUCCESS
        )
        frame = queue.get_nowait()
    finally:
        sse_manager.disconnect(str(profile.id), queue)

    assert frame.startswith("data: ")
    payload = json.loads(frame[len("data: "):])
    assert payload["title"] == "+20 XP!"
    assert payload["type"] == "success"
    assert not sse_manager.is_connected(str(profile.id))


async def test_broadcast_reaches_every_stream():
    manager = SSEManager()
    first = manager.connect("u1")
    second = manager.connect("u2")

    await manager.broadcast({"title": "Manutenção"})

    assert "Manutenção" in first.get_nowait()
    assert "Manutenção" in second.get_nowait()


async def test_frames_keep_accents_and_emoji_readable():
    manager = SSEManager()
    queue = manager.connect("u1")

    await manager.send_to_user("u1", {"title": "🏆 Conquista desbloqueada!", "message": "Promoção"})

    assert queue.get_nowait() == 'data: {"title": "🏆 Conquista desbloqueada!", "message": "Promoção"}\n\n'


async def test_points_listener(db, profile):
    await notify_points_awarded(user_id=str(profile.id), points=20, description="Assistiu vídeo", db=db)
    await db.commit()

    notif = (await db.execute(select(Notification))).scalars().one()
    assert notif.title == "+20 XP!"
    assert notif.message == "Assistiu vídeo"
    assert notif.type == NotificationType.SUCCESS


async def test_achievement_listener(db, profile):
    await notify_achievement_unlocked(
        user_id=str(profile.id), achievement_name="Primeiro Passo", icon="🎬", xp=20, db=db,
        achievement_key="first_video",
    )
    await db.commit()

    notif = (await db.execute(select(Notification))).scalars().one()
    assert notif.title == "🏆 Nova Conquista!"
    assert notif.message == "🎬 Primeiro Passo (+20 XP)"


async def test_pending_status_is_not_notified(db, profile):
    await notify_claim_status_changed(user_id=str(profile.id), reward_name="Caneca", status="pending", db=db)
    await db.commit()

    assert (await db.execute(select(Notification))).scalars().all() == []


async def test_dispatcher_isolates_listener_failures(session_factory, profile):
    events = EventDispatcher(session_factory)
    calls = []

    async def broken(**kwargs):
        raise RuntimeError("boom")

    async def recorder(user_id, db, **kwargs):
        calls.append(user_id)
        await notification_service.create_notification("Ok", "ok", db, user_id=user_id, commit=False)

    events.subscribe("something_happened", broken)
    events.subscribe("something_happened", recorder)
    events.subscribe("something_happened", recorder)
    assert len(events.listeners("something_happened")) == 2

    await events.dispatch("something_happened", user_id=str(profile.id))

    assert calls == [str(profile.id)]
    async with session_factory() as session:
        saved = (await session.execute(select(Notification))).scalars().all()
    assert [n.title for n in saved] == ["Ok"]


async def test_dispatch_without_listeners_is_noop(session_factory):
    await EventDispatcher(session_factory).dispatch("nobody_listens", user_id="x")
