"""Tests for the notification emitter and the read paths."""
import asyncio
from uuid import UUID

from causeconnect.db.database import AsyncSessionLocal
from causeconnect.models.notification import NotificationType
from causeconnect.services.notification_service import emit_notification


def _emit(recipient_id, actor_id, notification_type=NotificationType.SYSTEM, **fields):
    async def run():
        async with AsyncSessionLocal() as db:
            return await emit_notification(
                db,
                recipient_id=UUID(recipient_id),
                actor_id=UUID(actor_id),
                notification_type=notification_type,
                title=fields.get("title", "Heads up"),
                message=fields.get("message", "Something happened"),
                amount=fields.get("amount"),
                action_url=fields.get("action_url"),
            )
    return asyncio.run(run())


def test_self_notification_suppressed(alice):
    assert _emit(alice.id, alice.id) is None


def test_own_content_actions_do_not_notify(client, alice, create_post, create_event, notifications_for):
    post = create_post(alice)
    event = create_event(alice)
    client.post("/post-like", json={"postId": post["id"]}, headers=alice.headers)
    client.post("/event-support", json={"eventId": event["id"]}, headers=alice.headers)
    client.post("/comment-create", json={"postId": post["id"], "content": "me again"}, headers=alice.headers)

    assert notifications_for(alice) == []


def test_list_newest_first_and_type_filter(client, alice, bob, notifications_for):
    _emit(bob.id, alice.id, NotificationType.SYSTEM, title="first")
    _emit(bob.id, alice.id, NotificationType.LIKE, title="second")

    titles = [n["title"] for n in notifications_for(bob)]
    assert titles == ["second", "first"]

    likes = notifications_for(bob, type="like")
    assert [n["title"] for n in likes] == ["second"]


def test_unknown_type_filter_rejected(client, bob):
    resp = client.get("/notification-list", params={"type": "bogus"}, headers=bob.headers)
    assert resp.status_code == 400


def test_mark_read_touches_only_one(client, alice, bob, notifications_for):
    _emit(bob.id, alice.id, title="one")
    _emit(bob.id, alice.id, title="two")
    target, other = notifications_for(bob)

    resp = client.patch("/notification-read", params={"id": target["id"]}, headers=bob.headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    by_id = {n["id"]: n for n in notifications_for(bob)}
    assert by_id[target["id"]]["isRead"] is True
    assert by_id[other["id"]]["isRead"] is False
    assert client.get("/notification-unread-count", headers=bob.headers).json() == {"count": 1}


def test_mark_read_is_scoped_to_owner(client, alice, bob, notifications_for):
    _emit(bob.id, alice.id)
    [notification] = notifications_for(bob)

    client.patch("/notification-read", params={"id": notification["id"]}, headers=alice.headers)

    assert notifications_for(bob)[0]["isRead"] is False


def test_mark_all_read(client, alice, bob, carol, notifications_for):
    _emit(bob.id, alice.id, title="one")
    _emit(bob.id, alice.id, title="two")
    _emit(bob.id, alice.id, title="three")
    _emit(carol.id, alice.id, title="for carol")
    first = notifications_for(bob)[0]
    client.patch("/notification-read", params={"id": first["id"]}, headers=bob.headers)

    resp = client.patch("/notification-read-all", headers=bob.headers)
    assert resp.json() == {"success": True, "updated": 2}

    assert all(n["isRead"] for n in notifications_for(bob))
    assert client.get("/notification-unread-count", headers=bob.headers).json() == {"count": 0}
    assert client.get("/notification-unread-count", headers=carol.headers).json() == {"count": 1}


def test_unread_count_matches_list(client, alice, bob, notifications_for):
    for i in range(4):
        _emit(bob.id, alice.id, title=f"n{i}")
    client.patch("/notification-read", params={"id": notifications_for(bob)[0]["id"]}, headers=bob.headers)

    unread = [n for n in notifications_for(bob) if not n["isRead"]]
    count = client.get("/notification-unread-count", headers=bob.headers).json()["count"]
    assert count == len(unread) == 3


def test_pagination_shape(client, alice, bob):
    for i in range(3):
        _emit(bob.id, alice.id, title=f"n{i}")

    resp = client.get("/notification-list", params={"page": 1, "limit": 2}, headers=bob.headers)
    body = resp.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}


def test_failed_notification_insert_does_not_fail_the_action(client, alice, bob, notifications_for, monkeypatch, caplog):
    from causeconnect.services import notification_service

    def broken_notification(**fields):
        raise RuntimeError("notifications table unavailable")

    monkeypatch.setattr(notification_service, "Notification", broken_notification)

    with caplog.at_level("WARNING", logger="causeconnect.services.notification_service"):
        resp = client.post("/user-follow", json={"userId": bob.id}, headers=alice.headers)

    assert resp.status_code == 200
    assert resp.json() == {"isFollowing": True, "followersCount": 1}
    assert "notifications table unavailable" in caplog.text

    monkeypatch.undo()
    assert notifications_for(bob) == []
    assert client.get("/notification-unread-count", headers=bob.headers).json()["count"] == 0
