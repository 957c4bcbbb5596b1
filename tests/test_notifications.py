"""Notifications, delivery scheduling and preferences."""
from datetime import timedelta

from wellnest.db import db
from wellnest.models import Notification, utcnow


def _notify(client, headers, user, **overrides):
    payload = {"user_id": str(user.id), "title": "Hello", "message": "Welcome aboard", "type": "system_update"}
    payload.update(overrides)
    return client.post("/api/notifications", json=payload, headers=headers)


def test_create_and_list(client, alice, bob, auth_headers) -> None:
    created = _notify(client, auth_headers(alice), bob)
    assert created.status_code == 201
    assert created.get_json()["delivered_at"] is not None

    body = client.get("/api/notifications", headers=auth_headers(bob)).get_json()
    assert body["total"] == 1
    assert body["unread_count"] == 1
    assert client.get("/api/notifications", headers=auth_headers(alice)).get_json()["total"] == 0


def test_scheduled_notification_waits_until_due(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    later = (utcnow() + timedelta(days=1)).isoformat() + "Z"
    created = _notify(client, headers, alice, scheduled_for=later).get_json()
    assert created["delivered_at"] is None

    assert client.get("/api/notifications", headers=headers).get_json()["total"] == 0
    assert client.get("/api/notifications/unread-count", headers=headers).get_json() == {"unread_count": 0}

    notification = Notification.query.one()
    notification.scheduled_for = utcnow() - timedelta(minutes=1)
    db.session.commit()

    body = client.get("/api/notifications", headers=headers).get_json()
    assert body["total"] == 1
    assert body["notifications"][0]["delivered_at"] is not None


def test_stats_ignore_undelivered_notifications(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    _notify(client, headers, alice)
    _notify(client, headers, alice, scheduled_for=(utcnow() + timedelta(days=1)).isoformat() + "Z")

    stats = client.get("/api/notifications/stats", headers=headers).get_json()

    assert stats["total_notifications"] == 1
    assert stats["unread_notifications"] == 1
    assert stats["notifications_by_type"] == {"system_update": 1}


def test_read_tracking(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    first = _notify(client, headers, alice).get_json()
    _notify(client, headers, alice, title="Second")

    read = client.patch(f"/api/notifications/{first['id']}/read", headers=headers).get_json()
    assert read["read_at"] is not None
    assert client.get("/api/notifications?unread_only=true", headers=headers).get_json()["total"] == 1

    assert client.patch("/api/notifications/read-all", headers=headers).get_json() == {"updated_count": 1}
    assert client.get("/api/notifications/unread-count", headers=headers).get_json()["unread_count"] == 0


def test_notifications_are_private(client, alice, bob, auth_headers) -> None:
    notification = _notify(client, auth_headers(alice), alice).get_json()
    assert client.get(f"/api/notifications/{notification['id']}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/api/notifications/{notification['id']}", headers=auth_headers(alice)).status_code == 204


def test_bulk_create_is_all_or_nothing(client, alice, bob, auth_headers) -> None:
    item = {"title": "Hi", "message": "Batch", "type": "system_update"}
    ok = client.post(
        "/api/notifications/bulk",
        json={"notifications": [dict(item, user_id=str(alice.id)), dict(item, user_id=str(bob.id))]},
        headers=auth_headers(alice),
    )
    assert ok.status_code == 201
    assert ok.get_json() == {"created_count": 2}

    missing = client.post(
        "/api/notifications/bulk",
        json={
            "notifications": [
                dict(item, user_id=str(alice.id)),
                dict(item, user_id="00000000-0000-0000-0000-000000000000"),
            ]
        },
        headers=auth_headers(alice),
    )
    assert missing.status_code == 404
    assert Notification.query.count() == 2


def test_quick_creators(client, alice, bob, auth_headers) -> None:
    workout = client.post(
        "/api/notifications/workout-reminder", json={"workout_id": "w1", "type": "cardio"}, headers=auth_headers(alice)
    ).get_json()
    assert workout["message"] == "Time for your cardio workout!"
    assert workout["type"] == "reminder"

    badge = client.post(
        "/api/notifications/achievement", json={"id": "a1", "title": "First 5k"}, headers=auth_headers(alice)
    ).get_json()
    assert badge["priority"] == "high"
    assert badge["action_url"] == "/app/achievements/a1"

    social = client.post(
        "/api/notifications/social",
        json={"user_id": str(bob.id), "message": "Alice liked your post"},
        headers=auth_headers(alice),
    ).get_json()
    assert social["user_id"] == str(bob.id)
    assert social["triggered_by_user"]["name"] == "Alice"

    stats = client.get("/api/notifications/stats", headers=auth_headers(alice)).get_json()
    assert stats["total_notifications"] == 2
    assert stats["notifications_by_type"] == {"reminder": 1, "achievement": 1}
    assert stats["recent_activity"] is True


def test_preference_toggle(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    choice = {"notification_type": "post_like", "delivery_channel": "email"}

    first = client.post("/api/notifications/preferences/toggle", json=choice, headers=headers).get_json()
    second = client.post("/api/notifications/preferences/toggle", json=choice, headers=headers).get_json()

    assert first["is_enabled"] is False
    assert second["is_enabled"] is True
    preferences = client.get("/api/notifications/preferences", headers=headers).get_json()
    assert len(preferences) == 1
