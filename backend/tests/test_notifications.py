"""Tests for the notification inbox endpoints."""
from datetime import timedelta

from app.models.notification import Notification, NotificationType
from tests.conftest import new_id


def _notify(db, user_id, title="Event starting soon"):
    row = Notification(
        user_id=user_id,
        type=NotificationType.event_reminder,
        title=title,
        message="starts soon",
        data={"event_id": new_id()},
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


class TestInbox:

    def test_list_newest_first(self, client, db):
        user = new_id()
        first = _notify(db, user, title="first")
        second = _notify(db, user, title="second")
        second.created_at = first.created_at + timedelta(seconds=5)
        db.commit()
        _notify(db, new_id(), title="someone else")

        body = client.get(f"/api/notifications/?user_id={user}").json()
        assert [n["title"] for n in body["data"]] == ["second", "first"]
        assert body["total"] == 2

    def test_unread_count_and_mark_read(self, client, db):
        user = new_id()
        one = _notify(db, user)
        _notify(db, user)

        assert client.get(f"/api/notifications/unread-count?user_id={user}").json() == {"count": 2}

        resp = client.post(f"/api/notifications/{one.notification_id}/read?user_id={user}")
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True
        assert client.get(f"/api/notifications/unread-count?user_id={user}").json() == {"count": 1}

    def test_cannot_mark_someone_elses_notification(self, client, db):
        row = _notify(db, new_id())
        resp = client.post(f"/api/notifications/{row.notification_id}/read?user_id={new_id()}")
        assert resp.status_code == 404

    def test_mark_all_read(self, client, db):
        user = new_id()
        for _ in range(3):
            _notify(db, user)

        resp = client.post(f"/api/notifications/read-all?user_id={user}")
        assert resp.json() == {"status": "ok", "updated": 3}
        assert client.get(f"/api/notifications/unread-count?user_id={user}").json() == {"count": 0}
