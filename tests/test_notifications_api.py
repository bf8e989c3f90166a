"""
Test Notifications API

Tests for:
- POST /api/notifications/generate - Overdue / Grace Period maintenance notifications
- GET /api/notifications - Listing and unread filter
- PUT /api/notifications/{id}/read - Mark read
"""

from datetime import date, timedelta

import pytest


def days_task(title: str, days_ago_completed: int, **overrides) -> dict:
    data = {
        "item_title": title,
        "is_days_due_enabled": True,
        "days_interval_type": "days",
        "days_due_value": "365",
        "last_completed_date": (date.today() - timedelta(days=days_ago_completed)).isoformat(),
    }
    data.update(overrides)
    return data


class TestGenerateNotifications:
    """Notification generation from maintenance status"""

    @pytest.fixture
    def task_ids(self, client, aircraft):
        url = f"/api/maintenance/aircraft/{aircraft['_id']}/tasks"
        overdue = client.post(url, json=days_task("Pitot-static", 400)).json()
        grace = client.post(url, json=days_task("Transponder", 400, days_tolerance=40)).json()
        client.post(url, json=days_task("Annual", 10))
        client.post(url, json=days_task("Retired", 400, is_active=False))
        return {"overdue": overdue["_id"], "grace": grace["_id"]}

    def test_generate_creates_one_per_overdue_or_grace_task(self, client, task_ids):
        response = client.post("/api/notifications/generate")
        assert response.status_code == 200
        assert response.json() == {"created_count": 2}

        notifications = client.get("/api/notifications").json()
        assert {n["_id"] for n in notifications} == {
            f"maintenance-due-{task_ids['overdue']}",
            f"maintenance-due-{task_ids['grace']}",
        }
        for notification in notifications:
            assert notification["type"] == "maintenance"
            assert notification["is_read"] is False
            assert "N123AB" in notification["message"]

    def test_generate_is_idempotent(self, client, task_ids):
        client.post("/api/notifications/generate")
        response = client.post("/api/notifications/generate")
        assert response.json() == {"created_count": 0}
        assert len(client.get("/api/notifications").json()) == 2

    def test_untracked_aircraft_skipped(self, client):
        aircraft = client.post("/api/fleet", json={
            "tail_number": "N555XX", "model": "PC-12", "is_maintenance_tracked": False
        }).json()
        client.post(f"/api/maintenance/aircraft/{aircraft['_id']}/tasks", json=days_task("Annual", 400))

        response = client.post("/api/notifications/generate")
        assert response.json() == {"created_count": 0}

    def test_mark_read_and_unread_filter(self, client, task_ids):
        client.post("/api/notifications/generate")
        notification_id = f"maintenance-due-{task_ids['overdue']}"

        response = client.put(f"/api/notifications/{notification_id}/read", json={"is_read": True})
        assert response.status_code == 200
        assert response.json()["is_read"] is True

        unread = client.get("/api/notifications", params={"unread_only": True}).json()
        assert [n["_id"] for n in unread] == [f"maintenance-due-{task_ids['grace']}"]

    def test_mark_read_missing(self, client):
        response = client.put("/api/notifications/missing/read", json={"is_read": True})
        assert response.status_code == 404
