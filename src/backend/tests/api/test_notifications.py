"""
Tests for notification API endpoints.
"""

import pytest
from httpx import AsyncClient

from repositories.notification_repository import NotificationRepository

BASE = "/api/v1/notifications"


@pytest.mark.unit
class TestNotificationAuth:
    async def test_list_requires_auth(self, client: AsyncClient) -> None:
        response = await client.get(f"{BASE}/")
        assert response.status_code in [401, 403]


@pytest.mark.integration
class TestNotificationEndpoints:
    """Listing and read-state endpoints."""

    async def test_achievement_creates_notification(self, client: AsyncClient, auth_headers) -> None:
        await client.post(
            "/api/v1/gamification/points",
            json={"action": "upload_resource"},
            headers=auth_headers,
        )

        response = await client.get(f"{BASE}/", headers=auth_headers)

        assert response.status_code == 200
        [notification] = response.json()
        assert notification["type"] == "achievement"
        assert notification["title"] == "Achievement Unlocked: First Contribution"
        assert notification["data"]["achievement_id"] == "first_upload"
        assert notification["is_read"] is False

    async def test_mark_read(self, client: AsyncClient, db_session, user, auth_headers) -> None:
        notification = await NotificationRepository(db_session).create(user.id, "system", "Welcome")
        await db_session.commit()

        response = await client.post(f"{BASE}/{notification.id}/read", headers=auth_headers)
        assert response.status_code == 204

        unread = await client.get(f"{BASE}/", params={"unread_only": True}, headers=auth_headers)
        assert unread.json() == []

    async def test_mark_read_of_other_users_notification(
        self, client: AsyncClient, db_session, make_user, auth_headers
    ) -> None:
        other = await make_user()
        notification = await NotificationRepository(db_session).create(other.id, "system", "Private")
        await db_session.commit()

        response = await client.post(f"{BASE}/{notification.id}/read", headers=auth_headers)
        assert response.status_code == 404

    async def test_mark_all_read(self, client: AsyncClient, db_session, user, auth_headers) -> None:
        repo = NotificationRepository(db_session)
        await repo.create(user.id, "system", "One")
        await repo.create(user.id, "new_resource", "Two")
        await db_session.commit()

        response = await client.post(f"{BASE}/mark-all-read", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"updated": 2}
