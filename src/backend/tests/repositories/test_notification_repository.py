"""
Tests for notification repository.
"""

import pytest

from repositories.notification_repository import NotificationRepository


@pytest.mark.integration
class TestNotificationRepository:
    """NotificationRepository against SQLite."""

    async def test_mark_read_is_scoped_to_owner(self, db_session, make_user) -> None:
        owner = await make_user()
        stranger = await make_user()
        repo = NotificationRepository(db_session)
        notification = await repo.create(owner.id, "system", "Welcome")
        await db_session.commit()

        assert await repo.mark_read(stranger.id, notification.id) is False
        assert await repo.mark_read(owner.id, notification.id) is True
        await db_session.commit()

        [stored] = await repo.list_for_user(owner.id)
        assert stored.is_read is True

    async def test_mark_all_read_and_unread_filter(self, db_session, make_user) -> None:
        user = await make_user()
        repo = NotificationRepository(db_session)
        for title in ("one", "two", "three"):
            await repo.create(user.id, "system", title)
        await db_session.commit()

        assert len(await repo.list_for_user(user.id, unread_only=True)) == 3
        assert await repo.mark_all_read(user.id) == 3
        await db_session.commit()

        assert await repo.list_for_user(user.id, unread_only=True) == []
        assert await repo.mark_all_read(user.id) == 0

    async def test_limit(self, db_session, make_user) -> None:
        user = await make_user()
        repo = NotificationRepository(db_session)
        for n in range(5):
            await repo.create(user.id, "system", f"n{n}")
        await db_session.commit()

        assert len(await repo.list_for_user(user.id, limit=2)) == 2
