"""
Tests for user repository.
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.mark.unit
class TestUserRepository:
    """Test UserRepository operations."""

    def test_repository_instantiation(self, mock_session) -> None:
        """Test that repository can be instantiated."""
        from repositories.user_repository import UserRepository

        repo = UserRepository(mock_session)
        assert repo.db == mock_session

    async def test_get_by_id_returns_user(self, mock_session) -> None:
        """Test getting user by ID."""
        from repositories.user_repository import UserRepository

        mock_user = MagicMock()
        mock_user.id = str(uuid.uuid4())

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=mock_user)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = UserRepository(mock_session)
        result = await repo.get_by_id(mock_user.id)

        assert result == mock_user
        mock_session.execute.assert_called_once()

    async def test_get_by_id_returns_none_for_missing(self, mock_session) -> None:
        """Test getting non-existent user returns None."""
        from repositories.user_repository import UserRepository

        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=None)
        mock_session.execute = AsyncMock(return_value=mock_result)

        repo = UserRepository(mock_session)
        assert await repo.get_by_id("non-existent-id") is None

    async def test_increment_points_reports_match(self, mock_session) -> None:
        """Test increment reports whether a row was updated."""
        from repositories.user_repository import UserRepository

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        repo = UserRepository(mock_session)
        assert await repo.increment_points("user-1", 10) is True

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=0))
        assert await repo.increment_points("missing", 10) is False

    async def test_increment_points_issues_single_update(self, mock_session) -> None:
        """Test the increment is one UPDATE statement, not a read-modify-write."""
        from repositories.user_repository import UserRepository

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        repo = UserRepository(mock_session)
        await repo.increment_points("user-1", 25)

        mock_session.execute.assert_called_once()
        statement = mock_session.execute.call_args.args[0]
        assert statement.is_dml
        assert "UPDATE users" in str(statement)


@pytest.mark.integration
class TestUserRepositoryDatabase:
    """UserRepository against SQLite."""

    async def test_increment_points_recomputes_badge_level(self, db_session, make_user) -> None:
        from repositories.user_repository import UserRepository

        user = await make_user(points=180)
        repo = UserRepository(db_session)

        assert await repo.increment_points(user.id, 30) is True
        await db_session.commit()
        await db_session.refresh(user)

        assert user.points == 210
        assert user.badge_level == "Advanced"

    async def test_repeated_increments_accumulate(self, db_session, make_user) -> None:
        from repositories.user_repository import UserRepository

        user = await make_user()
        repo = UserRepository(db_session)
        for _ in range(5):
            await repo.increment_points(user.id, 10)
        await db_session.commit()

        assert await repo.get_points(user.id) == 50

    async def test_leaderboard_excludes_inactive_users(self, db_session, make_user) -> None:
        from repositories.user_repository import UserRepository

        await make_user(id="active", points=10)
        await make_user(id="inactive", points=99, is_active=False)

        rows = await UserRepository(db_session).get_leaderboard(
            since=datetime.now(timezone.utc) - timedelta(days=7)
        )
        assert [row.user_id for row in rows] == ["active"]

    async def test_department_stats(self, db_session, make_user) -> None:
        from repositories.user_repository import UserRepository

        await make_user(points=10, department="Physics", full_name="Low")
        await make_user(points=30, department="Physics", full_name="High")

        repo = UserRepository(db_session)
        stats = await repo.get_department_stats()
        assert [(s.department, s.total_users, s.total_points) for s in stats] == [("Physics", 2, 40)]
        assert await repo.get_top_user_by_department() == {"Physics": "High"}

    async def test_count_by_badge_level_groups_at_thresholds(self, db_session, make_user) -> None:
        from repositories.user_repository import UserRepository

        for points in (0, 49, 50, 199, 1000, 2500):
            await make_user(points=points)

        counts = await UserRepository(db_session).count_by_badge_level()

        assert counts == {"Freshman": 2, "Intermediate": 2, "Master": 2}
