"""
Tests for progress and leaderboard reporting.
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.achievement import UserAchievement
from schemas.gamification import LeaderboardScope, LeaderboardType, Timeframe
from services.cache_service import TTLCache
from services.progress_service import ProgressService, UnsupportedLeaderboardScopeError, clamp_limit


@pytest.mark.integration
class TestUserProgress:
    """Tests for ProgressService.get_user_progress."""

    @pytest.mark.parametrize(
        "points,level,next_level,remaining",
        [
            (49, "Freshman", "Intermediate", 1),
            (50, "Intermediate", "Advanced", 150),
            (500, "Expert", "Master", 500),
            (1200, "Master", "Master", 0),
        ],
    )
    async def test_levels(self, repos, make_user, points, level, next_level, remaining) -> None:
        user = await make_user(points=points)

        progress = await ProgressService(repos, cache=TTLCache()).get_user_progress(user.id)

        assert progress.total_points == points
        assert progress.current_level == level
        assert progress.next_level == next_level
        assert progress.points_to_next_level == remaining

    async def test_achievements_and_weekly_progress(
        self, db_session, repos, make_user, make_contribution
    ) -> None:
        user = await make_user(points=60)
        now = datetime.now(timezone.utc)
        db_session.add_all(
            [
                UserAchievement(user_id=user.id, achievement_id="points_100", points_earned=25, earned_at=now),
                UserAchievement(
                    user_id=user.id,
                    achievement_id="first_upload",
                    points_earned=10,
                    earned_at=now - timedelta(days=20),
                ),
                UserAchievement(user_id=user.id, achievement_id="retired_badge", points_earned=5, earned_at=now),
            ]
        )
        await db_session.commit()
        await make_contribution(user, points_earned=10)
        await make_contribution(user, points_earned=15, days_ago=1)
        await make_contribution(user, points_earned=40, days_ago=10)

        progress = await ProgressService(repos, cache=TTLCache()).get_user_progress(user.id)

        assert [a.id for a in progress.achievements_earned] == ["first_upload", "points_100"]
        assert [a.id for a in progress.recent_achievements] == ["points_100"]
        assert progress.weekly_progress.points_earned == 25
        assert progress.weekly_progress.actions_completed == 2
        assert progress.weekly_progress.streak_days == 2

    async def test_unknown_user_starts_at_zero(self, repos) -> None:
        progress = await ProgressService(repos, cache=TTLCache()).get_user_progress("nobody")
        assert progress.total_points == 0
        assert progress.current_level == "Freshman"
        assert progress.achievements_earned == []


@pytest.mark.integration
class TestLeaderboard:
    """Tests for ProgressService.get_leaderboard and get_user_rank."""

    @pytest.fixture
    async def ranked_users(self, make_user, make_resource, make_collection, make_contribution) -> dict:
        users = {
            "top": await make_user(id="user-top", points=300, department="Physics"),
            "b": await make_user(id="user-b", points=100),
            "e": await make_user(id="user-e", points=100),
            "a": await make_user(id="user-a", points=100),
            "inactive": await make_user(id="user-x", points=900, is_active=False),
        }
        for owner in ("b", "b", "e", "e", "a"):
            await make_resource(users[owner])
        await make_collection(users["top"])
        await make_contribution(users["top"], points_earned=30)
        await make_contribution(users["top"], points_earned=50, days_ago=10)
        return users

    async def test_ordering_and_fields(self, repos, ranked_users) -> None:
        entries = await ProgressService(repos, cache=TTLCache()).get_leaderboard(LeaderboardScope())

        assert [e.user_id for e in entries] == ["user-top", "user-b", "user-e", "user-a"]
        assert [e.rank for e in entries] == [1, 2, 3, 4]

        top = entries[0]
        assert top.total_points == 300
        assert top.badge_level == "Advanced"
        assert top.collections_count == 1
        assert top.uploads_count == 0
        assert top.recent_activity == 30
        assert entries[1].uploads_count == 2

    async def test_department_scope(self, repos, ranked_users) -> None:
        scope = LeaderboardScope(type=LeaderboardType.DEPARTMENT, department="Computer Science")
        entries = await ProgressService(repos, cache=TTLCache()).get_leaderboard(scope)
        assert [e.user_id for e in entries] == ["user-b", "user-e", "user-a"]

    async def test_course_scope_is_unsupported(self, repos) -> None:
        scope = LeaderboardScope(type=LeaderboardType.COURSE, course="CS101")
        service = ProgressService(repos, cache=TTLCache())
        with pytest.raises(UnsupportedLeaderboardScopeError):
            await service.get_leaderboard(scope)
        with pytest.raises(UnsupportedLeaderboardScopeError):
            await service.get_user_rank("user-a", scope)

    async def test_timeframe_does_not_change_ranking(self, repos, ranked_users) -> None:
        service = ProgressService(repos, cache=TTLCache())
        daily = await service.get_leaderboard(LeaderboardScope(timeframe=Timeframe.DAILY))
        all_time = await service.get_leaderboard(LeaderboardScope(timeframe=Timeframe.ALL_TIME))
        assert [e.user_id for e in daily] == [e.user_id for e in all_time]

    async def test_limit(self, repos, ranked_users) -> None:
        entries = await ProgressService(repos, cache=TTLCache()).get_leaderboard(LeaderboardScope(), limit=2)
        assert [e.user_id for e in entries] == ["user-top", "user-b"]

    async def test_results_are_cached(self, db_session, repos, ranked_users, make_user) -> None:
        cache = TTLCache()
        service = ProgressService(repos, cache=cache)
        first = await service.get_leaderboard(LeaderboardScope())

        await make_user(id="user-new", points=5000)
        second = await service.get_leaderboard(LeaderboardScope())

        assert second == first
        cache.clear()
        third = await service.get_leaderboard(LeaderboardScope())
        assert third[0].user_id == "user-new"

    async def test_user_rank(self, repos, ranked_users) -> None:
        service = ProgressService(repos, cache=TTLCache())
        assert await service.get_user_rank("user-top") == 1
        assert await service.get_user_rank("user-a") == 4
        assert await service.get_user_rank("user-x") is None
        assert await service.get_user_rank("missing") is None

        physics = LeaderboardScope(type=LeaderboardType.DEPARTMENT, department="Physics")
        assert await service.get_user_rank("user-top", physics) == 1
        assert await service.get_user_rank("user-a", physics) is None


@pytest.mark.unit
class TestClampLimit:
    @pytest.mark.parametrize("requested,expected", [(None, 50), (0, 1), (-5, 1), (10, 10), (1000, 100)])
    def test_clamp(self, requested, expected) -> None:
        assert clamp_limit(requested) == expected
