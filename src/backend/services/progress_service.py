"""
Progress and leaderboard reporting.

Read-only views over balances, grants and the contribution log. Leaderboards
are cached in-process for a short TTL and cleared on every balance change.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from core.config import settings
from repositories.provider import Repositories
from schemas.gamification import (
    AchievementStatus,
    EarnedAchievement,
    LeaderboardEntry,
    LeaderboardScope,
    LeaderboardType,
    UserProgress,
    WeeklyProgress,
)
from services.achievement_catalog import ACHIEVEMENT_CATALOG, AchievementDefinition
from services.cache_service import TTLCache, leaderboard_cache
from services.gamification_engine import GamificationError
from services.levels import calculate_level, get_next_level, points_to_next_level
from services.stats_service import StatsService

logger = structlog.get_logger(__name__)


class UnsupportedLeaderboardScopeError(GamificationError):
    """Raised for leaderboard scopes that cannot be computed."""

    def __init__(self, scope_type: str):
        self.scope_type = scope_type
        super().__init__(f"Leaderboard scope '{scope_type}' is not supported")


def earned_achievement(definition: AchievementDefinition, earned_at: Optional[datetime] = None) -> EarnedAchievement:
    return EarnedAchievement(
        id=definition.id,
        title=definition.title,
        description=definition.description,
        icon=definition.icon,
        points=definition.points,
        category=definition.category.value,
        rarity=definition.rarity.value,
        earned_at=earned_at,
    )


def clamp_limit(limit: Optional[int]) -> int:
    """Bound a requested leaderboard size to [1, LEADERBOARD_MAX_LIMIT]."""
    if limit is None:
        limit = settings.LEADERBOARD_DEFAULT_LIMIT
    return max(1, min(limit, settings.LEADERBOARD_MAX_LIMIT))


class ProgressService:
    """Service for user progress and leaderboards."""

    def __init__(
        self,
        repos: Repositories,
        cache: Optional[TTLCache] = None,
        recent_window_days: Optional[int] = None,
    ):
        self.repos = repos
        self.cache = cache if cache is not None else leaderboard_cache
        self.recent_window_days = recent_window_days or settings.RECENT_WINDOW_DAYS
        self.stats_service = StatsService(repos)

    async def get_user_progress(self, user_id: str, now: Optional[datetime] = None) -> UserProgress:
        """
        Level, achievements and recent activity for a user.

        Earned achievements are listed in catalog order; grants whose id is
        no longer in the catalog are skipped.
        """
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(days=self.recent_window_days)

        points = await self.repos.users.get_points(user_id) or 0
        grants = await self.repos.achievements.list_for_user(user_id)
        earned_at = {grant.achievement_id: grant.earned_at for grant in grants}

        achievements = [
            earned_achievement(definition, earned_at[definition.id])
            for definition in ACHIEVEMENT_CATALOG
            if definition.id in earned_at
        ]
        recent = [a for a in achievements if a.earned_at is not None and a.earned_at >= since]

        summary = await self.repos.contributions.summarize_since(user_id, since)
        streak = await self.stats_service.get_streak(user_id, now=now)

        current_level = calculate_level(points)
        return UserProgress(
            user_id=user_id,
            total_points=points,
            current_level=current_level,
            next_level=get_next_level(current_level),
            points_to_next_level=points_to_next_level(points),
            achievements_earned=achievements,
            recent_achievements=recent,
            weekly_progress=WeeklyProgress(
                points_earned=summary.points_earned,
                actions_completed=summary.actions_completed,
                streak_days=streak,
            ),
        )

    async def get_achievement_statuses(self, user_id: str) -> list[AchievementStatus]:
        """Every catalog achievement with whether the user has unlocked it."""
        grants = await self.repos.achievements.list_for_user(user_id)
        earned_at = {grant.achievement_id: grant.earned_at for grant in grants}
        return [
            AchievementStatus(
                id=definition.id,
                title=definition.title,
                description=definition.description,
                icon=definition.icon,
                points=definition.points,
                category=definition.category.value,
                rarity=definition.rarity.value,
                criteria_type=definition.criteria.type.value,
                target=definition.criteria.target,
                is_unlocked=definition.id in earned_at,
                earned_at=earned_at.get(definition.id),
            )
            for definition in ACHIEVEMENT_CATALOG
        ]

    async def get_leaderboard(
        self,
        scope: Optional[LeaderboardScope] = None,
        limit: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        """
        Ranked active users for a scope.

        The timeframe is echoed but not applied; ranking always uses the
        all-time balance.
        """
        scope = scope or LeaderboardScope()
        if scope.type == LeaderboardType.COURSE:
            raise UnsupportedLeaderboardScopeError(scope.type.value)

        limit = clamp_limit(limit)
        cache_key = scope.cache_key(limit)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        department = scope.department if scope.type == LeaderboardType.DEPARTMENT else None
        since = datetime.now(timezone.utc) - timedelta(days=self.recent_window_days)
        rows = await self.repos.users.get_leaderboard(since=since, department=department, limit=limit)

        entries = [
            LeaderboardEntry(
                user_id=row.user_id,
                full_name=row.full_name,
                department=row.department,
                total_points=row.total_points,
                uploads_count=row.uploads_count,
                collections_count=row.collections_count,
                badge_level=calculate_level(row.total_points),
                rank=position,
                recent_activity=row.recent_activity,
            )
            for position, row in enumerate(rows, start=1)
        ]
        self.cache.set(cache_key, entries)
        logger.debug("leaderboard_computed", scope=scope.type.value, department=department, entries=len(entries))
        return entries

    async def get_user_rank(self, user_id: str, scope: Optional[LeaderboardScope] = None) -> Optional[int]:
        """1-based position of a user under the leaderboard ordering, or None if not ranked."""
        scope = scope or LeaderboardScope()
        if scope.type == LeaderboardType.COURSE:
            raise UnsupportedLeaderboardScopeError(scope.type.value)
        department = scope.department if scope.type == LeaderboardType.DEPARTMENT else None
        return await self.repos.users.get_user_rank(user_id, department=department)
