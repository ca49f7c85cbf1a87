"""
Gamification analytics.

Engagement metrics for a single user and platform-wide overviews of points,
achievements, levels and departments.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from repositories.provider import Repositories
from schemas.gamification import (
    AchievementCount,
    DepartmentRanking,
    GamificationOverview,
    LevelCount,
    Timeframe,
    UserEngagementMetrics,
)
from services.achievement_catalog import get_achievement_title
from services.levels import LEVEL_NAMES
from services.stats_service import StatsService

logger = structlog.get_logger(__name__)

TIMEFRAME_DAYS: dict[Timeframe, Optional[int]] = {
    Timeframe.DAILY: 1,
    Timeframe.WEEKLY: 7,
    Timeframe.MONTHLY: 30,
    Timeframe.ALL_TIME: None,
}


def timeframe_start(timeframe: Timeframe, now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of the analytics window, or None for all time."""
    days = TIMEFRAME_DAYS[timeframe]
    if days is None:
        return None
    return (now or datetime.now(timezone.utc)) - timedelta(days=days)


def engagement_score(points: int, achievements: int, uploads: int, collections: int) -> int:
    return points + achievements * 10 + uploads * 5 + collections * 8


class AnalyticsService:
    """Service for gamification analytics."""

    def __init__(self, repos: Repositories):
        self.repos = repos
        self.stats_service = StatsService(repos)

    async def get_user_engagement(self, user_id: str) -> Optional[UserEngagementMetrics]:
        """Engagement metrics for a user, or None if the user does not exist."""
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            return None

        achievements = await self.repos.achievements.count_for_user(user_id)
        totals = await self.repos.resources.get_owner_totals(user_id)
        collections = await self.repos.resources.count_collections(user_id)
        last_activity = await self.repos.contributions.get_last_activity(user_id)
        streak = await self.stats_service.get_streak(user_id)
        points = user.points or 0

        return UserEngagementMetrics(
            user_id=user_id,
            total_points=points,
            achievements_count=achievements,
            uploads_count=totals.resource_count,
            collections_count=collections,
            votes_received=totals.total_upvotes,
            last_activity=last_activity or user.created_at,
            streak_days=streak,
            engagement_score=engagement_score(points, achievements, totals.resource_count, collections),
        )

    async def get_overview(self, timeframe: Timeframe = Timeframe.WEEKLY) -> GamificationOverview:
        """Platform-wide gamification metrics for a timeframe."""
        since = timeframe_start(timeframe)

        total_users = await self.repos.users.count_users()
        active_users = await self.repos.contributions.count_active_users(since)
        points_by_type = await self.repos.contributions.points_by_type(since)
        grant_counts = await self.repos.achievements.count_by_achievement(since)

        achievement_counts = sorted(
            (
                AchievementCount(achievement_id=achievement_id, title=get_achievement_title(achievement_id), count=count)
                for achievement_id, count in grant_counts.items()
            ),
            key=lambda a: (-a.count, a.achievement_id),
        )

        levels = await self.repos.users.count_by_badge_level()
        level_distribution = [LevelCount(level=name, count=levels.get(name, 0)) for name in LEVEL_NAMES]

        top_users = await self.repos.users.get_top_user_by_department()
        department_rankings = sorted(
            (
                DepartmentRanking(
                    department=row.department,
                    average_points=round(row.total_points / row.total_users, 2) if row.total_users else 0.0,
                    total_users=row.total_users,
                    top_user=top_users.get(row.department),
                )
                for row in await self.repos.users.get_department_stats()
                if row.department
            ),
            key=lambda d: (-d.average_points, d.department),
        )

        logger.debug("gamification_overview_computed", timeframe=timeframe.value, total_users=total_users)
        return GamificationOverview(
            timeframe=timeframe,
            total_users=total_users,
            active_users=active_users,
            total_points_awarded=sum(points_by_type.values()),
            points_by_contribution_type=points_by_type,
            total_achievements_awarded=sum(grant_counts.values()),
            achievement_counts=achievement_counts,
            level_distribution=level_distribution,
            department_rankings=department_rankings,
        )
