"""
Per-user statistics service.

Builds the stats snapshot achievement criteria are evaluated against:
contribution counts, resource engagement totals and the active-day streak.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

import structlog

from core.config import settings
from repositories.provider import Repositories

logger = structlog.get_logger(__name__)


@dataclass
class UserStats:
    """Snapshot of a user's activity used for achievement evaluation."""

    total_points: int = 0
    upload_count: int = 0
    collection_count: int = 0
    total_upvotes: int = 0
    total_downloads: int = 0
    downloads_made: int = 0
    max_resource_upvotes: int = 0
    consecutive_days: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def count_consecutive_days(dates: Iterable[date], today: date, lookback_days: int = 30) -> int:
    """
    Count consecutive active days ending today.

    Only dates within the last `lookback_days` days (today included) are
    considered, so the result never exceeds `lookback_days`. If there is no
    activity today the streak is 0.
    """
    earliest = today - timedelta(days=lookback_days - 1)
    active = {d for d in dates if earliest <= d <= today}

    streak = 0
    current = today
    while current in active:
        streak += 1
        current -= timedelta(days=1)
    return streak


class StatsService:
    """Service for computing per-user activity statistics."""

    def __init__(self, repos: Repositories, lookback_days: Optional[int] = None):
        """
        Initialize stats service.

        Args:
            repos: Repository bundle
            lookback_days: Streak window in days (default: STREAK_LOOKBACK_DAYS)
        """
        self.repos = repos
        self.lookback_days = lookback_days or settings.STREAK_LOOKBACK_DAYS

    async def get_user_stats(self, user_id: str, now: Optional[datetime] = None) -> UserStats:
        """
        Compute a fresh stats snapshot for a user.

        Missing users and users without resources yield zeros rather than errors.
        """
        now = now or datetime.now(timezone.utc)

        points = await self.repos.users.get_points(user_id)
        counts = await self.repos.contributions.count_by_type(user_id)
        collections = await self.repos.resources.count_collections(user_id)
        totals = await self.repos.resources.get_owner_totals(user_id)
        streak = await self.get_streak(user_id, now=now)

        stats = UserStats(
            total_points=points or 0,
            upload_count=counts.get("upload", 0),
            collection_count=collections,
            total_upvotes=totals.total_upvotes,
            total_downloads=totals.total_downloads,
            downloads_made=counts.get("download", 0),
            max_resource_upvotes=totals.max_upvotes,
            consecutive_days=streak,
        )
        logger.debug("user_stats_computed", user_id=user_id, **stats.to_dict())
        return stats

    async def get_streak(self, user_id: str, now: Optional[datetime] = None) -> int:
        """Consecutive UTC calendar days with at least one contribution, ending today."""
        now = now or datetime.now(timezone.utc)
        today = now.astimezone(timezone.utc).date()
        window_start = datetime.combine(
            today - timedelta(days=self.lookback_days - 1), datetime.min.time(), tzinfo=timezone.utc
        )
        timestamps = await self.repos.contributions.get_activity_timestamps(user_id, window_start)
        dates = [ts.astimezone(timezone.utc).date() for ts in timestamps]
        return count_consecutive_days(dates, today, self.lookback_days)
