"""
Achievement grant repository.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.achievement import UserAchievement


class AchievementRepository:
    """Repository for user achievement grants."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def has_achievement(self, user_id: str, achievement_id: str) -> bool:
        """Check whether a user already holds an achievement."""
        result = await self.db.execute(
            select(func.count(UserAchievement.id)).where(
                UserAchievement.user_id == user_id,
                UserAchievement.achievement_id == achievement_id,
            )
        )
        return (result.scalar() or 0) > 0

    async def create_grant(self, user_id: str, achievement_id: str, points_earned: int) -> UserAchievement:
        """
        Insert a grant row.

        Raises IntegrityError when the user already holds the achievement.
        """
        grant = UserAchievement(
            id=str(uuid4()),
            user_id=user_id,
            achievement_id=achievement_id,
            points_earned=points_earned,
            earned_at=datetime.now(timezone.utc),
        )
        self.db.add(grant)
        await self.db.flush()
        return grant

    async def list_for_user(self, user_id: str) -> list[UserAchievement]:
        """All grants for a user, oldest first."""
        result = await self.db.execute(
            select(UserAchievement)
            .where(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.earned_at, UserAchievement.achievement_id)
        )
        return list(result.scalars().all())

    async def count_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count(UserAchievement.id)).where(UserAchievement.user_id == user_id)
        )
        return result.scalar() or 0

    async def count_by_achievement(self, since: Optional[datetime] = None) -> dict[str, int]:
        """Number of grants per achievement id, optionally since a cutoff."""
        query = select(UserAchievement.achievement_id, func.count(UserAchievement.id)).group_by(
            UserAchievement.achievement_id
        )
        if since is not None:
            query = query.where(UserAchievement.earned_at >= since)
        result = await self.db.execute(query)
        return {row[0]: int(row[1]) for row in result.all()}
