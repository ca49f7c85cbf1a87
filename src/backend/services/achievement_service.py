"""
Achievement awarding service.

Evaluates the static catalog against a fresh stats snapshot and grants every
achievement whose criterion is met and which the user does not hold yet.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from repositories.provider import Repositories
from services.achievement_catalog import (
    ACHIEVEMENT_CATALOG,
    COUNT_STAT_FIELDS,
    AchievementDefinition,
    CriteriaType,
)
from services.cache_service import TTLCache, leaderboard_cache
from services.notification_service import NotificationService
from services.stats_service import StatsService, UserStats

logger = structlog.get_logger(__name__)


def criterion_met(definition: AchievementDefinition, stats: UserStats) -> bool:
    """Check whether a stats snapshot satisfies an achievement's criterion."""
    criteria = definition.criteria

    if criteria.type == CriteriaType.COUNT:
        field = COUNT_STAT_FIELDS.get(criteria.action or "")
        if field is None:
            return False
        return getattr(stats, field) >= criteria.target
    if criteria.type == CriteriaType.POINTS:
        return stats.total_points >= criteria.target
    if criteria.type == CriteriaType.STREAK:
        return stats.consecutive_days >= criteria.target
    return False


class AchievementService:
    """Service for checking and awarding achievements."""

    def __init__(
        self,
        repos: Repositories,
        stats_service: Optional[StatsService] = None,
        notification_service: Optional[NotificationService] = None,
        catalog: tuple[AchievementDefinition, ...] = ACHIEVEMENT_CATALOG,
        cache: Optional[TTLCache] = None,
    ):
        self.repos = repos
        self.stats_service = stats_service or StatsService(repos)
        self.notification_service = notification_service or NotificationService(repos)
        self.catalog = catalog
        self.cache = cache if cache is not None else leaderboard_cache

    async def check_achievements(self, user_id: str) -> list[AchievementDefinition]:
        """
        Check and award all applicable achievements for a user.

        Stats are computed once per pass, so a bonus granted here can only
        unlock a points milestone on the next pass. A failure on one entry is
        logged and the pass moves on to the next.

        Returns list of newly awarded achievements, in catalog order.
        """
        stats = await self.stats_service.get_user_stats(user_id)
        awarded: list[AchievementDefinition] = []

        for definition in self.catalog:
            try:
                if await self.repos.achievements.has_achievement(user_id, definition.id):
                    continue
                if not criterion_met(definition, stats):
                    continue
                if await self._try_award_achievement(user_id, definition):
                    awarded.append(definition)
            except Exception as e:
                await self.repos.rollback()
                logger.error(
                    "achievement_check_failed",
                    user_id=user_id,
                    achievement_id=definition.id,
                    error=str(e),
                )

        if awarded:
            logger.info(
                "achievements_awarded",
                user_id=user_id,
                achievement_ids=[a.id for a in awarded],
            )
        return awarded

    async def _try_award_achievement(self, user_id: str, definition: AchievementDefinition) -> bool:
        """
        Try to award an achievement to a user.
        Returns True if newly awarded, False if already had it.
        """
        try:
            await self.repos.achievements.create_grant(user_id, definition.id, definition.points)
            await self.repos.commit()
        except IntegrityError:
            # Granted concurrently since the existence check
            await self.repos.rollback()
            logger.info("achievement_already_granted", user_id=user_id, achievement_id=definition.id)
            return False

        await self._award_points(user_id, definition)
        await self.notification_service.notify_achievement(user_id, definition)
        return True

    async def _award_points(self, user_id: str, definition: AchievementDefinition) -> None:
        """Add the achievement bonus to the user's balance."""
        try:
            matched = await self.repos.users.increment_points(user_id, definition.points)
            await self.repos.commit()
        except SQLAlchemyError as e:
            await self.repos.rollback()
            logger.error(
                "achievement_bonus_failed",
                user_id=user_id,
                achievement_id=definition.id,
                points=definition.points,
                error=str(e),
            )
            return

        if not matched:
            logger.warning("achievement_bonus_user_missing", user_id=user_id, achievement_id=definition.id)
            return
        self.cache.clear()
