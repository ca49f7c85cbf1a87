"""
Points pipeline.

Turns a user action into a balance change, a contribution log entry and an
achievement pass. The steps commit independently:

1. the balance increment is required, and its errors propagate;
2. the contribution insert is best-effort;
3. the achievement pass is best-effort.

So the balance may lead the log, and an achievement may lag the action that
earned it until the next pass. Cached leaderboards are dropped whenever a
balance moves.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from repositories.provider import Repositories
from services.achievement_catalog import AchievementDefinition
from services.achievement_service import AchievementService
from services.cache_service import TTLCache, leaderboard_cache
from services.points_calculator import UserAction, calculate_points, contribution_type_for

logger = structlog.get_logger(__name__)


class GamificationError(Exception):
    """Base exception for gamification operations."""

    pass


class UserNotFoundError(GamificationError):
    """Raised when a points update matches no user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


@dataclass
class ProgressUpdate:
    """Outcome of one pipeline run."""

    points_awarded: int = 0
    new_achievements: list[AchievementDefinition] = field(default_factory=list)


class GamificationEngine:
    """Runs the points pipeline for user actions."""

    def __init__(
        self,
        repos: Repositories,
        achievement_service: Optional[AchievementService] = None,
        enabled: Optional[bool] = None,
        cache: Optional[TTLCache] = None,
    ):
        self.repos = repos
        self.enabled = settings.ENABLE_GAMIFICATION if enabled is None else enabled
        self.cache = cache if cache is not None else leaderboard_cache
        self.achievement_service = achievement_service or AchievementService(repos, cache=self.cache)

    async def update_user_progress(self, user_id: str, action: UserAction) -> ProgressUpdate:
        """
        Award points for an action, log it and check achievements.

        Actions worth zero points, and any action while gamification is
        disabled, have no side effects.

        Raises:
            UserNotFoundError: no user has this id
            SQLAlchemyError: the balance update failed
        """
        if not self.enabled:
            return ProgressUpdate()

        points = calculate_points(action)
        if points <= 0:
            logger.debug("action_awards_no_points", user_id=user_id, action=action.type.value)
            return ProgressUpdate()

        await self._increment_points(user_id, points)
        await self._record_contribution(user_id, action, points)
        new_achievements = await self._check_achievements(user_id)

        logger.info(
            "user_progress_updated",
            user_id=user_id,
            action=action.type.value,
            points=points,
            new_achievements=[a.id for a in new_achievements],
        )
        return ProgressUpdate(points_awarded=points, new_achievements=new_achievements)

    async def _increment_points(self, user_id: str, points: int) -> None:
        try:
            matched = await self.repos.users.increment_points(user_id, points)
        except SQLAlchemyError:
            await self.repos.rollback()
            raise
        if not matched:
            await self.repos.rollback()
            raise UserNotFoundError(user_id)
        await self.repos.commit()
        self.cache.clear()

    async def _record_contribution(self, user_id: str, action: UserAction, points: int) -> None:
        metadata = {
            "action_type": action.type.value,
            "resource_type": action.resource_type,
            "collection_id": action.collection_id,
            **action.metadata,
        }
        try:
            await self.repos.contributions.create(
                user_id=user_id,
                type=contribution_type_for(action.type),
                points_earned=points,
                resource_id=action.resource_id,
                metadata=metadata,
            )
            await self.repos.commit()
        except SQLAlchemyError as e:
            await self.repos.rollback()
            logger.warning("contribution_insert_failed", user_id=user_id, action=action.type.value, error=str(e))

    async def _check_achievements(self, user_id: str) -> list[AchievementDefinition]:
        try:
            return await self.achievement_service.check_achievements(user_id)
        except Exception as e:
            logger.error("achievement_pass_failed", user_id=user_id, error=str(e))
            return []
