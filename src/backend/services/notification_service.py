"""
In-app notification service.

Creates notification rows for gamification events. Delivery is best-effort:
failures are logged and rolled back, never raised to the caller.
"""

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from models.notification import Notification, NotificationType
from repositories.provider import Repositories
from services.achievement_catalog import AchievementDefinition

logger = structlog.get_logger(__name__)


class NotificationService:
    """Service for creating in-app notifications."""

    def __init__(self, repos: Repositories):
        self.repos = repos

    async def notify_achievement(
        self, user_id: str, achievement: AchievementDefinition
    ) -> Optional[Notification]:
        """
        Tell a user they unlocked an achievement.

        Returns the notification, or None if it could not be stored.
        """
        try:
            notification = await self.repos.notifications.create(
                user_id=user_id,
                type=NotificationType.ACHIEVEMENT.value,
                title=f"Achievement Unlocked: {achievement.title}",
                message=achievement.description,
                data={
                    "achievement_id": achievement.id,
                    "points_earned": achievement.points,
                    "rarity": achievement.rarity.value,
                },
            )
            await self.repos.commit()
        except SQLAlchemyError as e:
            await self.repos.rollback()
            logger.warning(
                "achievement_notification_failed",
                user_id=user_id,
                achievement_id=achievement.id,
                error=str(e),
            )
            return None

        logger.info("achievement_notification_sent", user_id=user_id, achievement_id=achievement.id)
        return notification

    async def list_notifications(self, user_id: str, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        return await self.repos.notifications.list_for_user(user_id, unread_only=unread_only, limit=limit)

    async def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one of the user's notifications as read; False if it is not theirs or missing."""
        updated = await self.repos.notifications.mark_read(user_id, notification_id)
        await self.repos.commit()
        return updated

    async def mark_all_read(self, user_id: str) -> int:
        updated = await self.repos.notifications.mark_all_read(user_id)
        await self.repos.commit()
        logger.info("notifications_marked_read", user_id=user_id, updated=updated)
        return updated
