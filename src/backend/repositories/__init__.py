"""Repository modules for database access."""

from repositories.achievement_repository import AchievementRepository
from repositories.contribution_repository import ContributionRepository
from repositories.notification_repository import NotificationRepository
from repositories.resource_repository import ResourceRepository
from repositories.user_repository import UserRepository

__all__ = [
    "AchievementRepository",
    "ContributionRepository",
    "NotificationRepository",
    "ResourceRepository",
    "UserRepository",
]
