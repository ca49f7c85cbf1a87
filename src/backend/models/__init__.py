"""Database models module."""

from models.achievement import UserAchievement
from models.contribution import Contribution
from models.notification import Notification, NotificationType
from models.resource import Collection, Resource
from models.user import User

__all__ = [
    "User",
    "Resource",
    "Collection",
    "Contribution",
    "UserAchievement",
    "Notification",
    "NotificationType",
]
