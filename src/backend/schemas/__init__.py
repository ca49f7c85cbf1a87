"""Schemas module initialization."""

from schemas.gamification import (
    GamificationOverview,
    LeaderboardEntry,
    LeaderboardScope,
    UserEngagementMetrics,
    UserProgress,
)
from schemas.notification import NotificationResponse
from schemas.user import UserInDB, UserResponse

__all__ = [
    "UserInDB",
    "UserResponse",
    "UserProgress",
    "LeaderboardEntry",
    "LeaderboardScope",
    "UserEngagementMetrics",
    "GamificationOverview",
    "NotificationResponse",
]
