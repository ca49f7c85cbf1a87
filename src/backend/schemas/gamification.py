"""
Gamification-related Pydantic schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from services.points_calculator import UserActionType


class LeaderboardType(str, Enum):
    GLOBAL = "global"
    DEPARTMENT = "department"
    COURSE = "course"


class Timeframe(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL_TIME = "all_time"


class LeaderboardScope(BaseModel):
    """Which users a leaderboard covers."""
    type: LeaderboardType = LeaderboardType.GLOBAL
    department: Optional[str] = None
    course: Optional[str] = None
    timeframe: Timeframe = Timeframe.ALL_TIME

    def cache_key(self, limit: int) -> str:
        return f"leaderboard:{self.type.value}:{self.department or '-'}:{self.course or '-'}:{self.timeframe.value}:{limit}"


class EarnedAchievement(BaseModel):
    """An achievement a user holds."""
    id: str
    title: str
    description: str
    icon: str
    points: int
    category: str
    rarity: str
    earned_at: Optional[datetime] = None


class WeeklyProgress(BaseModel):
    """Activity over the trailing recent window."""
    points_earned: int = 0
    actions_completed: int = 0
    streak_days: int = 0


class UserProgress(BaseModel):
    """User's gamification progress."""
    user_id: str
    total_points: int
    current_level: str
    next_level: str
    points_to_next_level: int
    achievements_earned: list[EarnedAchievement] = []
    recent_achievements: list[EarnedAchievement] = []
    weekly_progress: WeeklyProgress = Field(default_factory=WeeklyProgress)


class AchievementStatus(BaseModel):
    """A catalog achievement with the caller's unlock state."""
    id: str
    title: str
    description: str
    icon: str
    points: int
    category: str
    rarity: str
    criteria_type: str
    target: int
    is_unlocked: bool
    earned_at: Optional[datetime] = None


class LeaderboardEntry(BaseModel):
    """A single entry on the leaderboard."""
    user_id: str
    full_name: Optional[str]
    department: Optional[str]
    total_points: int
    uploads_count: int
    collections_count: int
    badge_level: str
    rank: int
    recent_activity: int


class LeaderboardResponse(BaseModel):
    """Leaderboard with the caller's position."""
    leaderboard: list[LeaderboardEntry]
    user_rank: Optional[int]
    total_entries: int
    scope: LeaderboardScope


class AwardPointsRequest(BaseModel):
    """Request to record a user action and award its points."""
    action: UserActionType
    resource_id: Optional[str] = None
    collection_id: Optional[str] = None
    resource_type: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AwardPointsResponse(BaseModel):
    success: bool
    points_awarded: int
    action: UserActionType
    new_achievements: list[EarnedAchievement] = []


class PointsPreviewResponse(BaseModel):
    points: int
    action: UserActionType


class LevelDefinitionResponse(BaseModel):
    """Level definition for API response."""
    level: int
    name: str
    points_required: int


class UserEngagementMetrics(BaseModel):
    """Engagement summary for one user."""
    user_id: str
    total_points: int
    achievements_count: int
    uploads_count: int
    collections_count: int
    votes_received: int
    last_activity: Optional[datetime]
    streak_days: int
    engagement_score: int


class AchievementCount(BaseModel):
    achievement_id: str
    title: str
    count: int


class LevelCount(BaseModel):
    level: str
    count: int


class DepartmentRanking(BaseModel):
    department: str
    average_points: float
    total_users: int
    top_user: Optional[str] = None


class GamificationOverview(BaseModel):
    """Platform-wide gamification analytics for a timeframe."""
    timeframe: Timeframe
    total_users: int
    active_users: int
    total_points_awarded: int
    points_by_contribution_type: dict[str, int]
    total_achievements_awarded: int
    achievement_counts: list[AchievementCount]
    level_distribution: list[LevelCount]
    department_rankings: list[DepartmentRanking]
