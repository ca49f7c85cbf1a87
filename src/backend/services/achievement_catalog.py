"""
Static achievement catalog.

Achievements are data, not code: adding one means appending an entry to
ACHIEVEMENT_CATALOG. The evaluator walks the catalog in declaration order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CriteriaType(str, Enum):
    COUNT = "count"
    POINTS = "points"
    STREAK = "streak"


class AchievementCategory(str, Enum):
    UPLOAD = "upload"
    ENGAGEMENT = "engagement"
    CURATION = "curation"
    SOCIAL = "social"
    MILESTONE = "milestone"


class AchievementRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class AchievementCriteria:
    """Trigger condition: a stat (count), the balance (points) or the active-day streak reaching `target`."""

    type: CriteriaType
    target: int
    action: Optional[str] = None  # count criteria only, see COUNT_STAT_FIELDS


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    icon: str
    points: int
    category: AchievementCategory
    criteria: AchievementCriteria
    rarity: AchievementRarity


# Count criteria action -> UserStats field
COUNT_STAT_FIELDS: dict[str, str] = {
    "upload": "upload_count",
    "collection": "collection_count",
    "upvotes_received": "total_upvotes",
    "downloads_made": "downloads_made",
    "single_resource_upvotes": "max_resource_upvotes",
}


ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    # Upload
    AchievementDefinition(
        id="first_upload",
        title="First Contribution",
        description="Upload your first resource",
        icon="🎯",
        points=10,
        category=AchievementCategory.UPLOAD,
        criteria=AchievementCriteria(CriteriaType.COUNT, 1, "upload"),
        rarity=AchievementRarity.COMMON,
    ),
    AchievementDefinition(
        id="prolific_uploader",
        title="Prolific Uploader",
        description="Upload 10 resources",
        icon="📚",
        points=50,
        category=AchievementCategory.UPLOAD,
        criteria=AchievementCriteria(CriteriaType.COUNT, 10, "upload"),
        rarity=AchievementRarity.RARE,
    ),
    AchievementDefinition(
        id="content_master",
        title="Content Master",
        description="Upload 50 resources",
        icon="👑",
        points=200,
        category=AchievementCategory.UPLOAD,
        criteria=AchievementCriteria(CriteriaType.COUNT, 50, "upload"),
        rarity=AchievementRarity.EPIC,
    ),
    # Curation
    AchievementDefinition(
        id="first_collection",
        title="Curator",
        description="Create your first collection",
        icon="📁",
        points=15,
        category=AchievementCategory.CURATION,
        criteria=AchievementCriteria(CriteriaType.COUNT, 1, "collection"),
        rarity=AchievementRarity.COMMON,
    ),
    AchievementDefinition(
        id="collection_master",
        title="Collection Master",
        description="Create 10 collections",
        icon="🗂️",
        points=100,
        category=AchievementCategory.CURATION,
        criteria=AchievementCriteria(CriteriaType.COUNT, 10, "collection"),
        rarity=AchievementRarity.RARE,
    ),
    # Engagement
    AchievementDefinition(
        id="popular_content",
        title="Popular Creator",
        description="Receive 100 upvotes across all content",
        icon="⭐",
        points=75,
        category=AchievementCategory.ENGAGEMENT,
        criteria=AchievementCriteria(CriteriaType.COUNT, 100, "upvotes_received"),
        rarity=AchievementRarity.RARE,
    ),
    AchievementDefinition(
        id="viral_content",
        title="Viral Creator",
        description="Have a single resource receive 50+ upvotes",
        icon="🚀",
        points=150,
        category=AchievementCategory.ENGAGEMENT,
        criteria=AchievementCriteria(CriteriaType.COUNT, 50, "single_resource_upvotes"),
        rarity=AchievementRarity.EPIC,
    ),
    # Point milestones
    AchievementDefinition(
        id="points_100",
        title="Rising Star",
        description="Earn 100 points",
        icon="🌟",
        points=25,
        category=AchievementCategory.MILESTONE,
        criteria=AchievementCriteria(CriteriaType.POINTS, 100),
        rarity=AchievementRarity.COMMON,
    ),
    AchievementDefinition(
        id="points_500",
        title="Expert Contributor",
        description="Earn 500 points",
        icon="🏆",
        points=100,
        category=AchievementCategory.MILESTONE,
        criteria=AchievementCriteria(CriteriaType.POINTS, 500),
        rarity=AchievementRarity.RARE,
    ),
    AchievementDefinition(
        id="points_1000",
        title="Platform Legend",
        description="Earn 1000 points",
        icon="👑",
        points=250,
        category=AchievementCategory.MILESTONE,
        criteria=AchievementCriteria(CriteriaType.POINTS, 1000),
        rarity=AchievementRarity.LEGENDARY,
    ),
    # Social
    AchievementDefinition(
        id="helpful_member",
        title="Helpful Member",
        description="Help others by downloading 25 resources",
        icon="🤝",
        points=30,
        category=AchievementCategory.SOCIAL,
        criteria=AchievementCriteria(CriteriaType.COUNT, 25, "downloads_made"),
        rarity=AchievementRarity.COMMON,
    ),
    # Activity
    AchievementDefinition(
        id="weekly_warrior",
        title="Weekly Warrior",
        description="Stay active for 7 consecutive days",
        icon="🔥",
        points=75,
        category=AchievementCategory.MILESTONE,
        criteria=AchievementCriteria(CriteriaType.STREAK, 7),
        rarity=AchievementRarity.RARE,
    ),
)

_CATALOG_BY_ID: dict[str, AchievementDefinition] = {a.id: a for a in ACHIEVEMENT_CATALOG}


def get_achievement(achievement_id: str) -> Optional[AchievementDefinition]:
    """Look up a catalog entry by id."""
    return _CATALOG_BY_ID.get(achievement_id)


def get_achievement_title(achievement_id: str) -> str:
    """Display title for an achievement id, falling back to the id itself."""
    achievement = get_achievement(achievement_id)
    return achievement.title if achievement else achievement_id
