"""
Point calculation for user actions.

Pure functions only: no I/O, deterministic for identical input.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class UserActionType(str, Enum):
    """Point-earning actions reported by the resource, collection and vote workflows."""

    UPLOAD_RESOURCE = "upload_resource"
    RECEIVE_UPVOTE = "receive_upvote"
    RECEIVE_DOWNVOTE = "receive_downvote"
    CREATE_COLLECTION = "create_collection"
    RESOURCE_DOWNLOADED = "resource_downloaded"
    COMPLETE_PROFILE = "complete_profile"
    WEEKLY_ACTIVITY = "weekly_activity"
    ADD_TO_COLLECTION = "add_to_collection"
    SHARE_COLLECTION = "share_collection"
    TAG_RESOURCE = "tag_resource"
    VERIFY_RESOURCE = "verify_resource"
    COMMENT_RESOURCE = "comment_resource"


@dataclass
class UserAction:
    """
    A single event that may earn points.

    Constructed per event and never persisted itself; only its point effect
    and a contribution row are stored.
    """

    type: UserActionType
    user_id: str
    resource_id: Optional[str] = None
    collection_id: Optional[str] = None
    resource_type: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


BASE_POINTS: dict[UserActionType, int] = {
    UserActionType.UPLOAD_RESOURCE: 10,
    UserActionType.RECEIVE_UPVOTE: 5,
    UserActionType.RECEIVE_DOWNVOTE: -2,
    UserActionType.CREATE_COLLECTION: 15,
    UserActionType.RESOURCE_DOWNLOADED: 2,
    UserActionType.COMPLETE_PROFILE: 25,
    UserActionType.WEEKLY_ACTIVITY: 50,
    UserActionType.ADD_TO_COLLECTION: 3,
    UserActionType.SHARE_COLLECTION: 8,
    UserActionType.TAG_RESOURCE: 1,
    UserActionType.VERIFY_RESOURCE: 20,
    UserActionType.COMMENT_RESOURCE: 3,
}

# Extra points for uploads, by resource type
RESOURCE_TYPE_BONUS: dict[str, int] = {
    "video": 5,
    "code": 8,
    "article": 3,
    "link": 2,
    "document": 0,
}

VERIFIED_BONUS = 10
ENGAGEMENT_THRESHOLD = 10  # upvotes must exceed this for the engagement bonus
ENGAGEMENT_BONUS_CAP = 50

CONTRIBUTION_TYPES: dict[UserActionType, str] = {
    UserActionType.UPLOAD_RESOURCE: "upload",
    UserActionType.RECEIVE_UPVOTE: "vote",
    UserActionType.RECEIVE_DOWNVOTE: "vote",
    UserActionType.RESOURCE_DOWNLOADED: "download",
    UserActionType.CREATE_COLLECTION: "collection",
    UserActionType.ADD_TO_COLLECTION: "curation",
    UserActionType.SHARE_COLLECTION: "social",
    UserActionType.TAG_RESOURCE: "curation",
    UserActionType.VERIFY_RESOURCE: "moderation",
    UserActionType.COMMENT_RESOURCE: "engagement",
}


def _upvotes(metadata: dict[str, Any]) -> int:
    """Upvote count from metadata; non-numeric values count as zero."""
    value = metadata.get("upvotes")
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def calculate_points(action: UserAction) -> int:
    """
    Points earned by `action`, never negative.

    Base value by action type, plus an upload bonus by resource type, a
    verified-content bonus, and an engagement bonus of min(upvotes, 50)
    once upvotes exceed 10.
    """
    points = BASE_POINTS.get(UserActionType(action.type), 0)

    if action.type == UserActionType.UPLOAD_RESOURCE and action.resource_type:
        points += RESOURCE_TYPE_BONUS.get(action.resource_type, 0)

    metadata = action.metadata or {}

    if metadata.get("is_verified"):
        points += VERIFIED_BONUS

    upvotes = _upvotes(metadata)
    if upvotes > ENGAGEMENT_THRESHOLD:
        points += min(upvotes, ENGAGEMENT_BONUS_CAP)

    return max(points, 0)


def contribution_type_for(action_type: UserActionType) -> str:
    """Contribution log type recorded for an action."""
    return CONTRIBUTION_TYPES.get(action_type, "other")
