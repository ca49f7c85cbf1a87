"""
Notification model.

The engine only inserts rows; delivery (in-app, email digest) is handled by
the platform's UI and email layers.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base
from db.types import UTCDateTime, utcnow


class NotificationType(str, Enum):
    """Notification categories accepted by the notifications table."""

    ACHIEVEMENT = "achievement"
    VOTE_RECEIVED = "vote_received"
    NEW_RESOURCE = "new_resource"
    COLLECTION_SHARED = "collection_shared"
    SYSTEM = "system"


class Notification(Base):
    """An in-app notification addressed to one user."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
    )

    type: Mapped[str] = mapped_column(String(50))
    title: Mapped[str] = mapped_column(Text)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=dict,
    )

    is_read: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)

    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)
