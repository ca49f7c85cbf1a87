"""
Contribution model: the append-only audit log of point-earning events.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base
from db.types import UTCDateTime, utcnow


class Contribution(Base):
    """
    One point-earning event for a user.

    Rows are inserted, never updated. All per-user aggregate statistics
    (upload counts, streaks, weekly activity) are derived from this table.
    """

    __tablename__ = "contributions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )

    # upload, vote, download, collection, curation, social, moderation, engagement, other
    type: Mapped[str] = mapped_column(String(30))

    resource_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=True,
    )

    points_earned: Mapped[int] = mapped_column(Integer, default=0)

    # "metadata" is reserved on declarative classes
    extra: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)

    __table_args__ = (
        Index("ix_contributions_user_created", "user_id", "created_at"),
        Index("ix_contributions_user_type", "user_id", "type"),
    )
