"""
Achievement grant model.

Achievement definitions are a static catalog in code
(services/achievement_catalog.py); only grants are persisted.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base
from db.types import UTCDateTime, utcnow


class UserAchievement(Base):
    """
    A user's grant of one catalog achievement.

    Created at most once per (user, achievement); the unique constraint is
    the last line of defence when two evaluations race.
    """

    __tablename__ = "user_achievements"

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
    achievement_id: Mapped[str] = mapped_column(String(100))

    # Bonus credited to the user's balance when granted
    points_earned: Mapped[int] = mapped_column(Integer, default=0)

    earned_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="achievements")

    __table_args__ = (UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),)
