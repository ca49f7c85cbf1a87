"""
User model.

Only the columns the gamification engine reads or writes are mapped here;
profile and authentication data belong to the platform's user service.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base
from db.types import UTCDateTime, utcnow


class User(Base):
    """
    Student account.

    `points` is the running balance; it must equal the sum of
    `points_earned` over the user's contributions and achievement grants.
    `badge_level` is recomputed in the same UPDATE that moves the balance.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(200))
    department: Mapped[str] = mapped_column(String(100), index=True)
    semester: Mapped[int] = mapped_column(Integer, default=1)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Gamification
    points: Mapped[int] = mapped_column(Integer, default=0, index=True)
    badge_level: Mapped[str] = mapped_column(String(20), default="Freshman")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, onupdate=utcnow)

    # Relationships
    achievements = relationship("UserAchievement", back_populates="user")
