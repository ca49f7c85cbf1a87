"""
Repository provider for dependency injection.

Services receive a `Repositories` bundle rather than a session, so any
storage that satisfies the protocols below (including in-memory fakes in
tests) can stand in for the SQL repositories.

Usage:
    from repositories.provider import Repositories, get_repositories

    # In FastAPI dependencies:
    async def some_endpoint(repos: Repositories = Depends(get_repositories)):
        points = await repos.users.get_points(user_id)
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_db
from repositories.achievement_repository import AchievementRepository
from repositories.contribution_repository import ActivitySummary, ContributionRepository
from repositories.notification_repository import NotificationRepository
from repositories.resource_repository import ResourceRepository, ResourceTotals
from repositories.user_repository import DepartmentRow, LeaderboardRow, UserRepository

# =============================================================================
# Repository Protocols (Interfaces)
# =============================================================================


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Protocol defining user repository operations."""

    async def get_by_id(self, user_id: str): ...
    async def get_points(self, user_id: str) -> Optional[int]: ...
    async def increment_points(self, user_id: str, points: int) -> bool: ...
    async def list_active_ids(self) -> list[str]: ...
    async def get_leaderboard(
        self, since: datetime, department: Optional[str] = None, limit: int = 50
    ) -> list[LeaderboardRow]: ...
    async def get_user_rank(self, user_id: str, department: Optional[str] = None) -> Optional[int]: ...
    async def count_users(self) -> int: ...
    async def count_by_badge_level(self) -> dict[str, int]: ...
    async def get_department_stats(self) -> list[DepartmentRow]: ...
    async def get_top_user_by_department(self) -> dict[str, str]: ...


@runtime_checkable
class ContributionRepositoryProtocol(Protocol):
    """Protocol defining contribution log operations."""

    async def create(
        self,
        user_id: str,
        type: str,
        points_earned: int,
        resource_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ): ...
    async def count_by_type(self, user_id: str) -> dict[str, int]: ...
    async def get_activity_timestamps(self, user_id: str, since: datetime) -> list[datetime]: ...
    async def summarize_since(self, user_id: str, since: datetime) -> ActivitySummary: ...
    async def get_last_activity(self, user_id: str) -> Optional[datetime]: ...
    async def points_by_type(self, since: Optional[datetime] = None) -> dict[str, int]: ...
    async def count_active_users(self, since: Optional[datetime] = None) -> int: ...


@runtime_checkable
class ResourceRepositoryProtocol(Protocol):
    """Protocol defining resource and collection aggregate reads."""

    async def get_owner_totals(self, user_id: str) -> ResourceTotals: ...
    async def count_collections(self, user_id: str) -> int: ...


@runtime_checkable
class AchievementRepositoryProtocol(Protocol):
    """Protocol defining achievement grant operations."""

    async def has_achievement(self, user_id: str, achievement_id: str) -> bool: ...
    async def create_grant(self, user_id: str, achievement_id: str, points_earned: int): ...
    async def list_for_user(self, user_id: str) -> list: ...
    async def count_for_user(self, user_id: str) -> int: ...
    async def count_by_achievement(self, since: Optional[datetime] = None) -> dict[str, int]: ...


@runtime_checkable
class NotificationRepositoryProtocol(Protocol):
    """Protocol defining notification operations."""

    async def create(
        self,
        user_id: str,
        type: str,
        title: str,
        message: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
    ): ...
    async def list_for_user(self, user_id: str, unread_only: bool = False, limit: int = 50) -> list: ...
    async def mark_read(self, user_id: str, notification_id: str) -> bool: ...
    async def mark_all_read(self, user_id: str) -> int: ...


# =============================================================================
# Repository bundle
# =============================================================================


@dataclass
class Repositories:
    """
    The repositories a request works with, plus the unit-of-work boundary.

    `commit` and `rollback` delimit the independent steps of the points
    pipeline; they are no-ops when no session is attached.
    """

    users: UserRepositoryProtocol
    contributions: ContributionRepositoryProtocol
    resources: ResourceRepositoryProtocol
    achievements: AchievementRepositoryProtocol
    notifications: NotificationRepositoryProtocol
    session: Optional[AsyncSession] = None

    @classmethod
    def from_session(cls, db: AsyncSession) -> "Repositories":
        """Build SQL-backed repositories sharing one session."""
        return cls(
            users=UserRepository(db),
            contributions=ContributionRepository(db),
            resources=ResourceRepository(db),
            achievements=AchievementRepository(db),
            notifications=NotificationRepository(db),
            session=db,
        )

    async def commit(self) -> None:
        if self.session is not None:
            await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


# =============================================================================
# FastAPI Dependencies
# =============================================================================


async def get_repositories(db: AsyncSession = Depends(get_db)) -> AsyncGenerator[Repositories, None]:
    """Dependency providing SQL repositories bound to the request session."""
    yield Repositories.from_session(db)
