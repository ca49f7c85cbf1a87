"""
User repository for database operations.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.contribution import Contribution
from models.resource import Collection, Resource
from models.user import User
from services.levels import LEVEL_DEFINITIONS


@dataclass
class LeaderboardRow:
    """One aggregated leaderboard row, before ranking and formatting."""

    user_id: str
    full_name: str
    department: str
    total_points: int
    uploads_count: int
    collections_count: int
    recent_activity: int


@dataclass
class DepartmentRow:
    department: str
    total_users: int
    total_points: int


def badge_level_expression(points_expr: Any) -> Any:
    """SQL CASE mapping a points expression to its badge level name."""
    whens = [
        (points_expr >= definition["points_required"], definition["name"])
        for definition in sorted(LEVEL_DEFINITIONS, key=lambda d: d["points_required"], reverse=True)
        if definition["points_required"] > 0
    ]
    return case(*whens, else_=LEVEL_DEFINITIONS[0]["name"])


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _get_rowcount(self, result: Any) -> int:
        """Safely get rowcount from result."""
        return getattr(result, "rowcount", 0) or 0

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID, refreshing any copy already in the session."""
        result = await self.db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_points(self, user_id: str) -> Optional[int]:
        """Current point balance read straight from the database, or None for unknown users."""
        result = await self.db.execute(select(User.points).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def increment_points(self, user_id: str, points: int) -> bool:
        """
        Add `points` to the user's balance and recompute the badge level.

        A single UPDATE computes both columns from the stored balance, so
        concurrent increments on the same user never lose an update.
        """
        new_points = func.coalesce(User.points, 0) + points
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                points=new_points,
                badge_level=badge_level_expression(new_points),
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return self._get_rowcount(result) > 0

    async def list_active_ids(self) -> list[str]:
        """Ids of all active users, oldest account first."""
        result = await self.db.execute(
            select(User.id).where(User.is_active == True).order_by(User.created_at, User.id)  # noqa: E712
        )
        return list(result.scalars().all())

    def _uploads_subquery(self) -> Any:
        return (
            select(Resource.uploaded_by.label("user_id"), func.count(Resource.id).label("uploads_count"))
            .group_by(Resource.uploaded_by)
            .subquery()
        )

    async def get_leaderboard(
        self,
        since: datetime,
        department: Optional[str] = None,
        limit: int = 50,
    ) -> list[LeaderboardRow]:
        """
        Active users ordered by points with their upload, collection and
        recent-activity aggregates, in one query.

        Ties on points are broken by upload count, then by user id.
        """
        uploads = self._uploads_subquery()
        collections = (
            select(Collection.created_by.label("user_id"), func.count(Collection.id).label("collections_count"))
            .group_by(Collection.created_by)
            .subquery()
        )
        recent = (
            select(
                Contribution.user_id.label("user_id"),
                func.sum(Contribution.points_earned).label("recent_activity"),
            )
            .where(Contribution.created_at >= since)
            .group_by(Contribution.user_id)
            .subquery()
        )

        uploads_count = func.coalesce(uploads.c.uploads_count, 0)
        query = (
            select(
                User.id,
                User.full_name,
                User.department,
                func.coalesce(User.points, 0).label("total_points"),
                uploads_count.label("uploads_count"),
                func.coalesce(collections.c.collections_count, 0).label("collections_count"),
                func.coalesce(recent.c.recent_activity, 0).label("recent_activity"),
            )
            .outerjoin(uploads, uploads.c.user_id == User.id)
            .outerjoin(collections, collections.c.user_id == User.id)
            .outerjoin(recent, recent.c.user_id == User.id)
            .where(User.is_active == True)  # noqa: E712
        )
        if department:
            query = query.where(User.department == department)

        query = query.order_by(
            func.coalesce(User.points, 0).desc(),
            uploads_count.desc(),
            User.id.asc(),
        ).limit(limit)

        result = await self.db.execute(query)
        return [
            LeaderboardRow(
                user_id=str(row.id),
                full_name=row.full_name,
                department=row.department,
                total_points=int(row.total_points),
                uploads_count=int(row.uploads_count),
                collections_count=int(row.collections_count),
                recent_activity=int(row.recent_activity),
            )
            for row in result.all()
        ]

    async def get_user_rank(self, user_id: str, department: Optional[str] = None) -> Optional[int]:
        """1-based leaderboard position of a user under the leaderboard ordering."""
        uploads = self._uploads_subquery()
        uploads_count = func.coalesce(uploads.c.uploads_count, 0)
        points = func.coalesce(User.points, 0)

        target = await self.db.execute(
            select(points.label("points"), uploads_count.label("uploads"), User.department, User.is_active)
            .outerjoin(uploads, uploads.c.user_id == User.id)
            .where(User.id == user_id)
        )
        row = target.one_or_none()
        if row is None or not row.is_active:
            return None
        if department and row.department != department:
            return None

        query = (
            select(func.count(User.id))
            .outerjoin(uploads, uploads.c.user_id == User.id)
            .where(
                User.is_active == True,  # noqa: E712
                or_(
                    points > row.points,
                    and_(points == row.points, uploads_count > row.uploads),
                    and_(points == row.points, uploads_count == row.uploads, User.id < user_id),
                ),
            )
        )
        if department:
            query = query.where(User.department == department)

        ahead = (await self.db.execute(query)).scalar() or 0
        return ahead + 1

    async def count_users(self) -> int:
        result = await self.db.execute(select(func.count(User.id)))
        return result.scalar() or 0

    async def count_by_badge_level(self) -> dict[str, int]:
        """Number of users at each level, grouped in the database."""
        level = badge_level_expression(func.coalesce(User.points, 0)).label("level")
        result = await self.db.execute(select(level, func.count(User.id)).group_by(level))
        return {name: int(count) for name, count in result.all()}

    async def get_department_stats(self) -> list[DepartmentRow]:
        result = await self.db.execute(
            select(
                User.department,
                func.count(User.id),
                func.coalesce(func.sum(User.points), 0),
            ).group_by(User.department)
        )
        return [
            DepartmentRow(department=row[0], total_users=int(row[1]), total_points=int(row[2]))
            for row in result.all()
        ]

    async def get_top_user_by_department(self) -> dict[str, str]:
        """Full name of the highest-balance user in each department (lowest id wins ties)."""
        result = await self.db.execute(
            select(User.department, User.full_name).order_by(
                User.department, func.coalesce(User.points, 0).desc(), User.id.asc()
            )
        )
        top: dict[str, str] = {}
        for department, full_name in result.all():
            top.setdefault(department, full_name)
        return top
