"""
Contribution repository: inserts into and aggregates over the contribution log.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.contribution import Contribution


@dataclass
class ActivitySummary:
    """Points and action count over a time window."""

    points_earned: int
    actions_completed: int


class ContributionRepository:
    """Repository for the append-only contribution log."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        user_id: str,
        type: str,
        points_earned: int,
        resource_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Contribution:
        """Append a contribution row."""
        contribution = Contribution(
            id=str(uuid4()),
            user_id=user_id,
            type=type,
            resource_id=resource_id,
            points_earned=points_earned,
            extra=metadata or {},
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(contribution)
        await self.db.flush()
        return contribution

    async def count_by_type(self, user_id: str) -> dict[str, int]:
        """Number of contributions per type for a user."""
        result = await self.db.execute(
            select(Contribution.type, func.count(Contribution.id))
            .where(Contribution.user_id == user_id)
            .group_by(Contribution.type)
        )
        return {row[0]: int(row[1]) for row in result.all()}

    async def get_activity_timestamps(self, user_id: str, since: datetime) -> list[datetime]:
        """Contribution timestamps at or after `since`, newest first."""
        result = await self.db.execute(
            select(Contribution.created_at)
            .where(Contribution.user_id == user_id, Contribution.created_at >= since)
            .order_by(Contribution.created_at.desc())
        )
        return list(result.scalars().all())

    async def summarize_since(self, user_id: str, since: datetime) -> ActivitySummary:
        """Points and number of contributions for a user since `since`."""
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Contribution.points_earned), 0),
                func.count(Contribution.id),
            ).where(Contribution.user_id == user_id, Contribution.created_at >= since)
        )
        points, count = result.one()
        return ActivitySummary(points_earned=int(points), actions_completed=int(count))

    async def get_last_activity(self, user_id: str) -> Optional[datetime]:
        result = await self.db.execute(
            select(func.max(Contribution.created_at)).where(Contribution.user_id == user_id)
        )
        return result.scalar()

    async def points_by_type(self, since: Optional[datetime] = None) -> dict[str, int]:
        """Platform-wide points earned per contribution type."""
        query = select(Contribution.type, func.coalesce(func.sum(Contribution.points_earned), 0)).group_by(
            Contribution.type
        )
        if since is not None:
            query = query.where(Contribution.created_at >= since)
        result = await self.db.execute(query)
        return {row[0]: int(row[1]) for row in result.all()}

    async def count_active_users(self, since: Optional[datetime] = None) -> int:
        """Distinct users with at least one contribution since `since`."""
        query = select(func.count(func.distinct(Contribution.user_id)))
        if since is not None:
            query = query.where(Contribution.created_at >= since)
        result = await self.db.execute(query)
        return result.scalar() or 0
