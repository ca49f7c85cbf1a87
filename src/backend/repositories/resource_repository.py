"""
Read-only aggregates over resources and collections owned by a user.
"""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.resource import Collection, Resource


@dataclass
class ResourceTotals:
    """Engagement totals across every resource a user uploaded."""

    resource_count: int = 0
    total_upvotes: int = 0
    total_downloads: int = 0
    max_upvotes: int = 0


class ResourceRepository:
    """Repository for resource and collection aggregates."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_owner_totals(self, user_id: str) -> ResourceTotals:
        """Upload count and upvote/download sums and maximum for a user's resources."""
        result = await self.db.execute(
            select(
                func.count(Resource.id),
                func.coalesce(func.sum(Resource.upvotes), 0),
                func.coalesce(func.sum(Resource.downloads), 0),
                func.coalesce(func.max(Resource.upvotes), 0),
            ).where(Resource.uploaded_by == user_id)
        )
        count, upvotes, downloads, max_upvotes = result.one()
        return ResourceTotals(
            resource_count=int(count),
            total_upvotes=int(upvotes),
            total_downloads=int(downloads),
            max_upvotes=int(max_upvotes),
        )

    async def count_collections(self, user_id: str) -> int:
        """Number of collections created by a user."""
        result = await self.db.execute(select(func.count(Collection.id)).where(Collection.created_by == user_id))
        return result.scalar() or 0
