"""
Custom Feed Repository
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import CustomFeed
from causeconnect.repositories.base import BaseRepository


class CustomFeedRepository(BaseRepository[CustomFeed]):
    """Repository for CustomFeed model."""

    def __init__(self, db: AsyncSession):
        super().__init__(CustomFeed, db)

    async def list_for_user(self, user_id: UUID) -> List[CustomFeed]:
        result = await self.db.execute(
            select(CustomFeed)
            .where(CustomFeed.user_id == user_id)
            .order_by(CustomFeed.created_at.desc(), CustomFeed.id)
        )
        return list(result.scalars().all())

    async def get_owned(self, feed_id: UUID, user_id: UUID) -> Optional[CustomFeed]:
        """The feed, or None when it does not exist or belongs to someone else."""
        result = await self.db.execute(
            select(CustomFeed).where(CustomFeed.id == feed_id, CustomFeed.user_id == user_id)
        )
        return result.scalar_one_or_none()
