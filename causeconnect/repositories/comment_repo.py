"""
Comment Repository
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import Comment
from causeconnect.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)

    async def list_for_target(
        self,
        event_id: Optional[UUID] = None,
        post_id: Optional[UUID] = None,
    ) -> List[Comment]:
        """Every comment (top level and replies) on one event or post."""
        query = select(Comment)
        if event_id is not None:
            query = query.where(Comment.event_id == event_id)
        else:
            query = query.where(Comment.post_id == post_id)
        result = await self.db.execute(query.order_by(Comment.created_at))
        return list(result.unique().scalars().all())
