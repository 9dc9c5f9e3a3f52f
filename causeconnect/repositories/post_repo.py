"""
Post Repository
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, not_, select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import Comment, Post, PostBookmark, PostParticipant
from causeconnect.repositories.base import BaseRepository, json_tags_overlap


class PostRepository(BaseRepository[Post]):
    """Repository for Post model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Post, db)

    async def list_posts(
        self,
        page: int,
        limit: int,
        author_id: Optional[UUID] = None,
        event_id: Optional[UUID] = None,
        exclude_tags: Optional[List[str]] = None,
    ) -> Tuple[List[Post], int]:
        query = select(Post)
        if exclude_tags:
            query = query.where(not_(json_tags_overlap(Post.tags, exclude_tags)))
        if author_id:
            query = query.where(Post.author_id == author_id)
        if event_id:
            query = query.where(Post.event_id == event_id)
        query = query.order_by(Post.created_at.desc(), Post.id)
        return await self.paginate(query, page, limit)

    async def list_bookmarked(self, user_id: UUID, page: int, limit: int) -> Tuple[List[Post], int]:
        query = (
            select(Post)
            .join(PostBookmark, and_(PostBookmark.post_id == Post.id, PostBookmark.user_id == user_id))
            .order_by(PostBookmark.created_at.desc())
        )
        return await self.paginate(query, page, limit)

    async def comment_counts(self, post_ids: List[UUID]) -> dict:
        if not post_ids:
            return {}
        result = await self.db.execute(
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
        )
        counts = {post_id: 0 for post_id in post_ids}
        counts.update({row[0]: row[1] for row in result.all()})
        return counts

    async def list_participants(self, post_id: UUID, page: int, limit: int) -> Tuple[List[PostParticipant], int]:
        query = (
            select(PostParticipant)
            .where(PostParticipant.post_id == post_id)
            .order_by(PostParticipant.created_at.desc())
        )
        total_result = await self.db.execute(
            select(func.count()).select_from(PostParticipant).where(PostParticipant.post_id == post_id)
        )
        result = await self.db.execute(query.offset((page - 1) * limit).limit(limit))
        return list(result.unique().scalars().all()), total_result.scalar() or 0

    async def all_tag_lists(self) -> List[List[str]]:
        result = await self.db.execute(select(Post.tags))
        return [list(tags or []) for tags in result.scalars().all()]
