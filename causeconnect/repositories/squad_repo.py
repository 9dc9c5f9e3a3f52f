"""
Squad Repository
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import Squad, SquadComment, SquadMember, SquadPost, SquadRole
from causeconnect.repositories.base import BaseRepository

ROLE_ORDER = case(
    (SquadMember.role == SquadRole.ADMIN, 0),
    (SquadMember.role == SquadRole.MODERATOR, 1),
    else_=2,
)


class SquadRepository(BaseRepository[Squad]):
    """Repository for Squad, its members, posts and comments."""

    def __init__(self, db: AsyncSession):
        super().__init__(Squad, db)

    # =================
    # Membership
    # =================
    async def get_membership(self, squad_id: UUID, user_id: UUID) -> Optional[SquadMember]:
        result = await self.db.execute(
            select(SquadMember).where(SquadMember.squad_id == squad_id, SquadMember.user_id == user_id)
        )
        return result.unique().scalar_one_or_none()

    async def list_members(self, squad_id: UUID) -> List[SquadMember]:
        """Admins, then moderators, then members; each group by join date."""
        result = await self.db.execute(
            select(SquadMember)
            .where(SquadMember.squad_id == squad_id)
            .order_by(ROLE_ORDER, SquadMember.created_at)
        )
        return list(result.unique().scalars().all())

    async def count_members(self, squad_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(SquadMember).where(SquadMember.squad_id == squad_id)
        )
        return result.scalar() or 0

    async def count_posts(self, squad_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(SquadPost).where(SquadPost.squad_id == squad_id)
        )
        return result.scalar() or 0

    async def list_for_user(self, user_id: UUID) -> List[Tuple[Squad, str]]:
        """(Squad, role) for every squad the user belongs to, newest membership first."""
        result = await self.db.execute(
            select(Squad, SquadMember.role)
            .join(SquadMember, SquadMember.squad_id == Squad.id)
            .where(SquadMember.user_id == user_id)
            .order_by(SquadMember.created_at.desc())
        )
        return [(row[0], row[1]) for row in result.unique().all()]

    async def search_public(self, query: Optional[str], page: int, limit: int) -> Tuple[List[Squad], int]:
        stmt = select(Squad).where(Squad.is_private == False)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(Squad.name.ilike(pattern) | Squad.description.ilike(pattern))
        stmt = stmt.order_by(Squad.created_at.desc(), Squad.id)
        return await self.paginate(stmt, page, limit)

    # =================
    # Posts / comments
    # =================
    async def get_post(self, post_id: UUID) -> Optional[SquadPost]:
        result = await self.db.execute(select(SquadPost).where(SquadPost.id == post_id))
        return result.unique().scalar_one_or_none()

    async def list_posts(self, squad_id: UUID, page: int, limit: int) -> Tuple[List[SquadPost], int]:
        query = (
            select(SquadPost)
            .where(SquadPost.squad_id == squad_id)
            .order_by(SquadPost.created_at.desc(), SquadPost.id)
        )
        total_result = await self.db.execute(
            select(func.count()).select_from(SquadPost).where(SquadPost.squad_id == squad_id)
        )
        result = await self.db.execute(query.offset((page - 1) * limit).limit(limit))
        return list(result.unique().scalars().all()), total_result.scalar() or 0

    async def comment_counts(self, post_ids: List[UUID]) -> dict:
        if not post_ids:
            return {}
        result = await self.db.execute(
            select(SquadComment.post_id, func.count())
            .where(SquadComment.post_id.in_(post_ids))
            .group_by(SquadComment.post_id)
        )
        counts = {post_id: 0 for post_id in post_ids}
        counts.update({row[0]: row[1] for row in result.all()})
        return counts

    async def get_comment(self, comment_id: UUID) -> Optional[SquadComment]:
        result = await self.db.execute(select(SquadComment).where(SquadComment.id == comment_id))
        return result.unique().scalar_one_or_none()

    async def list_comments(self, post_id: UUID) -> List[SquadComment]:
        result = await self.db.execute(
            select(SquadComment)
            .where(SquadComment.post_id == post_id)
            .order_by(SquadComment.created_at)
        )
        return list(result.unique().scalars().all())
