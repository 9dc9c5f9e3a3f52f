"""
Notification Repository
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from causeconnect.repositories.base import BaseRepository
from causeconnect.models.notification import Notification


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    async def list_for_user(
        self,
        user_id,
        page: int,
        limit: int,
        notification_type: Optional[str] = None,
    ) -> Tuple[List[Notification], int]:
        query = select(Notification).where(Notification.user_id == user_id)
        if notification_type:
            query = query.where(Notification.type == notification_type)
        query = query.order_by(Notification.created_at.desc(), Notification.id)
        return await self.paginate(query, page, limit)

    async def count_unread(self, user_id) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read == False,
            )
        )
        return result.scalar() or 0

    async def mark_read(self, user_id, notification_id) -> int:
        """Mark one notification read, only if it belongs to ``user_id``."""
        result = await self.db.execute(
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
                Notification.is_read == False,
            )
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount or 0

    async def mark_all_read(self, user_id) -> int:
        """Flip every unread notification of the user; already-read rows are untouched."""
        result = await self.db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read == False,
            )
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount or 0
