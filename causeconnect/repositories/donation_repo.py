"""
Donation Repository
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import Donation
from causeconnect.repositories.base import BaseRepository


class DonationRepository(BaseRepository[Donation]):
    """Repository for Donation model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Donation, db)

    async def list_for_user(
        self,
        user_id: UUID,
        page: int,
        limit: int,
        event_id: Optional[UUID] = None,
    ) -> Tuple[List[Donation], int]:
        query = select(Donation).where(Donation.user_id == user_id)
        if event_id:
            query = query.where(Donation.event_id == event_id)
        query = query.order_by(Donation.created_at.desc(), Donation.id)
        return await self.paginate(query, page, limit)

    async def stats_for_user(self, user_id: UUID) -> Tuple[int, float, int]:
        """(count, total amount, distinct events) over completed donations."""
        result = await self.db.execute(
            select(
                func.count(Donation.id),
                func.coalesce(func.sum(Donation.amount), 0),
                func.count(distinct(Donation.event_id)),
            ).where(Donation.user_id == user_id, Donation.status == "completed")
        )
        count, total, events = result.one()
        return int(count or 0), float(total or 0), int(events or 0)
