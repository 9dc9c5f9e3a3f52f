"""
Event Repository
"""

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, distinct, func, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import Donation, Event, EventBookmark, EventPass, EventStatus, EventSupport, EventUpdate, User
from causeconnect.repositories.base import BaseRepository, json_tags_overlap, like_escape


class EventRepository(BaseRepository[Event]):
    """Repository for Event model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Event, db)

    async def list_events(
        self,
        page: int,
        limit: int,
        viewer_id: Optional[UUID] = None,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        organizer_id: Optional[UUID] = None,
        exclude_organizer_id: Optional[UUID] = None,
        require_tags: Optional[List[str]] = None,
        exclude_tags: Optional[List[str]] = None,
    ) -> Tuple[List[Event], int]:
        """
        Active events, newest first, with the caller's passed events hidden.
        """
        query = select(Event).where(Event.status == EventStatus.ACTIVE)

        if search:
            pattern = f"%{like_escape(search)}%"
            query = query.where(or_(
                Event.title.ilike(pattern, escape="\\"),
                Event.description.ilike(pattern, escape="\\"),
            ))
        if tags:
            query = query.where(json_tags_overlap(Event.tags, tags))
        if organizer_id:
            query = query.where(Event.organization_id == organizer_id)
        if exclude_organizer_id:
            query = query.where(Event.organization_id != exclude_organizer_id)
        if require_tags:
            query = query.where(json_tags_overlap(Event.tags, require_tags))
        if exclude_tags:
            query = query.where(not_(json_tags_overlap(Event.tags, exclude_tags)))
        if viewer_id:
            passed = select(EventPass.event_id).where(EventPass.user_id == viewer_id)
            query = query.where(Event.id.not_in(passed))

        query = query.order_by(Event.created_at.desc(), Event.id)
        return await self.paginate(query, page, limit)

    async def list_bookmarked(self, user_id: UUID, page: int, limit: int) -> Tuple[List[Event], int]:
        query = (
            select(Event)
            .join(EventBookmark, and_(EventBookmark.event_id == Event.id, EventBookmark.user_id == user_id))
            .order_by(EventBookmark.created_at.desc())
        )
        return await self.paginate(query, page, limit)

    async def add_to_raised(self, event_id: UUID, amount) -> None:
        """Atomic ``raised_amount = raised_amount + amount``; the caller commits."""
        await self.db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(raised_amount=Event.raised_amount + amount)
            .execution_options(synchronize_session=False)
        )

    async def get_updates(self, event_id: UUID) -> List[EventUpdate]:
        result = await self.db.execute(
            select(EventUpdate)
            .where(EventUpdate.event_id == event_id)
            .order_by(EventUpdate.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_donations(self, event_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Donation).where(Donation.event_id == event_id)
        )
        return result.scalar() or 0

    async def list_supporters(self, event_id: UUID, page: int, limit: int) -> Tuple[List[Tuple[User, datetime]], int]:
        """(user, supported_at) pairs, most recent supporter first."""
        total_result = await self.db.execute(
            select(func.count()).select_from(EventSupport).where(EventSupport.event_id == event_id)
        )
        result = await self.db.execute(
            select(User, EventSupport.created_at)
            .join(EventSupport, EventSupport.user_id == User.id)
            .where(EventSupport.event_id == event_id)
            .order_by(EventSupport.created_at.desc(), User.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return [tuple(row) for row in result.all()], total_result.scalar() or 0

    async def donation_totals(self, event_id: UUID) -> Tuple[int, int, float]:
        """(donation count, distinct donors, amount) over completed donations."""
        result = await self.db.execute(
            select(
                func.count(Donation.id),
                func.count(distinct(Donation.user_id)),
                func.coalesce(func.sum(Donation.amount), 0),
            ).where(Donation.event_id == event_id, Donation.status == "completed")
        )
        count, donors, total = result.one()
        return int(count or 0), int(donors or 0), float(total or 0)

    async def all_tag_lists(self) -> List[List[str]]:
        result = await self.db.execute(select(Event.tags))
        return [list(tags or []) for tags in result.scalars().all()]
