"""
Event Service

Fundraising events, organizer updates, and the support/pass and bookmark
toggles.

Support and pass are mutually exclusive: activating support removes any
pass row, deactivating it records one. Both statements run inside one
transaction.
"""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import Forbidden, NotFound
from causeconnect.models import Event, EventBookmark, EventPass, EventSupport, EventUpdate, User
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.event_repo import EventRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.schemas.base import Pagination, UserSummary
from causeconnect.schemas.post import ParticipantListResponse, ParticipantResponse
from causeconnect.schemas.event import (
    BookmarkResponse,
    EventAnalytics,
    EventAnalyticsResponse,
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventResponse,
    EventUpdatePostCreate,
    EventUpdateRequest,
    EventUpdateResponse,
    SupportResponse,
)
from causeconnect.services.notification_service import emit_notification
from causeconnect.utils.time import ensure_aware

logger = logging.getLogger(__name__)


def time_left(end_date: Optional[datetime]) -> Optional[str]:
    """"{n} days left" (rounded up), "Ended", or None without an end date."""
    if end_date is None:
        return None
    remaining = (ensure_aware(end_date) - datetime.now(timezone.utc)).total_seconds()
    if remaining <= 0:
        return "Ended"
    return f"{math.ceil(remaining / 86400)} days left"


class EventService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.event_repo = EventRepository(db)
        self.user_repo = UserRepository(db)
        self.supports = ToggleRepository(EventSupport, "user_id", "event_id", db, commit=False)
        self.passes = ToggleRepository(EventPass, "user_id", "event_id", db, commit=False)
        self.bookmarks = ToggleRepository(EventBookmark, "user_id", "event_id", db)

    # ============================================================
    # Response shaping
    # ============================================================
    async def _to_responses(self, events: List[Event], viewer: Optional[User]) -> List[EventResponse]:
        ids = [e.id for e in events]
        supporters = await self.supports.counts_for_targets(ids)
        supported = await self.supports.targets_for_actor(viewer.id, ids) if viewer else set()
        bookmarked = await self.bookmarks.targets_for_actor(viewer.id, ids) if viewer else set()

        return [
            EventResponse(
                id=e.id,
                title=e.title,
                description=e.description,
                image=e.image,
                tags=list(e.tags or []),
                location=e.location,
                goal_amount=float(e.goal_amount) if e.goal_amount is not None else None,
                raised_amount=float(e.raised_amount or 0),
                status=e.status,
                supporters=supporters.get(e.id, 0),
                time_left=time_left(e.end_date),
                end_date=e.end_date,
                is_supported=e.id in supported,
                is_bookmarked=e.id in bookmarked,
                organizer=UserSummary.from_user(e.organizer),
                created_at=e.created_at,
            )
            for e in events
        ]

    async def _get_event(self, event_id: UUID) -> Event:
        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise NotFound("Event not found")
        return event

    async def _get_owned_event(self, event_id: UUID, user: User) -> Event:
        event = await self._get_event(event_id)
        if event.organization_id != user.id:
            raise Forbidden("Only the organizer can modify this event")
        return event

    # ============================================================
    # Read paths
    # ============================================================
    async def list_events(
        self,
        viewer: Optional[User],
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        organizer_id: Optional[UUID] = None,
        exclude_organizer_id: Optional[UUID] = None,
        require_user_tags: bool = False,
        exclude_user_tags: bool = False,
    ) -> EventListResponse:
        require_tags = exclude_tags = None
        if viewer and (require_user_tags or exclude_user_tags):
            interest_tags = await self.user_repo.get_interest_tags(viewer.id)
            if require_user_tags:
                require_tags = interest_tags
            if exclude_user_tags:
                exclude_tags = interest_tags

        events, total = await self.event_repo.list_events(
            page,
            limit,
            viewer_id=viewer.id if viewer else None,
            search=search,
            tags=tags,
            organizer_id=organizer_id,
            exclude_organizer_id=exclude_organizer_id,
            require_tags=require_tags,
            exclude_tags=exclude_tags,
        )
        return EventListResponse(
            data=await self._to_responses(events, viewer),
            pagination=Pagination.build(page, limit, total),
        )

    async def get_detail(self, event_id: UUID, viewer: Optional[User]) -> EventDetailResponse:
        event = await self._get_event(event_id)
        [base] = await self._to_responses([event], viewer)
        updates = await self.event_repo.get_updates(event.id)
        return EventDetailResponse(
            **base.model_dump(),
            updates=[EventUpdateResponse.model_validate(u) for u in updates],
            donations_count=await self.event_repo.count_donations(event.id),
        )

    async def list_bookmarked(self, user: User, page: int = 1, limit: int = 10) -> EventListResponse:
        events, total = await self.event_repo.list_bookmarked(user.id, page, limit)
        return EventListResponse(
            data=await self._to_responses(events, user),
            pagination=Pagination.build(page, limit, total),
        )

    async def list_participants(self, event_id: UUID, page: int = 1, limit: int = 20) -> ParticipantListResponse:
        """The event's supporters, most recent first."""
        event = await self._get_event(event_id)
        rows, total = await self.event_repo.list_supporters(event.id, page, limit)
        return ParticipantListResponse(
            participants=[
                ParticipantResponse(user=UserSummary.from_user(user), joined_at=supported_at)
                for user, supported_at in rows
            ],
            pagination=Pagination.build(page, limit, total),
        )

    async def analytics(self, user: User, event_id: UUID) -> EventAnalyticsResponse:
        """
        Organizer-only engagement figures.

        Raises:
            NotFound: Unknown event
            Forbidden: Caller is not the organizer
        """
        event = await self._get_owned_event(event_id, user)
        donations, donors, total_raised = await self.event_repo.donation_totals(event.id)
        return EventAnalyticsResponse(
            analytics=EventAnalytics(
                supporters=await self.supports.count_for_target(event.id),
                bookmarks=await self.bookmarks.count_for_target(event.id),
                donations=donations,
                donors=donors,
                total_raised=total_raised,
            )
        )

    # ============================================================
    # Mutations
    # ============================================================
    async def create_event(self, user: User, data: EventCreate) -> EventResponse:
        event = await self.event_repo.create(
            organization_id=user.id,
            title=data.title,
            description=data.description,
            image=data.image,
            tags=data.tags,
            location=data.location,
            goal_amount=data.goal_amount,
            end_date=data.end_date,
            raised_amount=0,
        )
        logger.info(f"Event created: {event.id} by {user.id}")
        [response] = await self._to_responses([event], user)
        return response

    async def update_event(self, user: User, event_id: UUID, data: EventUpdateRequest) -> EventResponse:
        event = await self._get_owned_event(event_id, user)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(event, key, value)
        await self.db.commit()
        await self.db.refresh(event)
        [response] = await self._to_responses([event], user)
        return response

    async def delete_event(self, user: User, event_id: UUID) -> None:
        event = await self._get_owned_event(event_id, user)
        await self.db.delete(event)
        await self.db.commit()
        logger.info(f"Event deleted: {event_id} by {user.id}")

    async def add_update(self, user: User, data: EventUpdatePostCreate) -> EventUpdateResponse:
        event = await self._get_owned_event(data.event_id, user)
        update = EventUpdate(event_id=event.id, title=data.title, content=data.content)
        self.db.add(update)
        await self.db.commit()
        await self.db.refresh(update)
        return EventUpdateResponse.model_validate(update)

    # ============================================================
    # Support / pass
    # ============================================================
    async def toggle_support(self, user: User, event_id: UUID) -> SupportResponse:
        """
        Support the event, or withdraw support and record a pass.
        """
        event = await self._get_event(event_id)

        if await self.supports.deactivate(user.id, event.id):
            await self.passes.activate(user.id, event.id)
            await self.db.commit()
            is_supported = False
        else:
            await self.passes.deactivate(user.id, event.id)
            await self.supports.activate(user.id, event.id)
            await self.db.commit()
            is_supported = True

            await emit_notification(
                self.db,
                recipient_id=event.organization_id,
                actor_id=user.id,
                notification_type=NotificationType.SUPPORT,
                title="New Supporter",
                message=f'{user.display_name} supported your event "{event.title}"',
                action_url=f"/event/{event.id}",
            )

        return SupportResponse(
            is_supported=is_supported,
            supporters=await self.supports.count_for_target(event.id),
        )

    async def unsupport(self, user: User, event_id: UUID) -> SupportResponse:
        """Remove support if present and record a pass. Idempotent."""
        event = await self._get_event(event_id)
        await self.supports.deactivate(user.id, event.id)
        await self.passes.activate(user.id, event.id)
        await self.db.commit()
        return SupportResponse(
            is_supported=False,
            supporters=await self.supports.count_for_target(event.id),
        )

    # ============================================================
    # Bookmarks
    # ============================================================
    async def toggle_bookmark(self, user: User, event_id: UUID) -> BookmarkResponse:
        event = await self._get_event(event_id)
        return BookmarkResponse(bookmarked=await self.bookmarks.toggle(user.id, event.id))

    async def unbookmark(self, user: User, event_id: UUID) -> BookmarkResponse:
        await self.bookmarks.deactivate(user.id, event_id)
        return BookmarkResponse(bookmarked=False)
