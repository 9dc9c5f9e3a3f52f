"""
Donation Service

Mock-payment donations. A donation is recorded as completed straight away;
the event's raised total moves in the same transaction through a single
atomic UPDATE.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import NotFound, ValidationFailed
from causeconnect.models import Donation, EventStatus, User
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.donation_repo import DonationRepository
from causeconnect.repositories.event_repo import EventRepository
from causeconnect.schemas.base import Pagination, UserSummary
from causeconnect.schemas.donation import (
    DonationCreate,
    DonationCreateResponse,
    DonationEventRef,
    DonationHistoryResponse,
    DonationListResponse,
    DonationResponse,
    DonationStats,
)
from causeconnect.services.notification_service import emit_notification
from causeconnect.utils.file_utils import random_base36
from causeconnect.utils.time import now_millis

logger = logging.getLogger(__name__)


def generate_transaction_id() -> str:
    return f"txn_{now_millis()}_{random_base36(9)}"


def donation_response(donation: Donation) -> DonationResponse:
    event = donation.event
    return DonationResponse(
        id=donation.id,
        amount=float(donation.amount),
        payment_method=donation.payment_method,
        is_recurring=donation.is_recurring,
        is_anonymous=donation.is_anonymous,
        message=donation.message,
        status=donation.status,
        transaction_id=donation.transaction_id,
        event=DonationEventRef(
            id=event.id,
            title=event.title,
            image=event.image,
            organization=UserSummary.from_user(event.organizer) if event.organizer else None,
        ),
        donor=None if donation.is_anonymous or donation.donor is None else UserSummary.from_user(donation.donor),
        created_at=donation.created_at,
    )


class DonationService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.donation_repo = DonationRepository(db)
        self.event_repo = EventRepository(db)

    async def create_donation(self, user: User, data: DonationCreate) -> DonationCreateResponse:
        """
        Record a donation and add it to the event's raised total.

        Raises:
            NotFound: Unknown event
            ValidationFailed: Event is not accepting donations
        """
        event = await self.event_repo.get_by_id(data.event_id)
        if not event:
            raise NotFound("Event not found")
        if event.status != EventStatus.ACTIVE:
            raise ValidationFailed("This event is no longer accepting donations")

        amount = Decimal(str(data.amount)).quantize(Decimal("0.01"))

        donation = Donation(
            user_id=user.id,
            event_id=event.id,
            amount=amount,
            payment_method=data.payment_method,
            is_anonymous=data.is_anonymous,
            is_recurring=data.is_recurring,
            message=data.message,
            status="completed",
            transaction_id=generate_transaction_id(),
        )
        self.db.add(donation)
        await self.event_repo.add_to_raised(event.id, amount)
        await self.db.commit()

        # raised_amount changed underneath the identity map
        await self.db.refresh(event)
        await self.db.refresh(donation)
        logger.info(f"Donation {donation.transaction_id}: {amount} to event {event.id}")

        donor_name = "An anonymous donor" if data.is_anonymous else user.display_name
        await emit_notification(
            self.db,
            recipient_id=event.organization_id,
            actor_id=user.id,
            notification_type=NotificationType.DONATION,
            title="New Donation",
            message=f'{donor_name} donated ${amount:.2f} to your event "{event.title}"',
            amount=amount,
            action_url=f"/event/{event.id}",
        )

        return DonationCreateResponse(donation=donation_response(donation))

    async def list_donations(
        self,
        user: User,
        page: int = 1,
        limit: int = 10,
        event_id: Optional[UUID] = None,
    ) -> DonationListResponse:
        donations, total = await self.donation_repo.list_for_user(user.id, page, limit, event_id)
        return DonationListResponse(
            data=[donation_response(d) for d in donations],
            pagination=Pagination.build(page, limit, total),
        )

    async def history(self, user: User, page: int = 1, limit: int = 10) -> DonationHistoryResponse:
        donations, total = await self.donation_repo.list_for_user(user.id, page, limit)
        count, amount, events = await self.donation_repo.stats_for_user(user.id)
        return DonationHistoryResponse(
            donations=[donation_response(d) for d in donations],
            stats=DonationStats(total_donations=count, total_amount=amount, unique_events=events),
            pagination=Pagination.build(page, limit, total),
        )
