"""
Notification Service

Two halves:

- ``emit_notification``: the side effect run inline by follow, like,
  comment, donation, support and award handlers once their own write has
  committed. Best effort: a failed insert is logged and dropped, the
  triggering request still succeeds.
- ``NotificationService``: the read/mark-read paths behind the
  notification endpoints.
"""

import logging
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import ValidationFailed
from causeconnect.models.notification import Notification, NotificationType
from causeconnect.repositories.notification_repo import NotificationRepository
from causeconnect.schemas.base import Pagination
from causeconnect.schemas.notification import (
    NotificationListResponse,
    NotificationResponse,
)

logger = logging.getLogger(__name__)


# ============================================================
# Side-effect emitter
# ============================================================

async def emit_notification(
    db: AsyncSession,
    recipient_id: Optional[UUID],
    actor_id: UUID,
    notification_type: str,
    title: str,
    message: str,
    amount: Optional[Union[Decimal, float]] = None,
    action_url: Optional[str] = None,
) -> Optional[Notification]:
    """
    Persist one notification for ``recipient_id`` about ``actor_id``'s action.

    Nothing is written when the actor is the recipient. The insert runs in
    its own short session so a failure cannot roll back, or expire, the
    caller's already-committed work.

    Returns:
        The stored Notification, or None when suppressed or lost.
    """
    if recipient_id is None or recipient_id == actor_id:
        return None

    if notification_type not in NotificationType.ALL:
        raise ValueError(f"Unknown notification type: {notification_type}")

    try:
        async with AsyncSession(bind=db.bind, expire_on_commit=False) as session:
            notification = Notification(
                user_id=recipient_id,
                type=notification_type,
                title=title,
                message=message,
                amount=Decimal(str(amount)) if amount is not None else None,
                action_url=action_url,
                is_read=False,
            )
            session.add(notification)
            await session.commit()
            return notification
    except Exception as e:
        logger.warning("Failed to save notification to DB: %s", e)
        return None


# ============================================================
# Read paths
# ============================================================

class NotificationService:
    """Listing, counting and marking notifications for the current user."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = NotificationRepository(db)

    async def list_notifications(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = 20,
        notification_type: Optional[str] = None,
    ) -> NotificationListResponse:
        if notification_type and notification_type not in NotificationType.ALL:
            raise ValidationFailed(
                f"Invalid notification type. Must be one of: {', '.join(NotificationType.ALL)}"
            )

        notifications, total = await self.repo.list_for_user(
            user_id, page, limit, notification_type
        )
        return NotificationListResponse(
            data=[NotificationResponse.from_model(n) for n in notifications],
            pagination=Pagination.build(page, limit, total),
        )

    async def unread_count(self, user_id: UUID) -> int:
        return await self.repo.count_unread(user_id)

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> int:
        updated = await self.repo.mark_read(user_id, notification_id)
        logger.debug(f"Notification {notification_id} marked read for {user_id}: {updated}")
        return updated

    async def mark_all_read(self, user_id: UUID) -> int:
        updated = await self.repo.mark_all_read(user_id)
        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated
