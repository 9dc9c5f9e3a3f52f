"""
Settings Service

Account settings (notification, privacy and personalization preferences)
and the block list.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import NotFound, ValidationFailed
from causeconnect.models import Block, User, UserSettings
from causeconnect.repositories.donation_repo import DonationRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.schemas.event import normalize_tags
from causeconnect.schemas.user import (
    BlockedUser,
    ImpactStats,
    NotificationSettings,
    PersonalizationSettings,
    PrivacySettings,
    SettingsPayload,
)

logger = logging.getLogger(__name__)

# payload field -> column on UserSettings
NOTIFICATION_COLUMNS = {
    "donations": "notifications_donations",
    "comments": "notifications_comments",
    "awards": "notifications_awards",
    "mentions": "notifications_mentions",
    "new_causes": "notifications_new_causes",
    "email": "notifications_email",
    "sms": "notifications_sms",
}


def settings_payload(row: UserSettings) -> SettingsPayload:
    return SettingsPayload(
        notifications=NotificationSettings(
            **{field: getattr(row, column) for field, column in NOTIFICATION_COLUMNS.items()}
        ),
        privacy=PrivacySettings(activity_visibility=row.activity_visibility),
        personalization=PersonalizationSettings(
            language=row.language,
            region=row.region,
            currency=row.currency,
            theme=row.theme,
            interest_tags=list(row.interest_tags or []),
        ),
    )


class SettingsService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        # Committed together with the follow cleanup
        self.blocks = ToggleRepository(Block, "blocker_id", "blocked_id", db, commit=False)

    # ============================================================
    # Preferences
    # ============================================================
    async def get_settings(self, user: User) -> SettingsPayload:
        row = await self.user_repo.get_or_create_settings(user.id)
        return settings_payload(row)

    async def update_settings(self, user: User, payload: SettingsPayload) -> SettingsPayload:
        """Apply only the sections and fields present in ``payload``."""
        row = await self.user_repo.get_or_create_settings(user.id)

        if payload.notifications is not None:
            for field, value in payload.notifications.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(row, NOTIFICATION_COLUMNS[field], value)

        if payload.privacy is not None and payload.privacy.activity_visibility is not None:
            row.activity_visibility = payload.privacy.activity_visibility

        if payload.personalization is not None:
            changes = payload.personalization.model_dump(exclude_unset=True)
            if changes.get("interest_tags") is not None:
                changes["interest_tags"] = normalize_tags(changes["interest_tags"])
            for field, value in changes.items():
                if value is not None:
                    setattr(row, field, value)

        await self.db.commit()
        await self.db.refresh(row)
        return settings_payload(row)

    async def impact(self, user: User) -> ImpactStats:
        """Totals over the user's completed donations."""
        count, total, events = await DonationRepository(self.db).stats_for_user(user.id)
        return ImpactStats(total_donated=total, causes_supported=events, donation_count=count)

    # ============================================================
    # Blocks
    # ============================================================
    async def block_user(self, user: User, target_id: UUID) -> None:
        """
        Block ``target_id`` and drop follows in both directions.

        Raises:
            ValidationFailed: Blocking yourself, or already blocked
            NotFound: Unknown user
        """
        if user.id == target_id:
            raise ValidationFailed("Cannot block yourself")

        target = await self.user_repo.get_by_id(target_id)
        if not target:
            raise NotFound("User not found")

        if not await self.blocks.activate(user.id, target_id):
            raise ValidationFailed("User already blocked")

        await self.user_repo.remove_follows_between(user.id, target_id)
        await self.db.commit()
        logger.info(f"User {user.id} blocked {target_id}")

    async def unblock_user(self, user: User, target_id: UUID) -> bool:
        removed = await self.blocks.deactivate(user.id, target_id)
        await self.db.commit()
        return removed

    async def list_blocked(self, user: User) -> List[BlockedUser]:
        rows = await self.user_repo.list_blocked(user.id)
        return [
            BlockedUser(
                id=blocked.id,
                username=blocked.username,
                name=blocked.display_name,
                avatar=blocked.avatar,
                blocked_at=block.created_at,
            )
            for block, blocked in rows
        ]
