"""
User Service

Profiles, profile edits, search and the follow toggle.
"""

import logging
import math
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import Forbidden, NotFound, ValidationFailed
from causeconnect.models import EventSupport, Follow, User
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.donation_repo import DonationRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.schemas.auth import UserResponse
from causeconnect.schemas.base import UserSummary
from causeconnect.schemas.user import (
    ActivityEventRef,
    ActivityItem,
    FollowResponse,
    UserProfileResponse,
    UserSearchResult,
    UserStats,
    UserUpdateRequest,
)
from causeconnect.services.notification_service import emit_notification

logger = logging.getLogger(__name__)


def impact_score(causes_supported: int, total_donated: float) -> int:
    return causes_supported * 10 + math.floor(total_donated / 100)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.donation_repo = DonationRepository(db)
        self.follows = ToggleRepository(Follow, "follower_id", "following_id", db)
        self.supports = ToggleRepository(EventSupport, "user_id", "event_id", db)

    # ============================================================
    # Profile
    # ============================================================
    async def get_profile(self, username: str, viewer: Optional[User] = None) -> UserProfileResponse:
        """
        Public profile with live follow and donation statistics.

        Raises:
            NotFound: Unknown username
        """
        user = await self.user_repo.get_by_username(username)
        if not user or not user.is_active:
            raise NotFound("User not found")

        _, total_donated, _ = await self.donation_repo.stats_for_user(user.id)
        causes_supported = await self.supports.count_for_actor(user.id)

        is_own = viewer is not None and viewer.id == user.id
        is_following = False
        if viewer is not None and not is_own:
            is_following = await self.follows.exists(viewer.id, user.id)

        return UserProfileResponse(
            id=user.id,
            username=user.username,
            name=user.display_name,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar=user.avatar,
            bio=user.bio,
            location=user.location,
            verified=user.verified,
            joined_at=user.created_at,
            is_following=is_following,
            is_own_profile=is_own,
            stats=UserStats(
                followers=await self.user_repo.count_followers(user.id),
                following=await self.user_repo.count_following(user.id),
                causes_supported=causes_supported,
                total_donated=total_donated,
            ),
            impact_score=impact_score(causes_supported, total_donated),
        )

    async def update_profile(self, user: User, data: UserUpdateRequest) -> UserResponse:
        changes = data.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Profile updated for {user.id}: {sorted(changes)}")
        return UserResponse.from_user(user)

    async def search(self, query: str, limit: int = 10) -> List[UserSearchResult]:
        query = (query or "").strip()
        if not query:
            return []
        users = await self.user_repo.search(query, limit)
        return [
            UserSearchResult(
                id=u.id,
                username=u.username,
                name=u.display_name,
                email=u.email,
                avatar=u.avatar,
                verified=u.verified,
            )
            for u in users
        ]

    # ============================================================
    # Follow toggle
    # ============================================================
    async def toggle_follow(self, follower: User, target_id: UUID) -> FollowResponse:
        """
        Follow or unfollow ``target_id``.

        Raises:
            ValidationFailed: Following yourself
            NotFound: Unknown user
            Forbidden: Either side has blocked the other
        """
        if follower.id == target_id:
            raise ValidationFailed("Cannot follow yourself")

        target = await self.user_repo.get_by_id(target_id)
        if not target or not target.is_active:
            raise NotFound("User not found")

        if await self.user_repo.is_blocked_between(follower.id, target_id):
            raise Forbidden("You cannot follow this user")

        is_following = await self.follows.toggle(follower.id, target_id)

        if is_following:
            await emit_notification(
                self.db,
                recipient_id=target.id,
                actor_id=follower.id,
                notification_type=NotificationType.FOLLOW,
                title="New Follower",
                message=f"{follower.display_name} started following you",
                action_url=f"/profile/{follower.username}",
            )

        return FollowResponse(
            is_following=is_following,
            followers_count=await self.user_repo.count_followers(target_id),
        )

    # ============================================================
    # Activity
    # ============================================================
    async def _activity_visible(self, user: User, viewer: Optional[User]) -> bool:
        if viewer is not None and viewer.id == user.id:
            return True
        settings = await self.user_repo.get_or_create_settings(user.id)
        if settings.activity_visibility == "public":
            return True
        if settings.activity_visibility == "friends" and viewer is not None:
            return await self.follows.exists(viewer.id, user.id)
        return False

    async def get_activity(self, username: str, viewer: Optional[User] = None, limit: int = 10) -> List[ActivityItem]:
        """
        Recent supports, awards and follows by ``username``, newest first.

        An empty list is returned when the user's activity visibility
        hides it from ``viewer``.

        Raises:
            NotFound: Unknown username
        """
        user = await self.user_repo.get_by_username(username)
        if not user or not user.is_active:
            raise NotFound("User not found")
        if not await self._activity_visible(user, viewer):
            return []

        items: List[ActivityItem] = []
        for supported_at, event in await self.user_repo.recent_supports(user.id, limit):
            items.append(ActivityItem(
                type="support",
                id=event.id,
                title="Supported a cause",
                description=f'Supported "{event.title}"',
                timestamp=supported_at,
                event=ActivityEventRef(id=event.id, title=event.title, image=event.image),
            ))
        for awarded_at, comment, event in await self.user_repo.recent_awards(user.id, limit):
            text = comment.content
            items.append(ActivityItem(
                type="award",
                id=comment.id,
                title="Gave an award",
                description=text[:100] + ("..." if len(text) > 100 else ""),
                timestamp=awarded_at,
                event=ActivityEventRef(id=event.id, title=event.title, image=event.image) if event else None,
            ))
        for followed_at, followed in await self.user_repo.recent_follows(user.id, limit):
            items.append(ActivityItem(
                type="follow",
                id=followed.id,
                title="Followed someone",
                description=f"Started following {followed.display_name}",
                timestamp=followed_at,
                user=UserSummary.from_user(followed),
            ))

        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items[:limit]

    async def get_chat_profile(self, user_id: UUID) -> UserSearchResult:
        user = await self.user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise NotFound("User not found")
        return UserSearchResult(
            id=user.id,
            username=user.username,
            name=user.display_name,
            email=user.email,
            avatar=user.avatar,
            verified=user.verified,
        )
