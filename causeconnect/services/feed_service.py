"""
Feed Service

Saved tag feeds, the tag directory and the explore mix of events and
posts outside the viewer's interests.
"""

import logging
from collections import Counter
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import NotFound, ValidationFailed
from causeconnect.models import CustomFeed, User
from causeconnect.repositories.custom_feed_repo import CustomFeedRepository
from causeconnect.repositories.event_repo import EventRepository
from causeconnect.repositories.post_repo import PostRepository
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.schemas.base import Pagination
from causeconnect.schemas.feed import (
    CustomFeedCreate,
    CustomFeedResponse,
    CustomFeedUpdate,
    ExploreItem,
    ExploreResponse,
    TagCount,
)
from causeconnect.services.event_service import EventService
from causeconnect.services.post_service import PostService

logger = logging.getLogger(__name__)


class FeedService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.feed_repo = CustomFeedRepository(db)
        self.user_repo = UserRepository(db)

    # ============================================================
    # Custom feeds
    # ============================================================
    async def _get_owned(self, user: User, feed_id: UUID) -> CustomFeed:
        feed = await self.feed_repo.get_owned(feed_id, user.id)
        if not feed:
            raise NotFound("Custom feed not found")
        return feed

    async def create_feed(self, user: User, data: CustomFeedCreate) -> CustomFeedResponse:
        feed = await self.feed_repo.create(user_id=user.id, name=data.name.strip(), tags=data.tags)
        logger.info(f"Custom feed {feed.id} created by {user.id}")
        return CustomFeedResponse.model_validate(feed)

    async def list_feeds(self, user: User) -> List[CustomFeedResponse]:
        feeds = await self.feed_repo.list_for_user(user.id)
        return [CustomFeedResponse.model_validate(f) for f in feeds]

    async def get_feed(self, user: User, feed_id: UUID) -> CustomFeedResponse:
        return CustomFeedResponse.model_validate(await self._get_owned(user, feed_id))

    async def update_feed(self, user: User, feed_id: UUID, data: CustomFeedUpdate) -> CustomFeedResponse:
        """
        Rename a feed or replace its tags.

        Raises:
            NotFound: Unknown feed, or owned by someone else
            ValidationFailed: Nothing to update
        """
        feed = await self._get_owned(user, feed_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            raise ValidationFailed("No fields to update")
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        feed = await self.feed_repo.update(feed.id, **changes)
        return CustomFeedResponse.model_validate(feed)

    async def delete_feed(self, user: User, feed_id: UUID) -> None:
        feed = await self._get_owned(user, feed_id)
        await self.feed_repo.delete(feed.id)
        logger.info(f"Custom feed {feed_id} deleted by {user.id}")

    # ============================================================
    # Discovery
    # ============================================================
    async def tag_list(self) -> List[TagCount]:
        """Every tag used on an event or post, most used first."""
        counts = Counter()
        for tags in await EventRepository(self.db).all_tag_lists():
            counts.update(tags)
        for tags in await PostRepository(self.db).all_tag_lists():
            counts.update(tags)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [TagCount(name=name, count=count) for name, count in ranked]

    async def explore(self, viewer: Optional[User], page: int = 1, limit: int = 10) -> ExploreResponse:
        """
        Active events and posts whose tags avoid the viewer's interest
        tags, merged newest first.
        """
        events = await EventService(self.db).list_events(viewer, page, limit, exclude_user_tags=True)

        exclude_tags = None
        if viewer is not None:
            exclude_tags = await self.user_repo.get_interest_tags(viewer.id)
        posts = await PostService(self.db).list_posts(viewer, page, limit, exclude_tags=exclude_tags)

        items = [ExploreItem(type="event", event=e) for e in events.data]
        items += [ExploreItem(type="post", post=p) for p in posts.data]
        items.sort(key=lambda item: (item.event or item.post).created_at, reverse=True)

        total = events.pagination.total + posts.pagination.total
        return ExploreResponse(data=items[:limit], pagination=Pagination.build(page, limit, total))
