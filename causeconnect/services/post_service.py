"""
Post Service

Feed posts and their like, bookmark and participate toggles.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import Forbidden, NotFound
from causeconnect.models import Post, PostBookmark, PostLike, PostParticipant, User
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.event_repo import EventRepository
from causeconnect.repositories.post_repo import PostRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.schemas.base import Pagination, UserSummary
from causeconnect.schemas.post import (
    ParticipantListResponse,
    ParticipantResponse,
    ParticipateResponse,
    PostBookmarkResponse,
    PostCreate,
    PostEventRef,
    PostLikeResponse,
    PostListResponse,
    PostResponse,
)
from causeconnect.services.notification_service import emit_notification

logger = logging.getLogger(__name__)


class PostService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.post_repo = PostRepository(db)
        self.event_repo = EventRepository(db)
        self.likes = ToggleRepository(PostLike, "user_id", "post_id", db)
        self.bookmarks = ToggleRepository(PostBookmark, "user_id", "post_id", db)
        self.participants = ToggleRepository(PostParticipant, "user_id", "post_id", db)

    async def _to_responses(self, posts: List[Post], viewer: Optional[User]) -> List[PostResponse]:
        ids = [p.id for p in posts]
        likes = await self.likes.counts_for_targets(ids)
        participants = await self.participants.counts_for_targets(ids)
        comments = await self.post_repo.comment_counts(ids)

        liked = bookmarked = participating = set()
        if viewer:
            liked = await self.likes.targets_for_actor(viewer.id, ids)
            bookmarked = await self.bookmarks.targets_for_actor(viewer.id, ids)
            participating = await self.participants.targets_for_actor(viewer.id, ids)

        return [
            PostResponse(
                id=p.id,
                content=p.content,
                image=p.image,
                tags=list(p.tags or []),
                author=UserSummary.from_user(p.author),
                event=PostEventRef(id=p.event.id, title=p.event.title) if p.event else None,
                likes=likes.get(p.id, 0),
                comments=comments.get(p.id, 0),
                participants=participants.get(p.id, 0),
                is_liked=p.id in liked,
                is_bookmarked=p.id in bookmarked,
                is_participating=p.id in participating,
                created_at=p.created_at,
            )
            for p in posts
        ]

    async def _get_post(self, post_id: UUID) -> Post:
        post = await self.post_repo.get_by_id(post_id)
        if not post:
            raise NotFound("Post not found")
        return post

    # ============================================================
    # CRUD
    # ============================================================
    async def list_posts(
        self,
        viewer: Optional[User],
        page: int = 1,
        limit: int = 10,
        author_id: Optional[UUID] = None,
        event_id: Optional[UUID] = None,
        exclude_tags: Optional[List[str]] = None,
    ) -> PostListResponse:
        posts, total = await self.post_repo.list_posts(page, limit, author_id, event_id, exclude_tags)
        return PostListResponse(
            data=await self._to_responses(posts, viewer),
            pagination=Pagination.build(page, limit, total),
        )

    async def list_bookmarked(self, user: User, page: int = 1, limit: int = 10) -> PostListResponse:
        posts, total = await self.post_repo.list_bookmarked(user.id, page, limit)
        return PostListResponse(
            data=await self._to_responses(posts, user),
            pagination=Pagination.build(page, limit, total),
        )

    async def get_detail(self, post_id: UUID, viewer: Optional[User]) -> PostResponse:
        post = await self._get_post(post_id)
        [response] = await self._to_responses([post], viewer)
        return response

    async def create_post(self, user: User, data: PostCreate) -> PostResponse:
        if data.event_id and not await self.event_repo.get_by_id(data.event_id):
            raise NotFound("Event not found")

        post = await self.post_repo.create(
            author_id=user.id,
            content=data.content,
            image=data.image,
            event_id=data.event_id,
            tags=data.tags,
        )
        logger.info(f"Post created: {post.id} by {user.id}")
        [response] = await self._to_responses([post], user)
        return response

    async def delete_post(self, user: User, post_id: UUID) -> None:
        post = await self._get_post(post_id)
        if post.author_id != user.id:
            raise Forbidden("Only the author can delete this post")
        await self.db.delete(post)
        await self.db.commit()

    # ============================================================
    # Toggles
    # ============================================================
    async def toggle_like(self, user: User, post_id: UUID) -> PostLikeResponse:
        post = await self._get_post(post_id)
        liked = await self.likes.toggle(user.id, post.id)

        if liked:
            await emit_notification(
                self.db,
                recipient_id=post.author_id,
                actor_id=user.id,
                notification_type=NotificationType.LIKE,
                title="Post Liked",
                message=f"{user.display_name} liked your post",
                action_url="/feed",
            )

        return PostLikeResponse(liked=liked, likes=await self.likes.count_for_target(post.id))

    async def unlike(self, user: User, post_id: UUID) -> PostLikeResponse:
        """Remove the like if present. Idempotent."""
        post = await self._get_post(post_id)
        await self.likes.deactivate(user.id, post.id)
        return PostLikeResponse(liked=False, likes=await self.likes.count_for_target(post.id))

    async def toggle_bookmark(self, user: User, post_id: UUID) -> PostBookmarkResponse:
        post = await self._get_post(post_id)
        return PostBookmarkResponse(bookmarked=await self.bookmarks.toggle(user.id, post.id))

    async def toggle_participate(self, user: User, post_id: UUID) -> ParticipateResponse:
        post = await self._get_post(post_id)
        participating = await self.participants.toggle(user.id, post.id)

        if participating:
            await emit_notification(
                self.db,
                recipient_id=post.author_id,
                actor_id=user.id,
                notification_type=NotificationType.SUPPORT,
                title="New Participant",
                message=f"{user.display_name} is participating in your post",
                action_url="/feed",
            )

        return ParticipateResponse(
            participating=participating,
            participants=await self.participants.count_for_target(post.id),
        )

    async def list_participants(self, post_id: UUID, page: int = 1, limit: int = 20) -> ParticipantListResponse:
        post = await self._get_post(post_id)
        rows, total = await self.post_repo.list_participants(post.id, page, limit)
        return ParticipantListResponse(
            participants=[
                ParticipantResponse(user=UserSummary.from_user(row.user), joined_at=row.created_at)
                for row in rows
            ],
            pagination=Pagination.build(page, limit, total),
        )
