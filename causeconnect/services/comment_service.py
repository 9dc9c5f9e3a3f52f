"""
Comment Service

Threaded comments on events and posts, with like, save and award.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import Forbidden, NotFound, ValidationFailed
from causeconnect.models import Comment, CommentAward, CommentLike, CommentSave, User
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.comment_repo import CommentRepository
from causeconnect.repositories.event_repo import EventRepository
from causeconnect.repositories.post_repo import PostRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.schemas.base import UserSummary
from causeconnect.schemas.comment import (
    CommentAwardResponse,
    CommentCreate,
    CommentLikeResponse,
    CommentResponse,
    CommentSaveResponse,
)
from causeconnect.services.notification_service import emit_notification

logger = logging.getLogger(__name__)


def comment_link(comment: Comment) -> str:
    return f"/event/{comment.event_id}" if comment.event_id else "/feed"


class CommentService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.comment_repo = CommentRepository(db)
        self.event_repo = EventRepository(db)
        self.post_repo = PostRepository(db)
        self.likes = ToggleRepository(CommentLike, "user_id", "comment_id", db)
        self.saves = ToggleRepository(CommentSave, "user_id", "comment_id", db)
        self.awards = ToggleRepository(CommentAward, "user_id", "comment_id", db)

    async def _get_comment(self, comment_id: UUID) -> Comment:
        comment = await self.comment_repo.get_by_id(comment_id)
        if not comment:
            raise NotFound("Comment not found")
        return comment

    async def _to_responses(self, comments: List[Comment], viewer: Optional[User]) -> Dict[UUID, CommentResponse]:
        ids = [c.id for c in comments]
        likes = await self.likes.counts_for_targets(ids)
        awards = await self.awards.counts_for_targets(ids)

        liked = saved = awarded = set()
        if viewer:
            liked = await self.likes.targets_for_actor(viewer.id, ids)
            saved = await self.saves.targets_for_actor(viewer.id, ids)
            awarded = await self.awards.targets_for_actor(viewer.id, ids)

        return {
            c.id: CommentResponse(
                id=c.id,
                content=c.content,
                author=UserSummary.from_user(c.author),
                event_id=c.event_id,
                post_id=c.post_id,
                parent_id=c.parent_id,
                likes=likes.get(c.id, 0),
                awards=awards.get(c.id, 0),
                is_liked=c.id in liked,
                is_saved=c.id in saved,
                is_awarded=c.id in awarded,
                created_at=c.created_at,
            )
            for c in comments
        }

    # ============================================================
    # Read
    # ============================================================
    async def list_comments(
        self,
        viewer: Optional[User],
        event_id: Optional[UUID] = None,
        post_id: Optional[UUID] = None,
    ) -> List[CommentResponse]:
        """
        Comment tree for one event or post.

        Top-level comments come newest first; replies under each comment
        stay in posting order.
        """
        if (event_id is None) == (post_id is None):
            raise ValidationFailed("Exactly one of eventId or postId is required")

        comments = await self.comment_repo.list_for_target(event_id=event_id, post_id=post_id)
        by_id = await self._to_responses(comments, viewer)

        roots = []
        # comments arrive oldest first, so replies append in posting order
        for comment in comments:
            node = by_id[comment.id]
            parent = by_id.get(comment.parent_id) if comment.parent_id else None
            if parent is not None:
                parent.replies.append(node)
            else:
                roots.append(node)

        roots.reverse()
        return roots

    # ============================================================
    # Create / delete
    # ============================================================
    async def create_comment(self, user: User, data: CommentCreate) -> CommentResponse:
        """
        Raises:
            NotFound: Unknown event, post or parent comment
            ValidationFailed: Parent belongs to a different event or post
        """
        if data.event_id:
            event = await self.event_repo.get_by_id(data.event_id)
            if not event:
                raise NotFound("Event not found")
            owner_id = event.organization_id
            target_label = f'your event "{event.title}"'
        else:
            post = await self.post_repo.get_by_id(data.post_id)
            if not post:
                raise NotFound("Post not found")
            owner_id = post.author_id
            target_label = "your post"

        if data.parent_id:
            parent = await self.comment_repo.get_by_id(data.parent_id)
            if not parent:
                raise NotFound("Parent comment not found")
            if parent.event_id != data.event_id or parent.post_id != data.post_id:
                raise ValidationFailed("Parent comment belongs to a different thread")

        comment = await self.comment_repo.create(
            author_id=user.id,
            event_id=data.event_id,
            post_id=data.post_id,
            parent_id=data.parent_id,
            content=data.content,
        )

        await emit_notification(
            self.db,
            recipient_id=owner_id,
            actor_id=user.id,
            notification_type=NotificationType.COMMENT,
            title="New Comment",
            message=f"{user.display_name} commented on {target_label}",
            action_url=comment_link(comment),
        )

        return (await self._to_responses([comment], user))[comment.id]

    async def delete_comment(self, user: User, comment_id: UUID) -> None:
        """Delete the comment and, through the parent foreign key, its replies."""
        comment = await self._get_comment(comment_id)
        if comment.author_id != user.id:
            raise Forbidden("Only the author can delete this comment")
        await self.db.delete(comment)
        await self.db.commit()

    # ============================================================
    # Reactions
    # ============================================================
    async def toggle_like(self, user: User, comment_id: UUID) -> CommentLikeResponse:
        comment = await self._get_comment(comment_id)
        liked = await self.likes.toggle(user.id, comment.id)

        if liked:
            await emit_notification(
                self.db,
                recipient_id=comment.author_id,
                actor_id=user.id,
                notification_type=NotificationType.LIKE,
                title="Comment Liked",
                message=f"{user.display_name} liked your comment",
                action_url=comment_link(comment),
            )

        return CommentLikeResponse(liked=liked, likes=await self.likes.count_for_target(comment.id))

    async def award(self, user: User, comment_id: UUID) -> CommentAwardResponse:
        """
        One-way award. Repeating it is a no-op.

        Raises:
            ValidationFailed: Awarding your own comment
        """
        comment = await self._get_comment(comment_id)
        if comment.author_id == user.id:
            raise ValidationFailed("You cannot award your own comment")

        if not await self.awards.activate(user.id, comment.id):
            return CommentAwardResponse(awarded=True, message="Already awarded")

        await emit_notification(
            self.db,
            recipient_id=comment.author_id,
            actor_id=user.id,
            notification_type=NotificationType.AWARD,
            title="Comment Awarded",
            message=f"{user.display_name} awarded your comment",
            action_url=comment_link(comment),
        )
        return CommentAwardResponse(awarded=True)

    async def toggle_save(self, user: User, comment_id: UUID) -> CommentSaveResponse:
        comment = await self._get_comment(comment_id)
        return CommentSaveResponse(saved=await self.saves.toggle(user.id, comment.id))
