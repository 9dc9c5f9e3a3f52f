"""
Squad Service

Interest groups with admin / moderator / member roles and their own feed.

Role rules:
- The creator joins as admin.
- Only admins update or delete the squad and manage other members.
- Admins cannot leave; they delete the squad instead.
- Reading and writing the squad feed requires membership.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.exceptions import Forbidden, NotFound, ValidationFailed
from causeconnect.models import (
    Squad,
    SquadComment,
    SquadCommentLike,
    SquadMember,
    SquadPost,
    SquadPostLike,
    SquadRole,
    User,
)
from causeconnect.models.notification import NotificationType
from causeconnect.repositories.squad_repo import SquadRepository
from causeconnect.repositories.toggle_repo import ToggleRepository
from causeconnect.schemas.base import Pagination, UserSummary
from causeconnect.schemas.squad import (
    ManageMemberRequest,
    SquadCommentCreate,
    SquadCommentResponse,
    SquadCreate,
    SquadListResponse,
    SquadMemberResponse,
    SquadPostCreate,
    SquadPostListResponse,
    SquadPostResponse,
    SquadReactionRequest,
    SquadReactionResponse,
    SquadResponse,
    SquadUpdate,
)
from causeconnect.services.notification_service import emit_notification

logger = logging.getLogger(__name__)


class SquadService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.squad_repo = SquadRepository(db)
        self.members = ToggleRepository(SquadMember, "user_id", "squad_id", db)
        self.post_likes = ToggleRepository(SquadPostLike, "user_id", "post_id", db)
        self.comment_likes = ToggleRepository(SquadCommentLike, "user_id", "comment_id", db)

    # ============================================================
    # Helpers
    # ============================================================
    async def _get_squad(self, squad_id: UUID) -> Squad:
        squad = await self.squad_repo.get_by_id(squad_id)
        if not squad:
            raise NotFound("Squad not found")
        return squad

    async def _require_member(self, squad_id: UUID, user: User) -> SquadMember:
        membership = await self.squad_repo.get_membership(squad_id, user.id)
        if not membership:
            raise Forbidden("You are not a member of this squad")
        return membership

    async def _require_admin(self, squad_id: UUID, user: User) -> SquadMember:
        membership = await self.squad_repo.get_membership(squad_id, user.id)
        if not membership or membership.role != SquadRole.ADMIN:
            raise Forbidden("Only squad admins can perform this action")
        return membership

    async def _squad_response(
        self,
        squad: Squad,
        membership: Optional[SquadMember] = None,
        role: Optional[str] = None,
    ) -> SquadResponse:
        role = role or (membership.role if membership else None)
        return SquadResponse(
            id=squad.id,
            name=squad.name,
            description=squad.description,
            avatar=squad.avatar,
            is_private=squad.is_private,
            tags=list(squad.tags or []),
            creator=UserSummary.from_user(squad.creator) if squad.creator else None,
            member_count=await self.squad_repo.count_members(squad.id),
            post_count=await self.squad_repo.count_posts(squad.id),
            is_member=role is not None,
            role=role,
            created_at=squad.created_at,
        )

    # ============================================================
    # Squads
    # ============================================================
    async def list_my_squads(self, user: User) -> SquadListResponse:
        rows = await self.squad_repo.list_for_user(user.id)
        return SquadListResponse(data=[await self._squad_response(squad, role=role) for squad, role in rows])

    async def search(self, user: User, query: Optional[str], page: int = 1, limit: int = 10) -> SquadListResponse:
        squads, total = await self.squad_repo.search_public(query, page, limit)
        data = []
        for squad in squads:
            membership = await self.squad_repo.get_membership(squad.id, user.id)
            data.append(await self._squad_response(squad, membership))
        return SquadListResponse(data=data, pagination=Pagination.build(page, limit, total))

    async def get_detail(self, user: User, squad_id: UUID) -> SquadResponse:
        squad = await self._get_squad(squad_id)
        membership = await self.squad_repo.get_membership(squad.id, user.id)
        return await self._squad_response(squad, membership)

    async def create_squad(self, user: User, data: SquadCreate) -> SquadResponse:
        squad = Squad(
            name=data.name,
            description=data.description,
            avatar=data.avatar,
            is_private=data.is_private,
            tags=data.tags,
            creator_id=user.id,
        )
        self.db.add(squad)
        await self.db.flush()

        self.db.add(SquadMember(squad_id=squad.id, user_id=user.id, role=SquadRole.ADMIN))
        await self.db.commit()
        await self.db.refresh(squad)
        logger.info(f"Squad created: {squad.id} by {user.id}")

        return await self._squad_response(squad, role=SquadRole.ADMIN)

    async def update_squad(self, user: User, squad_id: UUID, data: SquadUpdate) -> SquadResponse:
        squad = await self._get_squad(squad_id)
        membership = await self._require_admin(squad.id, user)

        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(squad, key, value)
        await self.db.commit()
        await self.db.refresh(squad)
        return await self._squad_response(squad, membership)

    async def delete_squad(self, user: User, squad_id: UUID) -> None:
        squad = await self._get_squad(squad_id)
        await self._require_admin(squad.id, user)
        await self.db.delete(squad)
        await self.db.commit()
        logger.info(f"Squad deleted: {squad_id} by {user.id}")

    # ============================================================
    # Membership
    # ============================================================
    async def join(self, user: User, squad_id: UUID) -> SquadResponse:
        """
        Raises:
            NotFound: Unknown squad
            ValidationFailed: Already a member
            Forbidden: Private squad
        """
        squad = await self._get_squad(squad_id)
        if await self.squad_repo.get_membership(squad.id, user.id):
            raise ValidationFailed("Already a member")
        if squad.is_private:
            raise Forbidden("This squad is private")

        if not await self.members.activate(user.id, squad.id, role=SquadRole.MEMBER):
            raise ValidationFailed("Already a member")

        await emit_notification(
            self.db,
            recipient_id=squad.creator_id,
            actor_id=user.id,
            notification_type=NotificationType.SYSTEM,
            title="New Squad Member",
            message=f'{user.display_name} joined your squad "{squad.name}"',
            action_url=f"/squads/{squad.id}",
        )
        return await self._squad_response(squad, role=SquadRole.MEMBER)

    async def leave(self, user: User, squad_id: UUID) -> None:
        squad = await self._get_squad(squad_id)
        membership = await self.squad_repo.get_membership(squad.id, user.id)
        if not membership:
            raise ValidationFailed("Not a member of this squad")
        if membership.role == SquadRole.ADMIN:
            raise ValidationFailed("Admins cannot leave. Delete the squad instead.")

        await self.db.delete(membership)
        await self.db.commit()

    async def list_members(self, squad_id: UUID) -> List[SquadMemberResponse]:
        squad = await self._get_squad(squad_id)
        return [
            SquadMemberResponse(user=UserSummary.from_user(m.user), role=m.role, joined_at=m.created_at)
            for m in await self.squad_repo.list_members(squad.id)
        ]

    async def _managed_member(self, user: User, squad_id: UUID, member_id: UUID) -> SquadMember:
        await self._get_squad(squad_id)
        await self._require_admin(squad_id, user)
        if member_id == user.id:
            raise ValidationFailed("Cannot manage your own role. Transfer admin first.")
        member = await self.squad_repo.get_membership(squad_id, member_id)
        if not member:
            raise NotFound("Member not found")
        return member

    async def change_role(self, user: User, data: ManageMemberRequest) -> SquadMemberResponse:
        member = await self._managed_member(user, data.squad_id, data.user_id)
        member.role = data.role
        await self.db.commit()
        logger.info(f"Squad {data.squad_id}: {data.user_id} is now {data.role}")
        return SquadMemberResponse(user=UserSummary.from_user(member.user), role=member.role, joined_at=member.created_at)

    async def remove_member(self, user: User, squad_id: UUID, member_id: UUID) -> None:
        member = await self._managed_member(user, squad_id, member_id)
        await self.db.delete(member)
        await self.db.commit()

    # ============================================================
    # Feed
    # ============================================================
    async def list_posts(self, user: User, squad_id: UUID, page: int = 1, limit: int = 10) -> SquadPostListResponse:
        squad = await self._get_squad(squad_id)
        await self._require_member(squad.id, user)

        posts, total = await self.squad_repo.list_posts(squad.id, page, limit)
        ids = [p.id for p in posts]
        likes = await self.post_likes.counts_for_targets(ids)
        comments = await self.squad_repo.comment_counts(ids)
        liked = await self.post_likes.targets_for_actor(user.id, ids)

        return SquadPostListResponse(
            data=[
                SquadPostResponse(
                    id=p.id,
                    squad_id=p.squad_id,
                    content=p.content,
                    image=p.image,
                    author=UserSummary.from_user(p.author),
                    likes=likes.get(p.id, 0),
                    comments=comments.get(p.id, 0),
                    is_liked=p.id in liked,
                    created_at=p.created_at,
                )
                for p in posts
            ],
            pagination=Pagination.build(page, limit, total),
        )

    async def create_post(self, user: User, data: SquadPostCreate) -> SquadPostResponse:
        squad = await self._get_squad(data.squad_id)
        await self._require_member(squad.id, user)

        post = SquadPost(squad_id=squad.id, author_id=user.id, content=data.content, image=data.image)
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)
        return SquadPostResponse(
            id=post.id,
            squad_id=post.squad_id,
            content=post.content,
            image=post.image,
            author=UserSummary.from_user(post.author),
            created_at=post.created_at,
        )

    async def _get_post_for_member(self, user: User, post_id: UUID) -> SquadPost:
        post = await self.squad_repo.get_post(post_id)
        if not post:
            raise NotFound("Post not found")
        await self._require_member(post.squad_id, user)
        return post

    async def list_comments(self, user: User, post_id: UUID) -> List[SquadCommentResponse]:
        post = await self._get_post_for_member(user, post_id)
        comments = await self.squad_repo.list_comments(post.id)
        ids = [c.id for c in comments]
        likes = await self.comment_likes.counts_for_targets(ids)
        liked = await self.comment_likes.targets_for_actor(user.id, ids)
        return [
            SquadCommentResponse(
                id=c.id,
                post_id=c.post_id,
                parent_id=c.parent_id,
                content=c.content,
                author=UserSummary.from_user(c.author),
                likes=likes.get(c.id, 0),
                is_liked=c.id in liked,
                created_at=c.created_at,
            )
            for c in comments
        ]

    async def create_comment(self, user: User, data: SquadCommentCreate) -> SquadCommentResponse:
        post = await self._get_post_for_member(user, data.post_id)

        if data.parent_id:
            parent = await self.squad_repo.get_comment(data.parent_id)
            if not parent or parent.post_id != post.id:
                raise NotFound("Parent comment not found")

        comment = SquadComment(post_id=post.id, author_id=user.id, parent_id=data.parent_id, content=data.content)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        return SquadCommentResponse(
            id=comment.id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=UserSummary.from_user(comment.author),
            created_at=comment.created_at,
        )

    async def toggle_reaction(self, user: User, data: SquadReactionRequest) -> SquadReactionResponse:
        if data.squad_post_id:
            post = await self._get_post_for_member(user, data.squad_post_id)
            liked = await self.post_likes.toggle(user.id, post.id)
            return SquadReactionResponse(liked=liked, likes=await self.post_likes.count_for_target(post.id))

        comment = await self.squad_repo.get_comment(data.comment_id)
        if not comment:
            raise NotFound("Comment not found")
        await self._get_post_for_member(user, comment.post_id)
        liked = await self.comment_likes.toggle(user.id, comment.id)
        return SquadReactionResponse(liked=liked, likes=await self.comment_likes.count_for_target(comment.id))
