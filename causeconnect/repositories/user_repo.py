"""
User Repository

Data access layer for User, UserSettings, Follow and Block, plus the
per-user activity timeline.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_, and_, func

from causeconnect.repositories.base import BaseRepository
from causeconnect.models import (
    Block,
    Comment,
    CommentAward,
    Event,
    EventSupport,
    Follow,
    User,
    UserSettings,
)


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================
    # Lookups
    # =================
    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def search(self, query: str, limit: int = 10) -> List[User]:
        """Case-insensitive match on username, email or either name part."""
        pattern = f"%{query.lower()}%"
        full_name = func.lower(User.first_name + " " + User.last_name)
        result = await self.db.execute(
            select(User)
            .where(
                User.is_active == True,
                or_(
                    func.lower(User.username).like(pattern),
                    func.lower(User.email).like(pattern),
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    full_name.like(pattern),
                ),
            )
            .order_by(User.username)
            .limit(limit)
        )
        return list(result.scalars().all())

    # =================
    # Create user
    # =================
    async def create_user(
        self,
        email: str,
        username: str,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """Create a user together with their default settings row."""
        user = User(
            email=email.lower(),
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        self.db.add(user)
        await self.db.flush()

        self.db.add(UserSettings(user_id=user.id, interest_tags=[]))
        await self.db.commit()
        await self.db.refresh(user)
        return user

    # =================
    # Settings
    # =================
    async def get_or_create_settings(self, user_id) -> UserSettings:
        result = await self.db.execute(
            select(UserSettings).where(UserSettings.user_id == user_id)
        )
        user_settings = result.scalar_one_or_none()
        if user_settings is None:
            user_settings = UserSettings(user_id=user_id, interest_tags=[])
            self.db.add(user_settings)
            await self.db.commit()
            await self.db.refresh(user_settings)
        return user_settings

    async def get_interest_tags(self, user_id) -> List[str]:
        result = await self.db.execute(
            select(UserSettings.interest_tags).where(UserSettings.user_id == user_id)
        )
        return list(result.scalar_one_or_none() or [])

    # =================
    # Follows
    # =================
    async def count_followers(self, user_id) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
        )
        return result.scalar() or 0

    async def count_following(self, user_id) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
        )
        return result.scalar() or 0

    async def remove_follows_between(self, user_a, user_b) -> None:
        """Drop follows in both directions; the caller commits."""
        await self.db.execute(
            delete(Follow).where(
                or_(
                    and_(Follow.follower_id == user_a, Follow.following_id == user_b),
                    and_(Follow.follower_id == user_b, Follow.following_id == user_a),
                )
            )
        )

    # =================
    # Blocks
    # =================
    async def is_blocked_between(self, user_a, user_b) -> bool:
        """True if either user has blocked the other."""
        result = await self.db.execute(
            select(Block.id).where(
                or_(
                    and_(Block.blocker_id == user_a, Block.blocked_id == user_b),
                    and_(Block.blocker_id == user_b, Block.blocked_id == user_a),
                )
            )
        )
        return result.first() is not None

    async def list_blocked(self, blocker_id) -> List[tuple]:
        """(Block, User) pairs for users blocked by ``blocker_id``, newest first."""
        result = await self.db.execute(
            select(Block, User)
            .join(User, User.id == Block.blocked_id)
            .where(Block.blocker_id == blocker_id)
            .order_by(Block.created_at.desc())
        )
        return list(result.all())

    # =================
    # Activity
    # =================
    async def recent_supports(self, user_id, limit: int) -> List[tuple]:
        """(supported_at, Event) pairs, newest first."""
        result = await self.db.execute(
            select(EventSupport.created_at, Event)
            .join(Event, Event.id == EventSupport.event_id)
            .where(EventSupport.user_id == user_id)
            .order_by(EventSupport.created_at.desc())
            .limit(limit)
        )
        return [tuple(row) for row in result.all()]

    async def recent_awards(self, user_id, limit: int) -> List[tuple]:
        """(awarded_at, Comment, Event or None) for comments the user awarded."""
        result = await self.db.execute(
            select(CommentAward.created_at, Comment, Event)
            .join(Comment, Comment.id == CommentAward.comment_id)
            .outerjoin(Event, Event.id == Comment.event_id)
            .where(CommentAward.user_id == user_id)
            .order_by(CommentAward.created_at.desc())
            .limit(limit)
        )
        return [tuple(row) for row in result.all()]

    async def recent_follows(self, user_id, limit: int) -> List[tuple]:
        """(followed_at, User) for users this user started following."""
        result = await self.db.execute(
            select(Follow.created_at, User)
            .join(User, User.id == Follow.following_id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc())
            .limit(limit)
        )
        return [tuple(row) for row in result.all()]
