from sqlalchemy import Column, String, Text, Boolean, ForeignKey, JSON, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class SquadRole:
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"

    ALL = (ADMIN, MODERATOR, MEMBER)


class Squad(BaseModel):
    __tablename__ = "squads"

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    avatar = Column(String(500), nullable=True)
    is_private = Column(Boolean, default=False, nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    creator = relationship("User", lazy="joined")


class SquadMember(BaseModel):
    """created_at doubles as the joined-at timestamp."""
    __tablename__ = "squad_members"
    __table_args__ = (UniqueConstraint("squad_id", "user_id", name="uq_squad_members_pair"),)

    squad_id = Column(Uuid(as_uuid=True), ForeignKey("squads.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), default=SquadRole.MEMBER, nullable=False)

    user = relationship("User", lazy="joined")


class SquadPost(BaseModel):
    __tablename__ = "squad_posts"

    squad_id = Column(Uuid(as_uuid=True), ForeignKey("squads.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)

    author = relationship("User", lazy="joined")


class SquadComment(BaseModel):
    __tablename__ = "squad_comments"

    post_id = Column(Uuid(as_uuid=True), ForeignKey("squad_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("squad_comments.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)

    author = relationship("User", lazy="joined")


class SquadPostLike(BaseModel):
    __tablename__ = "squad_post_likes"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_squad_post_likes_pair"),)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("squad_posts.id", ondelete="CASCADE"), nullable=False, index=True)


class SquadCommentLike(BaseModel):
    __tablename__ = "squad_comment_likes"
    __table_args__ = (UniqueConstraint("user_id", "comment_id", name="uq_squad_comment_likes_pair"),)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    comment_id = Column(Uuid(as_uuid=True), ForeignKey("squad_comments.id", ondelete="CASCADE"), nullable=False, index=True)
