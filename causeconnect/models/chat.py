"""
Chat Models

Conversations are stored as documents: participant lists, the unread
counter map and message reactions live in JSON columns, and are always
replaced wholesale (never mutated in place) so the ORM sees the change.
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, Uuid
from .base import BaseModel


class ConversationType:
    PRIVATE = "private"
    GROUP = "group"


class PresenceStatus:
    ONLINE = "online"
    AWAY = "away"
    BUSY = "busy"
    OFFLINE = "offline"

    ALL = (ONLINE, AWAY, BUSY, OFFLINE)


class Conversation(BaseModel):
    __tablename__ = "chat_conversations"

    type = Column(String(20), default=ConversationType.PRIVATE, nullable=False)
    participants = Column(JSON, nullable=False)             # [user_id, ...]
    unread_counts = Column(JSON, default=dict, nullable=False)  # {user_id: int}
    group_name = Column(String(100), nullable=True)
    group_avatar = Column(String(500), nullable=True)
    squad_id = Column(Uuid(as_uuid=True), ForeignKey("squads.id", ondelete="SET NULL"), nullable=True)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_message = Column(String(255), nullable=True)
    last_sender_id = Column(String(36), nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True)


class ChatMessage(BaseModel):
    __tablename__ = "chat_messages"

    conversation_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("chat_conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    text = Column(Text, nullable=True)
    attachments = Column(JSON, default=list, nullable=False)
    read_by = Column(JSON, default=list, nullable=False)      # [user_id, ...]
    reactions = Column(JSON, default=dict, nullable=False)    # {emoji: [user_id, ...]}
    edited = Column(Boolean, default=False, nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)


class TypingIndicator(BaseModel):
    __tablename__ = "chat_typing"
    __table_args__ = (UniqueConstraint("conversation_id", "user_id", name="uq_chat_typing_pair"),)

    conversation_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("chat_conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


class Presence(BaseModel):
    """One row per user."""
    __tablename__ = "presence"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    status = Column(String(20), default=PresenceStatus.OFFLINE, nullable=False)
    is_online = Column(Boolean, default=False, nullable=False)
    last_seen = Column(DateTime(timezone=True), nullable=True)
