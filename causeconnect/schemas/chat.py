from typing import Dict, List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from causeconnect.schemas.base import CamelModel


class Attachment(CamelModel):
    url: str
    name: str
    size: int
    mime_type: str
    type: str = Field(pattern="^(image|video|audio|file)$")


# ============================================================
# Requests
# ============================================================

class ConversationCreate(CamelModel):
    """
    Either ``participantId`` (private chat) or ``participants`` with
    ``type="group"``.
    """
    participant_id: Optional[UUID] = None
    participants: Optional[List[UUID]] = None
    type: str = Field("private", pattern="^(private|group)$")
    group_name: Optional[str] = Field(None, max_length=100)
    group_avatar: Optional[str] = None
    squad_id: Optional[UUID] = None

    @model_validator(mode="after")
    def check_shape(self):
        if self.type == "private" and self.participant_id is None:
            raise ValueError("participantId is required for a private conversation")
        if self.type == "group" and not self.participants:
            raise ValueError("participants are required for a group conversation")
        return self


class MessageCreate(CamelModel):
    conversation_id: UUID
    text: Optional[str] = Field(None, max_length=5000)
    attachments: List[Attachment] = Field(default_factory=list)


class TypingRequest(CamelModel):
    conversation_id: UUID
    is_typing: bool


class ReactionRequest(CamelModel):
    message_id: UUID
    emoji: str = Field(min_length=1, max_length=16)


class MessageEditRequest(CamelModel):
    message_id: UUID
    text: str = Field(min_length=1, max_length=5000)


class PresenceUpdate(CamelModel):
    status: str = Field(pattern="^(online|away|busy|offline)$")


# ============================================================
# Responses
# ============================================================

class ConversationResponse(CamelModel):
    id: UUID
    type: str
    participants: List[str]
    group_name: Optional[str] = None
    group_avatar: Optional[str] = None
    squad_id: Optional[UUID] = None
    last_message: Optional[str] = None
    last_sender_id: Optional[str] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0
    created_at: datetime
    updated_at: datetime


class MessageResponse(CamelModel):
    id: UUID
    conversation_id: UUID
    sender_id: Optional[UUID] = None
    text: Optional[str] = None
    attachments: List[dict] = Field(default_factory=list)
    read_by: List[str] = Field(default_factory=list)
    reactions: Dict[str, List[str]] = Field(default_factory=dict)
    edited: bool = False
    deleted: bool = False
    created_at: datetime


class ReadReceiptResponse(CamelModel):
    success: bool = True
    updated: int


class TypingUser(CamelModel):
    user_id: UUID
    updated_at: datetime


class PresenceResponse(CamelModel):
    user_id: UUID
    status: str
    is_online: bool
    last_seen: Optional[datetime] = None
