from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from causeconnect.schemas.base import CamelModel, UserSummary


class CommentCreate(CamelModel):
    event_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    content: str = Field(min_length=1, max_length=5000)

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.event_id is None) == (self.post_id is None):
            raise ValueError("Exactly one of eventId or postId is required")
        return self


class CommentRef(CamelModel):
    comment_id: UUID


class CommentResponse(CamelModel):
    id: UUID
    content: str
    author: UserSummary
    event_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    likes: int = 0
    awards: int = 0
    is_liked: bool = False
    is_saved: bool = False
    is_awarded: bool = False
    replies: List["CommentResponse"] = Field(default_factory=list)
    created_at: datetime


class CommentLikeResponse(CamelModel):
    liked: bool
    likes: int


class CommentAwardResponse(CamelModel):
    awarded: bool
    message: Optional[str] = None


class CommentSaveResponse(CamelModel):
    saved: bool
