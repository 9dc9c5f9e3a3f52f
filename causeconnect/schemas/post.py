from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from causeconnect.schemas.base import CamelModel, Pagination, UserSummary
from causeconnect.schemas.event import normalize_tags


class PostCreate(CamelModel):
    content: str = Field(min_length=1, max_length=5000)
    image: Optional[str] = None
    event_id: Optional[UUID] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v):
        return normalize_tags(v)


class PostRef(CamelModel):
    post_id: UUID


class PostEventRef(CamelModel):
    id: UUID
    title: str


class PostResponse(CamelModel):
    id: UUID
    content: str
    image: Optional[str] = None
    tags: List[str]
    author: UserSummary
    event: Optional[PostEventRef] = None
    likes: int
    comments: int
    participants: int
    is_liked: bool = False
    is_bookmarked: bool = False
    is_participating: bool = False
    created_at: datetime


class PostListResponse(CamelModel):
    data: List[PostResponse]
    pagination: Pagination


class PostLikeResponse(CamelModel):
    success: bool = True
    liked: bool
    likes: int


class PostBookmarkResponse(CamelModel):
    bookmarked: bool


class ParticipateResponse(CamelModel):
    participating: bool
    participants: int


class ParticipantResponse(CamelModel):
    user: UserSummary
    joined_at: datetime


class ParticipantListResponse(CamelModel):
    participants: List[ParticipantResponse]
    pagination: Pagination
