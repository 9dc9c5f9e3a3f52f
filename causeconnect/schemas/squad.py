from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from causeconnect.schemas.base import CamelModel, Pagination, UserSummary
from causeconnect.schemas.event import normalize_tags


# ============================================================
# Requests
# ============================================================

class SquadCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    avatar: Optional[str] = None
    is_private: bool = False
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v):
        return normalize_tags(v)


class SquadUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    avatar: Optional[str] = None
    is_private: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v):
        return normalize_tags(v)


class SquadRef(CamelModel):
    squad_id: UUID


class ManageMemberRequest(CamelModel):
    squad_id: UUID
    user_id: UUID
    role: str = Field(pattern="^(admin|moderator|member)$")


class SquadPostCreate(CamelModel):
    squad_id: UUID
    content: str = Field(min_length=1, max_length=5000)
    image: Optional[str] = None


class SquadCommentCreate(CamelModel):
    post_id: UUID
    content: str = Field(min_length=1, max_length=5000)
    parent_id: Optional[UUID] = None


class SquadReactionRequest(CamelModel):
    squad_post_id: Optional[UUID] = None
    comment_id: Optional[UUID] = None

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.squad_post_id is None) == (self.comment_id is None):
            raise ValueError("Exactly one of squadPostId or commentId is required")
        return self


# ============================================================
# Responses
# ============================================================

class SquadResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    avatar: Optional[str] = None
    is_private: bool
    tags: List[str]
    creator: Optional[UserSummary] = None
    member_count: int = 0
    post_count: int = 0
    is_member: bool = False
    role: Optional[str] = None
    created_at: datetime


class SquadListResponse(CamelModel):
    data: List[SquadResponse]
    pagination: Optional[Pagination] = None


class SquadMemberResponse(CamelModel):
    user: UserSummary
    role: str
    joined_at: datetime


class SquadPostResponse(CamelModel):
    id: UUID
    squad_id: UUID
    content: str
    image: Optional[str] = None
    author: UserSummary
    likes: int = 0
    comments: int = 0
    is_liked: bool = False
    created_at: datetime


class SquadPostListResponse(CamelModel):
    data: List[SquadPostResponse]
    pagination: Pagination


class SquadCommentResponse(CamelModel):
    id: UUID
    post_id: UUID
    parent_id: Optional[UUID] = None
    content: str
    author: UserSummary
    likes: int = 0
    is_liked: bool = False
    created_at: datetime


class SquadReactionResponse(CamelModel):
    liked: bool
    likes: int
