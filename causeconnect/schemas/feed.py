from typing import List, Literal, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from causeconnect.schemas.base import CamelModel, Pagination
from causeconnect.schemas.event import EventResponse, normalize_tags
from causeconnect.schemas.post import PostResponse


# ============================================================
# Custom feeds
# ============================================================

class CustomFeedCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    tags: List[str]

    @field_validator("tags")
    @classmethod
    def require_tags(cls, v):
        v = normalize_tags(v)
        if not v:
            raise ValueError("At least one tag is required")
        return v

    class Config:
        json_schema_extra = {
            "example": {"name": "Clean water", "tags": ["water", "sanitation"]}
        }


class CustomFeedUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def require_tags(cls, v):
        if v is None:
            return v
        v = normalize_tags(v)
        if not v:
            raise ValueError("Tags must be a non-empty list")
        return v


class CustomFeedResponse(CamelModel):
    id: UUID
    name: str
    tags: List[str]
    created_at: datetime
    updated_at: datetime


# ============================================================
# Discovery
# ============================================================

class TagCount(CamelModel):
    name: str
    count: int


class ExploreItem(CamelModel):
    """One discovery entry; exactly one of ``event`` or ``post`` is set."""
    type: Literal["event", "post"]
    event: Optional[EventResponse] = None
    post: Optional[PostResponse] = None


class ExploreResponse(CamelModel):
    data: List[ExploreItem]
    pagination: Pagination
