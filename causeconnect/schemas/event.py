from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from causeconnect.schemas.base import CamelModel, Pagination, UserSummary


def normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order."""
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


# ============================================================
# Requests
# ============================================================

class EventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    goal_amount: Optional[float] = Field(None, gt=0)
    end_date: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v):
        return normalize_tags(v)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Clean water for Kibera",
                "description": "Funding two new boreholes.",
                "tags": ["water", "health"],
                "goalAmount": 5000,
            }
        }


class EventUpdateRequest(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    tags: Optional[List[str]] = None
    location: Optional[str] = None
    goal_amount: Optional[float] = Field(None, gt=0)
    end_date: Optional[datetime] = None
    status: Optional[str] = Field(None, pattern="^(active|completed|cancelled)$")

    @field_validator("tags")
    @classmethod
    def lowercase_tags(cls, v):
        return normalize_tags(v)


class EventUpdatePostCreate(CamelModel):
    event_id: UUID
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class EventRef(CamelModel):
    event_id: UUID


# ============================================================
# Responses
# ============================================================

class EventResponse(CamelModel):
    id: UUID
    title: str
    description: str
    image: Optional[str] = None
    tags: List[str]
    location: Optional[str] = None
    goal_amount: Optional[float] = None
    raised_amount: float
    status: str
    supporters: int
    time_left: Optional[str] = None
    end_date: Optional[datetime] = None
    is_supported: bool = False
    is_bookmarked: bool = False
    organizer: UserSummary
    created_at: datetime


class EventUpdateResponse(CamelModel):
    id: UUID
    title: str
    content: str
    created_at: datetime


class EventDetailResponse(EventResponse):
    updates: List[EventUpdateResponse] = Field(default_factory=list)
    donations_count: int = 0


class EventListResponse(CamelModel):
    data: List[EventResponse]
    pagination: Pagination


class SupportResponse(CamelModel):
    is_supported: bool
    supporters: int


class BookmarkResponse(CamelModel):
    bookmarked: bool


class EventAnalytics(CamelModel):
    supporters: int
    bookmarks: int
    donations: int
    donors: int
    total_raised: float


class EventAnalyticsResponse(CamelModel):
    analytics: EventAnalytics
