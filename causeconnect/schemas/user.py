from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field

from causeconnect.schemas.base import CamelModel, UserSummary


class UserStats(CamelModel):
    followers: int
    following: int
    causes_supported: int
    total_donated: float


class UserProfileResponse(CamelModel):
    id: UUID
    username: str
    name: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    verified: bool
    joined_at: datetime
    is_following: bool
    is_own_profile: bool
    stats: UserStats
    impact_score: int


class UserUpdateRequest(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = Field(None, max_length=500)


class UserSearchResult(CamelModel):
    id: UUID
    username: str
    name: str
    email: str
    avatar: Optional[str] = None
    verified: bool


class FollowRequest(CamelModel):
    user_id: UUID


class FollowResponse(CamelModel):
    is_following: bool
    followers_count: int


# ============================================================
# Settings
# ============================================================

class NotificationSettings(CamelModel):
    donations: Optional[bool] = None
    comments: Optional[bool] = None
    awards: Optional[bool] = None
    mentions: Optional[bool] = None
    new_causes: Optional[bool] = None
    email: Optional[bool] = None
    sms: Optional[bool] = None


class PrivacySettings(CamelModel):
    activity_visibility: Optional[str] = Field(None, pattern="^(public|friends|private)$")


class PersonalizationSettings(CamelModel):
    language: Optional[str] = None
    region: Optional[str] = None
    currency: Optional[str] = None
    theme: Optional[str] = Field(None, pattern="^(light|dark|system)$")
    interest_tags: Optional[List[str]] = None


class SettingsPayload(CamelModel):
    """Used both as the settings-get response and the partial settings-update body."""
    notifications: Optional[NotificationSettings] = None
    privacy: Optional[PrivacySettings] = None
    personalization: Optional[PersonalizationSettings] = None


class BlockRequest(CamelModel):
    user_id: UUID


class BlockedUser(CamelModel):
    id: UUID
    username: str
    name: str
    avatar: Optional[str] = None
    blocked_at: datetime


# ============================================================
# Activity and impact
# ============================================================

class ActivityEventRef(CamelModel):
    id: UUID
    title: str
    image: Optional[str] = None


class ActivityItem(CamelModel):
    type: str  # support, award, follow
    id: UUID
    title: str
    description: str
    timestamp: datetime
    event: Optional[ActivityEventRef] = None
    user: Optional[UserSummary] = None


class ImpactStats(CamelModel):
    total_donated: float
    causes_supported: int
    donation_count: int
