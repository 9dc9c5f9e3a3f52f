"""
Shared schema pieces.

All API payloads are camelCase on the wire; models accept either the alias
or the Python field name.
"""

import math
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


class UserSummary(CamelModel):
    """Compact user card embedded in events, posts, comments and members."""
    id: UUID
    name: str
    username: str
    avatar: Optional[str] = None
    verified: bool = False

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            name=user.display_name,
            username=user.username,
            avatar=user.avatar,
            verified=user.verified,
        )


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Shape of every error body."""
    message: str
    status: int
    errors: Optional[list] = None
