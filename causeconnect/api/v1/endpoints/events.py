from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.event import (
    BookmarkResponse,
    EventCreate,
    EventAnalyticsResponse,
    EventDetailResponse,
    EventListResponse,
    EventRef,
    EventResponse,
    EventUpdatePostCreate,
    EventUpdateRequest,
    EventUpdateResponse,
    SupportResponse,
)
from causeconnect.schemas.post import ParticipantListResponse
from causeconnect.services.event_service import EventService
from causeconnect.api.deps import get_current_user, get_optional_user

router = APIRouter(tags=["Events"])


def _split_tags(tags: Optional[str]):
    if not tags:
        return None
    return [t.strip().lower() for t in tags.split(",") if t.strip()] or None


# ============================================================
# Read paths
# ============================================================

@router.get("/event-list", response_model=EventListResponse)
async def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    tags: Optional[str] = Query(None, description="Comma separated; matches any"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    exclude_user: Optional[UUID] = Query(None, alias="excludeUser"),
    require_user_tags: bool = Query(False, alias="requireUserTags"),
    exclude_user_tags: bool = Query(False, alias="excludeUserTags"),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Active events, newest first. Events the caller passed on are hidden.
    """
    return await EventService(db).list_events(
        viewer,
        page=page,
        limit=limit,
        search=search,
        tags=_split_tags(tags),
        organizer_id=user_id,
        exclude_organizer_id=exclude_user,
        require_user_tags=require_user_tags,
        exclude_user_tags=exclude_user_tags,
    )


@router.get(
    "/event-detail",
    response_model=EventDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Event not found"}}
)
async def get_event(
    id: UUID = Query(...),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).get_detail(id, viewer)


@router.get("/event-bookmarked", response_model=EventListResponse)
async def list_bookmarked_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).list_bookmarked(current_user, page, limit)


@router.get(
    "/event-participants",
    response_model=ParticipantListResponse,
    responses={404: {"model": ErrorResponse, "description": "Event not found"}}
)
async def list_event_participants(
    event_id: UUID = Query(..., alias="eventId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).list_participants(event_id, page, limit)


@router.get(
    "/event-analytics",
    response_model=EventAnalyticsResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not the organizer"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    }
)
async def get_event_analytics(
    event_id: UUID = Query(..., alias="eventId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).analytics(current_user, event_id)


# ============================================================
# Organizer operations
# ============================================================

@router.post("/event-create", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).create_event(current_user, data)


@router.patch(
    "/event-update",
    response_model=EventResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not the organizer"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    }
)
async def update_event(
    data: EventUpdateRequest,
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).update_event(current_user, id, data)


@router.delete("/event-delete", response_model=SuccessResponse)
async def delete_event(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await EventService(db).delete_event(current_user, id)
    return SuccessResponse(message="Event deleted")


@router.post("/event-update-post", response_model=EventUpdateResponse, status_code=status.HTTP_201_CREATED)
async def post_event_update(
    data: EventUpdatePostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add a progress update to the caller's event."""
    return await EventService(db).add_update(current_user, data)


# ============================================================
# Support / pass and bookmarks
# ============================================================

@router.post("/event-support", response_model=SupportResponse)
async def toggle_support(
    data: EventRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Support the event, or withdraw support (recording a pass)."""
    return await EventService(db).toggle_support(current_user, data.event_id)


@router.delete("/event-unsupport", response_model=SupportResponse)
async def unsupport(
    event_id: UUID = Query(..., alias="eventId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).unsupport(current_user, event_id)


@router.post("/event-bookmark", response_model=BookmarkResponse)
async def toggle_bookmark(
    data: EventRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).toggle_bookmark(current_user, data.event_id)


@router.delete("/event-unbookmark", response_model=BookmarkResponse)
async def unbookmark(
    event_id: UUID = Query(..., alias="eventId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await EventService(db).unbookmark(current_user, event_id)
