"""
Custom Feed and Discovery Endpoints

- POST   /custom-feed-create     - Save a named tag feed
- GET    /custom-feed-list       - The caller's feeds, newest first
- GET    /custom-feed-detail     - One feed
- PUT    /custom-feed-update     - Rename or retag a feed
- DELETE /custom-feed-delete     - Remove a feed
- GET    /tag-list               - Tags in use with their counts
- GET    /explore-content        - Events and posts outside the viewer's interests
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.feed import (
    CustomFeedCreate,
    CustomFeedResponse,
    CustomFeedUpdate,
    ExploreResponse,
    TagCount,
)
from causeconnect.services.feed_service import FeedService
from causeconnect.api.deps import get_current_user, get_optional_user

router = APIRouter(tags=["Feeds"])

FEED_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Custom feed not found"}}


@router.post("/custom-feed-create", response_model=CustomFeedResponse, status_code=status.HTTP_201_CREATED)
async def create_feed(
    data: CustomFeedCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).create_feed(current_user, data)


@router.get("/custom-feed-list", response_model=List[CustomFeedResponse])
async def list_feeds(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).list_feeds(current_user)


@router.get("/custom-feed-detail", response_model=CustomFeedResponse, responses=FEED_NOT_FOUND)
async def get_feed(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).get_feed(current_user, id)


@router.put("/custom-feed-update", response_model=CustomFeedResponse, responses=FEED_NOT_FOUND)
async def update_feed(
    data: CustomFeedUpdate,
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await FeedService(db).update_feed(current_user, id, data)


@router.delete("/custom-feed-delete", response_model=SuccessResponse, responses=FEED_NOT_FOUND)
async def delete_feed(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await FeedService(db).delete_feed(current_user, id)
    return SuccessResponse(message="Custom feed deleted successfully")


@router.get("/tag-list", response_model=List[TagCount], tags=["Discovery"])
async def list_tags(db: AsyncSession = Depends(get_db)):
    return await FeedService(db).tag_list()


@router.get("/explore-content", response_model=ExploreResponse, tags=["Discovery"])
async def explore(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Active events and posts whose tags avoid the viewer's interest tags, newest first."""
    return await FeedService(db).explore(viewer, page, limit)
