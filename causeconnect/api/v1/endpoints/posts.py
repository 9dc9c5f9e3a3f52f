from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.post import (
    ParticipantListResponse,
    ParticipateResponse,
    PostBookmarkResponse,
    PostCreate,
    PostLikeResponse,
    PostListResponse,
    PostRef,
    PostResponse,
)
from causeconnect.services.post_service import PostService
from causeconnect.api.deps import get_current_user, get_optional_user

router = APIRouter(tags=["Posts"])


@router.get("/post-list", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    event_id: Optional[UUID] = Query(None, alias="eventId"),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).list_posts(viewer, page, limit, user_id, event_id)


@router.get(
    "/post-detail",
    response_model=PostResponse,
    responses={404: {"model": ErrorResponse, "description": "Post not found"}}
)
async def get_post(
    id: UUID = Query(...),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).get_detail(id, viewer)


@router.get("/post-bookmarked", response_model=PostListResponse)
async def list_bookmarked_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).list_bookmarked(current_user, page, limit)


@router.post("/post-create", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).create_post(current_user, data)


@router.delete("/post-delete", response_model=SuccessResponse)
async def delete_post(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await PostService(db).delete_post(current_user, id)
    return SuccessResponse(message="Post deleted")


# ============================================================
# Toggles
# ============================================================

@router.post("/post-like", response_model=PostLikeResponse)
async def toggle_like(
    data: PostRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).toggle_like(current_user, data.post_id)


@router.delete(
    "/post-unlike",
    response_model=PostLikeResponse,
    responses={404: {"model": ErrorResponse, "description": "Post not found"}}
)
async def unlike_post(
    post_id: UUID = Query(..., alias="postId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).unlike(current_user, post_id)


@router.post("/post-bookmark", response_model=PostBookmarkResponse)
async def toggle_bookmark(
    data: PostRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).toggle_bookmark(current_user, data.post_id)


@router.post("/post-participate", response_model=ParticipateResponse)
async def toggle_participate(
    data: PostRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).toggle_participate(current_user, data.post_id)


@router.get("/post-participants", response_model=ParticipantListResponse)
async def list_participants(
    post_id: UUID = Query(..., alias="postId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PostService(db).list_participants(post_id, page, limit)
