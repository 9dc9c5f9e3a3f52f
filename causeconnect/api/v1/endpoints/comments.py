from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.comment import (
    CommentAwardResponse,
    CommentCreate,
    CommentLikeResponse,
    CommentRef,
    CommentResponse,
    CommentSaveResponse,
)
from causeconnect.services.comment_service import CommentService
from causeconnect.api.deps import get_current_user, get_optional_user

router = APIRouter(tags=["Comments"])


@router.get("/comment-list", response_model=List[CommentResponse])
async def list_comments(
    event_id: Optional[UUID] = Query(None, alias="eventId"),
    post_id: Optional[UUID] = Query(None, alias="postId"),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Comment tree of an event or a post; pass exactly one of the two ids."""
    return await CommentService(db).list_comments(viewer, event_id=event_id, post_id=post_id)


@router.post(
    "/comment-create",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse, "description": "Target or parent not found"}}
)
async def create_comment(
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await CommentService(db).create_comment(current_user, data)


@router.post("/comment-like", response_model=CommentLikeResponse)
async def toggle_like(
    data: CommentRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await CommentService(db).toggle_like(current_user, data.comment_id)


@router.post(
    "/comment-award",
    response_model=CommentAwardResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse, "description": "Own comment"}}
)
async def award_comment(
    data: CommentRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await CommentService(db).award(current_user, data.comment_id)


@router.post("/comment-save", response_model=CommentSaveResponse)
async def toggle_save(
    data: CommentRef,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await CommentService(db).toggle_save(current_user, data.comment_id)


@router.delete("/comment-delete", response_model=SuccessResponse)
async def delete_comment(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await CommentService(db).delete_comment(current_user, id)
    return SuccessResponse(message="Comment deleted")
