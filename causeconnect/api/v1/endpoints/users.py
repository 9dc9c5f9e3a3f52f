from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.auth import UserResponse
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.user import (
    ActivityItem,
    BlockRequest,
    BlockedUser,
    FollowRequest,
    FollowResponse,
    ImpactStats,
    SettingsPayload,
    UserProfileResponse,
    UserSearchResult,
    UserUpdateRequest,
)
from causeconnect.services.settings_service import SettingsService
from causeconnect.services.user_service import UserService
from causeconnect.api.deps import get_current_user, get_optional_user

router = APIRouter(tags=["Users"])


# ============================================================
# Profiles
# ============================================================

@router.get(
    "/user-profile",
    response_model=UserProfileResponse,
    responses={404: {"model": ErrorResponse, "description": "User not found"}}
)
async def get_profile(
    username: str = Query(..., min_length=1),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Public profile with follower, donation and impact statistics."""
    return await UserService(db).get_profile(username, viewer)


@router.patch("/user-update", response_model=UserResponse)
async def update_profile(
    data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).update_profile(current_user, data)


@router.get("/user-search", response_model=List[UserSearchResult])
async def search_users(
    query: str = Query(""),
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).search(query, limit)


@router.post(
    "/user-follow",
    response_model=FollowResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Cannot follow yourself"},
        403: {"model": ErrorResponse, "description": "Blocked"},
        404: {"model": ErrorResponse, "description": "User not found"},
    }
)
async def toggle_follow(
    data: FollowRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Follow the user, or unfollow when already following."""
    return await UserService(db).toggle_follow(current_user, data.user_id)


@router.get(
    "/user-activity",
    response_model=List[ActivityItem],
    responses={404: {"model": ErrorResponse, "description": "User not found"}}
)
async def get_activity(
    username: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=50),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Recent supports, awards and follows, subject to the user's activity visibility."""
    return await UserService(db).get_activity(username, viewer, limit)


# ============================================================
# Settings
# ============================================================

@router.get("/settings-get", response_model=SettingsPayload, tags=["Settings"])
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SettingsService(db).get_settings(current_user)


@router.patch("/settings-update", response_model=SettingsPayload, tags=["Settings"])
async def update_settings(
    payload: SettingsPayload,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Partial update; omitted sections and fields keep their values."""
    return await SettingsService(db).update_settings(current_user, payload)


@router.get("/settings-impact", response_model=ImpactStats, tags=["Settings"])
async def get_impact(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SettingsService(db).impact(current_user)

@router.post("/settings-block-user", response_model=SuccessResponse, tags=["Settings"])
async def block_user(
    data: BlockRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SettingsService(db).block_user(current_user, data.user_id)
    return SuccessResponse(message="User blocked")


@router.delete("/settings-unblock-user", response_model=SuccessResponse, tags=["Settings"])
async def unblock_user(
    user_id: UUID = Query(..., alias="userId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await SettingsService(db).unblock_user(current_user, user_id)
    return SuccessResponse(message="User unblocked")


@router.get("/settings-blocked-users", response_model=List[BlockedUser], tags=["Settings"])
async def list_blocked_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await SettingsService(db).list_blocked(current_user)
