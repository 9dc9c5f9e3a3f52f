"""
Notification Endpoints

Endpoints:
----------
- GET    /notification-list          - List the caller's notifications
- GET    /notification-unread-count  - Count unread notifications
- PATCH  /notification-read?id=      - Mark one as read
- PATCH  /notification-read-all      - Mark all as read
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.api.deps import get_current_user
from causeconnect.models import User
from causeconnect.schemas.base import SuccessResponse
from causeconnect.schemas.notification import (
    MarkReadResponse,
    NotificationListResponse,
    UnreadCountResponse,
)
from causeconnect.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


@router.get(
    "/notification-list",
    response_model=NotificationListResponse,
    summary="List notifications for the current user",
)
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).list_notifications(current_user.id, page, limit, type)


@router.get(
    "/notification-unread-count",
    response_model=UnreadCountResponse,
    summary="Get count of unread notifications",
)
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return UnreadCountResponse(count=await NotificationService(db).unread_count(current_user.id))


@router.patch(
    "/notification-read",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
    summary="Mark one notification as read",
)
async def mark_read(
    id: UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService(db).mark_read(current_user.id, id)
    return SuccessResponse()


@router.patch(
    "/notification-read-all",
    response_model=MarkReadResponse,
    summary="Mark all notifications as read",
)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await NotificationService(db).mark_all_read(current_user.id)
    return MarkReadResponse(updated=updated)
