from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse
from causeconnect.schemas.donation import (
    DonationCreate,
    DonationCreateResponse,
    DonationHistoryResponse,
    DonationListResponse,
)
from causeconnect.services.donation_service import DonationService
from causeconnect.api.deps import get_current_user

router = APIRouter(tags=["Donations"])


@router.post(
    "/donation-create",
    response_model=DonationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Event not active"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    }
)
async def create_donation(
    data: DonationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Donate to an event.

    Payment is mocked: the donation is recorded as completed with a
    generated transaction id.
    """
    return await DonationService(db).create_donation(current_user, data)


@router.get("/donation-list", response_model=DonationListResponse)
async def list_donations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    event_id: Optional[UUID] = Query(None, alias="eventId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DonationService(db).list_donations(current_user, page, limit, event_id)


@router.get("/donation-history", response_model=DonationHistoryResponse)
async def donation_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await DonationService(db).history(current_user, page, limit)
