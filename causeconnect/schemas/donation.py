from typing import List, Optional
from datetime import datetime
from uuid import UUID

from pydantic import Field

from causeconnect.schemas.base import CamelModel, Pagination, UserSummary


class DonationCreate(CamelModel):
    event_id: UUID
    amount: float = Field(gt=0, le=1_000_000)
    payment_method: str = Field(min_length=1, max_length=50)
    is_anonymous: bool = False
    is_recurring: bool = False
    message: Optional[str] = Field(None, max_length=1000)

    class Config:
        json_schema_extra = {
            "example": {
                "eventId": "0b6f1b9e-8a7e-4b1e-9f61-2b1c4f1f7a10",
                "amount": 25.00,
                "paymentMethod": "card",
                "isAnonymous": False,
            }
        }


class DonationEventRef(CamelModel):
    id: UUID
    title: str
    image: Optional[str] = None
    organization: Optional[UserSummary] = None


class DonationResponse(CamelModel):
    id: UUID
    amount: float
    payment_method: str
    is_recurring: bool
    is_anonymous: bool
    message: Optional[str] = None
    status: str
    transaction_id: Optional[str] = None
    event: DonationEventRef
    donor: Optional[UserSummary] = None
    created_at: datetime


class DonationCreateResponse(CamelModel):
    donation: DonationResponse


class DonationListResponse(CamelModel):
    data: List[DonationResponse]
    pagination: Pagination


class DonationStats(CamelModel):
    total_donations: int
    total_amount: float
    unique_events: int


class DonationHistoryResponse(CamelModel):
    donations: List[DonationResponse]
    stats: DonationStats
    pagination: Pagination
