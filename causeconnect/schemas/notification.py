from typing import List, Optional
from datetime import datetime
from uuid import UUID

from causeconnect.schemas.base import CamelModel, Pagination


class NotificationResponse(CamelModel):
    id: UUID
    type: str
    title: str
    message: str
    is_read: bool
    action_url: Optional[str] = None
    amount: Optional[float] = None
    timestamp: datetime

    @classmethod
    def from_model(cls, n) -> "NotificationResponse":
        return cls(
            id=n.id,
            type=n.type,
            title=n.title,
            message=n.message,
            is_read=n.is_read,
            action_url=n.action_url,
            amount=float(n.amount) if n.amount is not None else None,
            timestamp=n.created_at,
        )


class NotificationListResponse(CamelModel):
    data: List[NotificationResponse]
    pagination: Pagination


class UnreadCountResponse(CamelModel):
    count: int


class MarkReadResponse(CamelModel):
    success: bool = True
    updated: int
