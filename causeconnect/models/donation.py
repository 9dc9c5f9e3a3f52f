from sqlalchemy import Column, String, Text, Boolean, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class Donation(BaseModel):
    __tablename__ = "donations"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), default="completed", nullable=False)  # pending, completed, failed
    transaction_id = Column(String(100), nullable=True, unique=True)

    donor = relationship("User", lazy="joined")
    event = relationship("Event", lazy="joined")
