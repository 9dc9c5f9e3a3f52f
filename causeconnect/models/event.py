from sqlalchemy import (
    Column, String, Text, Numeric, DateTime, ForeignKey, JSON, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship
from .base import BaseModel


class EventStatus:
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (ACTIVE, COMPLETED, CANCELLED)


class Event(BaseModel):
    __tablename__ = "events"

    organization_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    location = Column(String(255), nullable=True)
    goal_amount = Column(Numeric(12, 2), nullable=True)
    raised_amount = Column(Numeric(12, 2), default=0, nullable=False)
    status = Column(String(20), default=EventStatus.ACTIVE, nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=True)

    organizer = relationship("User", lazy="joined")
    updates = relationship(
        "EventUpdate",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EventUpdate.created_at.desc()",
    )


class EventUpdate(BaseModel):
    """Progress update posted by the organizer."""
    __tablename__ = "event_updates"

    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    event = relationship("Event", back_populates="updates")


class EventSupport(BaseModel):
    __tablename__ = "event_supports"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_event_supports_pair"),)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)


class EventPass(BaseModel):
    """Explicit disinterest in an event. Never coexists with an EventSupport row."""
    __tablename__ = "event_passes"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_event_passes_pair"),)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)


class EventBookmark(BaseModel):
    __tablename__ = "event_bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_event_bookmarks_pair"),)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
