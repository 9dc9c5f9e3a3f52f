from sqlalchemy import Column, String, Boolean, ForeignKey, Numeric, Text, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class NotificationType:
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    DONATION = "donation"
    AWARD = "award"
    SUPPORT = "support"
    SYSTEM = "system"

    ALL = (LIKE, COMMENT, FOLLOW, DONATION, AWARD, SUPPORT, SYSTEM)


class Notification(BaseModel):
    __tablename__ = "notifications"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=True)
    action_url = Column(String(500), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False, index=True)

    user = relationship("User", backref="notifications")
