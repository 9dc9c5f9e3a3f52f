from sqlalchemy import Column, String, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class CustomFeed(BaseModel):
    """A user's saved tag selection, browsed as its own feed."""
    __tablename__ = "custom_feeds"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    tags = Column(JSON, default=list, nullable=False)

    user = relationship("User")
