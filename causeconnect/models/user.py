from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    avatar = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    settings = relationship(
        "UserSettings",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    password_resets = relationship("PasswordReset", back_populates="user", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        """Full name, falling back to the username when both parts are empty."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.username


class UserSettings(BaseModel):
    __tablename__ = "user_settings"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Notifications
    notifications_donations = Column(Boolean, default=True, nullable=False)
    notifications_comments = Column(Boolean, default=True, nullable=False)
    notifications_awards = Column(Boolean, default=False, nullable=False)
    notifications_mentions = Column(Boolean, default=True, nullable=False)
    notifications_new_causes = Column(Boolean, default=True, nullable=False)
    notifications_email = Column(Boolean, default=True, nullable=False)
    notifications_sms = Column(Boolean, default=False, nullable=False)

    # Privacy
    activity_visibility = Column(String(20), default="friends", nullable=False)  # public, friends, private

    # Personalization
    language = Column(String(10), default="en", nullable=False)
    region = Column(String(10), default="us", nullable=False)
    currency = Column(String(10), default="USD", nullable=False)
    theme = Column(String(20), default="system", nullable=False)
    interest_tags = Column(JSON, default=list, nullable=False)

    user = relationship("User", back_populates="settings")
