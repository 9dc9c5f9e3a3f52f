from typing import Optional
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from causeconnect.schemas.base import CamelModel


# ============================================================
# Request Schemas
# ============================================================

class UserRegister(CamelModel):
    """Schema for user registration request"""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    password: str = Field(min_length=8, max_length=100, description="At least 8 characters")
    confirm_password: str

    @field_validator("first_name", "last_name")
    @classmethod
    def collapse_whitespace(cls, v: str) -> str:
        return " ".join(v.split())

    class Config:
        json_schema_extra = {
            "example": {
                "firstName": "Amara",
                "lastName": "Okafor",
                "email": "amara@example.org",
                "username": "amara",
                "password": "SecurePass123",
                "confirmPassword": "SecurePass123",
            }
        }


class UserLogin(CamelModel):
    email: EmailStr
    password: str

    class Config:
        json_schema_extra = {
            "example": {"email": "amara@example.org", "password": "SecurePass123"}
        }


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class PasswordResetRequest(CamelModel):
    email: EmailStr


class VerifyResetCodeRequest(CamelModel):
    email: EmailStr
    code: str = Field(min_length=6, max_length=6, description="6-digit reset code")


class PasswordResetConfirm(CamelModel):
    email: EmailStr
    code: str = Field(min_length=6, max_length=6)
    password: str = Field(min_length=8, max_length=100)


# ============================================================
# Response Schemas
# ============================================================

class UserResponse(CamelModel):
    id: UUID
    email: str
    username: str
    first_name: str
    last_name: str
    name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    verified: bool = False
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.display_name,
            avatar=user.avatar,
            bio=user.bio,
            location=user.location,
            verified=user.verified,
            created_at=user.created_at,
        )


class TokenResponse(CamelModel):
    user: UserResponse
    token: str
    refresh_token: str


class TokenRefreshResponse(CamelModel):
    token: str
    refresh_token: str


class VerifyResetCodeResponse(CamelModel):
    valid: bool
