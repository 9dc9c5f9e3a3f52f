import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models import User
from causeconnect.models.chat import PresenceStatus
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.repositories.password_reset_repo import PasswordResetRepository
from causeconnect.schemas.auth import (
    UserRegister,
    UserLogin,
    TokenResponse,
    TokenRefreshResponse,
    UserResponse,
)
from causeconnect.core.exceptions import Conflict, Unauthorized, ValidationFailed
from causeconnect.core.security import (
    verify_password,
    get_password_hash,
    create_token_pair,
    verify_refresh_token,
    verify_access_token,
)
from causeconnect.services.presence_service import PresenceService
from causeconnect.utils.email import send_password_reset_code
from causeconnect.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service class for authentication operations.
    """
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.password_reset_repo = PasswordResetRepository(db)

    # ============================================================
    # User Registration
    # ============================================================
    async def register(self, user_data: UserRegister) -> TokenResponse:
        """
        Register a new user.

        Raises:
            ValidationFailed: Passwords don't match
            Conflict: Email or username already taken
        """
        if user_data.password != user_data.confirm_password:
            raise ValidationFailed("Passwords do not match")

        if await self.user_repo.get_by_email(user_data.email):
            raise Conflict("A user with this email already exists")

        if await self.user_repo.get_by_username(user_data.username):
            raise Conflict("This username is already taken")

        user = await self.user_repo.create_user(
            email=user_data.email,
            username=user_data.username,
            password_hash=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
        )
        logger.info(f"User registered: {user.username} ({user.id})")

        return self._create_token_response(user)

    # ============================================================
    # User Login
    # ============================================================
    async def login(self, login_data: UserLogin) -> TokenResponse:
        """
        Authenticate user and return tokens. Marks the user online.

        Raises:
            Unauthorized: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.password_hash):
            raise Unauthorized("Invalid email or password")

        if not user.is_active:
            raise Unauthorized("This account has been deactivated")

        user.last_login = datetime.now(timezone.utc)
        await self.db.commit()

        await PresenceService(self.db).set_status(user.id, PresenceStatus.ONLINE)

        return self._create_token_response(user)

    async def logout(self, user: User) -> None:
        await PresenceService(self.db).set_status(user.id, PresenceStatus.OFFLINE)

    # ============================================================
    # Token Refresh
    # ============================================================
    async def refresh_token(self, refresh_token: str) -> TokenRefreshResponse:
        """
        Issue a fresh token pair from a refresh token.

        Raises:
            Unauthorized: If refresh token is invalid or the user is gone
        """
        user_id = verify_refresh_token(refresh_token)
        if not user_id:
            raise Unauthorized("Invalid or expired refresh token")

        try:
            user = await self.user_repo.get_by_id(UUID(user_id))
        except ValueError:
            raise Unauthorized("Invalid or expired refresh token")
        if not user or not user.is_active:
            raise Unauthorized("User not found or inactive")

        return TokenRefreshResponse(**create_token_pair(user.id))

    # ============================================================
    # Get Current User
    # ============================================================
    async def get_current_user(self, token: str) -> User:
        """
        Get user from access token.

        Raises:
            ValueError: If token is invalid
        """
        user_id = verify_access_token(token)
        if not user_id:
            raise ValueError("Invalid or expired token")

        try:
            user = await self.user_repo.get_by_id(UUID(user_id))
        except ValueError:
            raise ValueError("Invalid token subject")

        if not user:
            raise ValueError("User not found")

        if not user.is_active:
            raise ValueError("User account is deactivated")

        return user

    # ============================================================
    # Password Reset
    # ============================================================
    async def request_password_reset(self, email: str) -> bool:
        """
        Issue a 6-digit code and email it.

        Always returns True so the endpoint never reveals which emails exist.
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not user.is_active:
            return True

        reset = await self.password_reset_repo.create_reset_code(user.id)
        send_password_reset_code(
            email=user.email,
            code=reset.reset_code,
            expires_in_minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES
        )
        return True

    async def verify_reset_code(self, email: str, code: str) -> bool:
        user = await self.user_repo.get_by_email(email)
        if not user:
            return False
        return await self.password_reset_repo.verify_code(user.id, code) is not None

    async def reset_password(self, email: str, code: str, new_password: str) -> bool:
        """
        Raises:
            ValidationFailed: If code is invalid or expired
        """
        user = await self.user_repo.get_by_email(email)
        reset = await self.password_reset_repo.verify_code(user.id, code) if user else None
        if not reset:
            raise ValidationFailed("Invalid or expired reset code")

        user.password_hash = get_password_hash(new_password)
        reset.is_used = True
        await self.db.commit()
        logger.info(f"Password reset for user {user.id}")
        return True

    # ============================================================
    # Helper Methods
    # ============================================================
    def _create_token_response(self, user: User) -> TokenResponse:
        return TokenResponse(
            user=UserResponse.from_user(user),
            **create_token_pair(user.id),
        )
