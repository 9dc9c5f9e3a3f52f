from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db
from causeconnect.schemas.auth import (
    UserRegister,
    UserLogin,
    TokenResponse,
    TokenRefreshResponse,
    RefreshTokenRequest,
    UserResponse,
    PasswordResetRequest,
    PasswordResetConfirm,
    VerifyResetCodeRequest,
    VerifyResetCodeResponse,
)
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.services.auth_service import AuthService
from causeconnect.api.deps import get_current_user
from causeconnect.models import User

# ============================================================
# Router Setup
# ============================================================

router = APIRouter(tags=["Authentication"])


# ============================================================
# Registration Endpoint
# ============================================================

@router.post(
    "/auth-register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User created successfully"},
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email or username already taken"},
    }
)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user account.

    Returns access token, refresh token, and user info.
    """
    return await AuthService(db).register(user_data)


# ============================================================
# Login Endpoint
# ============================================================
@router.post(
    "/auth-login",
    response_model=TokenResponse,
    responses={
        200: {"description": "Login successful"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    }
)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate with email and password."""
    return await AuthService(db).login(login_data)


# ============================================================
# Token Refresh Endpoint
# ============================================================
@router.post(
    "/auth-refresh",
    response_model=TokenRefreshResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid refresh token"}}
)
async def refresh_token(
    token_data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    return await AuthService(db).refresh_token(token_data.refresh_token)


# ============================================================
# Current User / Logout
# ============================================================
@router.get("/auth-me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.from_user(current_user)


@router.post("/auth-logout", response_model=SuccessResponse)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Mark the caller offline. Tokens are stateless; the client discards them.
    """
    await AuthService(db).logout(current_user)
    return SuccessResponse(message="Logged out")


# ============================================================
# Password Reset Flow
# ============================================================
@router.post("/auth-forgot-password", response_model=SuccessResponse)
async def forgot_password(
    request: PasswordResetRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Email a 6-digit reset code.

    The response is the same whether or not the email is registered.
    """
    await AuthService(db).request_password_reset(request.email)
    return SuccessResponse(message="If that email is registered, a reset code has been sent")


@router.post("/auth-verify-reset", response_model=VerifyResetCodeResponse)
async def verify_reset_code(
    request: VerifyResetCodeRequest,
    db: AsyncSession = Depends(get_db)
):
    valid = await AuthService(db).verify_reset_code(request.email, request.code)
    return VerifyResetCodeResponse(valid=valid)


@router.post(
    "/auth-reset-password",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid or expired code"}}
)
async def reset_password(
    request: PasswordResetConfirm,
    db: AsyncSession = Depends(get_db)
):
    await AuthService(db).reset_password(request.email, request.code, request.password)
    return SuccessResponse(message="Password has been reset")
