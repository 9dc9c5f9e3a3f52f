from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import logging

from causeconnect.db.database import get_db, AsyncSessionLocal
from causeconnect.models import User
from causeconnect.core.exceptions import Unauthorized
from causeconnect.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by get_current_user, not by the scheme
security = HTTPBearer(auto_error=False)


# =====================================================
# Get Current user
# =====================================================
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency that validates the bearer token and returns the caller.

    Raises:
        Unauthorized: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise Unauthorized()

    try:
        return await AuthService(db).get_current_user(credentials.credentials)
    except ValueError as e:
        raise Unauthorized(str(e))


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Like get_current_user, but anonymous callers get None.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return await get_current_user(credentials, db)


# =====================================================
# WebSocket Authentication
# =====================================================
async def get_current_user_ws(token: str) -> Optional[User]:
    """
    Authenticate a WebSocket connection from its ``token`` query parameter.

    Returns:
        User if valid, None if invalid
    """
    async with AsyncSessionLocal() as db:
        try:
            return await AuthService(db).get_current_user(token)
        except ValueError as e:
            logger.warning(f"WebSocket auth failed: {e}")
            return None
