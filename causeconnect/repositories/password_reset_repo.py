"""
Password Reset Repository

Data access layer for PasswordReset codes.
"""

import secrets
from typing import Optional
from datetime import datetime, timezone, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_

from causeconnect.repositories.base import BaseRepository
from causeconnect.models.password_reset import PasswordReset
from causeconnect.core.config import settings


class PasswordResetRepository(BaseRepository[PasswordReset]):
    """Repository for PasswordReset model."""

    def __init__(self, db: AsyncSession):
        super().__init__(PasswordReset, db)

    @staticmethod
    def generate_reset_code() -> str:
        """Generate a 6-digit reset code."""
        return ''.join(str(secrets.randbelow(10)) for _ in range(6))

    async def create_reset_code(self, user_id) -> PasswordReset:
        """
        Issue a new code for a user. Earlier unused codes stop working.
        """
        await self.db.execute(
            update(PasswordReset)
            .where(PasswordReset.user_id == user_id, PasswordReset.is_used == False)
            .values(is_used=True)
        )

        reset = PasswordReset(
            user_id=user_id,
            reset_code=self.generate_reset_code(),
            expires_at=datetime.now(timezone.utc) + timedelta(
                minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES
            ),
            is_used=False,
        )
        self.db.add(reset)
        await self.db.commit()
        await self.db.refresh(reset)
        return reset

    async def verify_code(self, user_id, code: str) -> Optional[PasswordReset]:
        """Return the matching unused, unexpired code, if any."""
        result = await self.db.execute(
            select(PasswordReset).where(
                and_(
                    PasswordReset.user_id == user_id,
                    PasswordReset.reset_code == code,
                    PasswordReset.is_used == False,
                    PasswordReset.expires_at > datetime.now(timezone.utc),
                )
            )
        )
        return result.scalars().first()
