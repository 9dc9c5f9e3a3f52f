"""
Database Module

Async SQLAlchemy engine, session factory and the FastAPI session dependency.
"""

import json
import logging
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from causeconnect.core.config import settings

logger = logging.getLogger(__name__)


# ============================================================
# Declarative Base
# ============================================================
class Base(DeclarativeBase):
    pass


# ============================================================
# Engine
# ============================================================
def _json_serializer(value) -> str:
    # JSON columns keep non-ASCII text as-is so tag filters can match it
    return json.dumps(value, ensure_ascii=False)


def _engine_options() -> dict:
    options = {"echo": settings.SQLALCHEMY_ECHO, "json_serializer": _json_serializer}

    if settings.DB_DISABLE_POOLING:
        options["poolclass"] = NullPool
        return options

    options["pool_pre_ping"] = True
    if settings.DB_POOL_MIN_SIZE:
        options["pool_size"] = settings.DB_POOL_MIN_SIZE
    if settings.DB_POOL_MAX_SIZE:
        options["max_overflow"] = max(
            0, settings.DB_POOL_MAX_SIZE - (settings.DB_POOL_MIN_SIZE or 5)
        )
    return options


engine = create_async_engine(str(settings.DATABASE_URL), **_engine_options())

if engine.dialect.name == "sqlite":
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


# ============================================================
# Dependency
# ============================================================
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session for one request.

    Usage:
        @router.get("/")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# ============================================================
# Health Check
# ============================================================
async def check_db_connection() -> bool:
    """Run SELECT 1 against the database."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
