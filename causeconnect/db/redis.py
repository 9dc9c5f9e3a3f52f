"""
Redis Connection Module

Async Redis connection management for the realtime layer. Chat, typing and
presence events are published on ``chat:{conversation_id}`` channels so that
every API instance can relay them to its own WebSocket listeners.
"""

import logging
from typing import Optional

from redis.asyncio import Redis, ConnectionPool

from causeconnect.core.config import settings

logger = logging.getLogger(__name__)

# ============================================================
# Redis Connection Pool
# ============================================================

_redis_pool: Optional[ConnectionPool] = None


def get_redis_pool() -> ConnectionPool:
    """
    Get or create the Redis connection pool.

    Created once during app startup, reused thereafter.
    """
    global _redis_pool

    if _redis_pool is None:
        _redis_pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=10,
            decode_responses=False,
        )
        logger.info(f"Redis connection pool created: {settings.REDIS_URL}")

    return _redis_pool


async def get_redis() -> Redis:
    """Return a client bound to the shared pool."""
    pool = get_redis_pool()
    return Redis(connection_pool=pool)


async def close_redis_pool():
    """
    Close Redis connection pool during app shutdown.
    """
    global _redis_pool

    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None
        logger.info("Redis connection pool closed")


# ============================================================
# Health Check
# ============================================================

async def check_redis_connection() -> bool:
    """
    Check if Redis is reachable.

    Returns:
        True if Redis responds to PING, False otherwise
    """
    if not settings.REDIS_ENABLED:
        return False

    try:
        redis = await get_redis()
        response = await redis.ping()
        logger.info("Redis health check: OK")
        return response
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return False
