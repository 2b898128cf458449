"""
Redis configuration and connection management
"""

import logging
from typing import Optional

import redis.asyncio as redis
from fastapi import Request

from kidmap.config import settings

logger = logging.getLogger(__name__)


async def init_redis(url: Optional[str] = None) -> Optional[redis.Redis]:
    """
    Initialize Redis connection.

    Redis only backs token revocation, so an unreachable server is logged
    and the application keeps running without it.
    """
    client = redis.from_url(
        url or settings.REDIS_URL,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        decode_responses=True
    )
    try:
        await client.ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
    return client


async def close_redis(client: Optional[redis.Redis]):
    """
    Close Redis connection
    """
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")


def get_redis(request: Request) -> Optional[redis.Redis]:
    """
    Dependency returning the Redis client created at startup
    """
    return getattr(request.app.state, "redis", None)
