"""
Health check endpoints
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from kidmap.config import settings
from kidmap.core.database import get_session_factory, ping
from kidmap.core.redis import get_redis

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/live")
async def liveness() -> Any:
    """
    Liveness probe
    """
    return {"status": "alive", "service": "kidmap-api"}


@router.get("/ready")
async def readiness(
    session_factory=Depends(get_session_factory),
    redis_client=Depends(get_redis)
) -> Any:
    """
    Readiness probe. Redis is optional and reported without failing readiness.
    """
    checks = {
        "database": await ping(session_factory),
        "redis": False,
    }

    if redis_client is not None:
        try:
            await redis_client.ping()
            checks["redis"] = True
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")

    return {
        "status": "ready" if checks["database"] else "not ready",
        "checks": checks,
        "version": settings.APP_VERSION
    }
