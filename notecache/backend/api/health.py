"""
Health Check Endpoints.

Provides liveness and readiness checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database and Redis reachable)
"""

import asyncio
from typing import Any

import redis.asyncio as redis
from fastapi import APIRouter, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from notecache.backend.core.config import get_app_config
from notecache.backend.core.dependencies import DbSession, RedisClient
from notecache.backend.core.logging import get_logger
from notecache.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(session: AsyncSession) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    try:
        start = utc_now()
        await session.execute(text("SELECT 1"))
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


async def check_redis(client: redis.Redis) -> dict[str, Any]:
    """
    Check Redis connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    try:
        start = utc_now()
        await client.ping()
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Redis health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(db: DbSession, cache: RedisClient) -> dict[str, Any]:
    """
    Readiness check.

    Checks the database and Redis in parallel.
    Returns 503 if either is unhealthy or the checks time out.
    """
    timeout = get_app_config().application.health.ready_timeout_seconds

    try:
        async with asyncio.timeout(timeout):
            db_result, redis_result = await asyncio.gather(
                check_database(db),
                check_redis(cache),
            )
    except TimeoutError:
        logger.warning("Readiness check timed out", extra={"timeout": timeout})
        db_result = redis_result = {"status": "unhealthy", "error": "timed out"}

    checks = {
        "database": db_result,
        "redis": redis_result,
    }

    unhealthy_checks = [
        name for name, check in checks.items()
        if check.get("status") == "unhealthy"
    ]

    if unhealthy_checks:
        logger.warning(
            "Readiness check failed",
            extra={"unhealthy": unhealthy_checks, "checks": checks},
        )
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
