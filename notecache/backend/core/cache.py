"""
Cache Configuration.

Redis client management for the note cache.
Uses lazy initialization like the database engine so that importing
this module never opens a connection.
"""

from collections.abc import AsyncGenerator

import redis.asyncio as redis

from notecache.backend.core.logging import get_logger

logger = get_logger(__name__)

_client: redis.Redis | None = None


def _create_client() -> redis.Redis:
    """Create the Redis client from database.yaml and secrets."""
    from notecache.backend.core.config import get_app_config, get_redis_url

    redis_config = get_app_config().database.redis

    client = redis.from_url(
        get_redis_url(),
        decode_responses=True,
        socket_timeout=redis_config.socket_timeout,
    )
    logger.debug(
        "Redis client created",
        extra={"host": redis_config.host, "db": redis_config.db},
    )
    return client


def get_redis_client() -> redis.Redis:
    """
    Get the Redis client, creating it on first use.

    The client decodes responses to ``str``; the note cache relies on it.
    """
    global _client
    if _client is None:
        _client = _create_client()
    return _client


async def get_redis() -> AsyncGenerator[redis.Redis, None]:
    """
    Dependency that provides the shared Redis client.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(cache: redis.Redis = Depends(get_redis)):
            ...
    """
    yield get_redis_client()


async def close_redis_client() -> None:
    """Close the shared client and its connection pool."""
    global _client
    if _client is not None:
        await _client.aclose()
        logger.debug("Redis client closed")
    _client = None
