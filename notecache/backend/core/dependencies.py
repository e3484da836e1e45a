"""
FastAPI Dependencies.

Shared dependencies for request handling. Store handles are resolved
here and passed explicitly into repositories and services.
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notecache.backend.core.cache import get_redis
from notecache.backend.core.config import get_app_config
from notecache.backend.core.database import get_db_session
from notecache.backend.repositories.note import NoteRepository
from notecache.backend.services.note import NoteService

# Type aliases for store dependencies
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
RedisClient = Annotated[redis.Redis, Depends(get_redis)]


def get_note_repository(db: DbSession, cache: RedisClient) -> NoteRepository:
    """Build a NoteRepository for this request using the cache settings."""
    cache_config = get_app_config().database.cache
    return NoteRepository(
        db,
        cache,
        key_prefix=cache_config.key_prefix,
        ttl_seconds=cache_config.ttl_seconds,
        self_heal=cache_config.self_heal_corrupt_entries,
    )


def get_note_service(
    repo: Annotated[NoteRepository, Depends(get_note_repository)],
) -> NoteService:
    """Build a NoteService around the request's repository."""
    return NoteService(repo)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
