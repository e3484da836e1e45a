"""
Note Repository.

Data access layer for notes. Reads go through a Redis cache in front of
the database; writes go to the database and invalidate the cache.

Cache layout:
    Every cached note is stored twice, as a Redis hash under
    ``<prefix>:<id>`` and under ``<prefix>:<title>``. Both hashes hold
    exactly the fields in CACHE_FIELDS. Timestamps are RFC 3339 with
    nanosecond digits and a ``Z`` suffix.

Protocol:
    save_note    - delete both keys, then upsert the row
    get_note_*   - return the cached hash if present (no database call),
                   otherwise load the row and cache it under both keys
    delete_note  - drop both keys (title learned from the cached hash),
                   then delete the row

The database is authoritative. A cached note is only ever a copy of a
row as last read or written, so any key may be dropped at any time.

Id keys and title keys share one namespace, so a note titled "7" lands
on the id key of note 7. A cached record only counts as a hit when it
belongs to the lookup (same id, or same title). A title that would alias
another note's id key is never written to the cache.
"""

from collections.abc import Awaitable, Callable, Mapping

import redis.asyncio as redis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notecache.backend.core.exceptions import (
    CacheCorruptionError,
    CacheError,
    DatabaseError,
)
from notecache.backend.core.logging import get_logger
from notecache.backend.core.utils import format_rfc3339_nano, parse_rfc3339_nano
from notecache.backend.models.note import Note
from notecache.backend.repositories.base import BaseRepository

logger = get_logger(__name__)

DEFAULT_KEY_PREFIX = "notes"

CACHE_FIELDS = ("id", "title", "content", "created_at", "updated_at")


def note_to_cache_fields(note: Note) -> dict[str, str]:
    """Serialize a persisted note into the five-field cache record."""
    return {
        "id": str(note.id),
        "title": note.title,
        "content": note.content,
        "created_at": format_rfc3339_nano(note.created_at),
        "updated_at": format_rfc3339_nano(note.updated_at),
    }


def note_from_cache_fields(fields: Mapping[str, str], key: str | None = None) -> Note:
    """
    Rebuild a note from a cache record.

    Args:
        fields: Hash fields as returned by HGETALL
        key: Cache key the record came from, for error reporting

    Returns:
        Detached Note instance (not attached to any session)

    Raises:
        CacheCorruptionError: If a field is missing or malformed
    """
    missing = [name for name in CACHE_FIELDS if name not in fields]
    if missing:
        raise CacheCorruptionError(
            f"Cached note is missing fields: {', '.join(missing)}", key=key
        )

    raw_id = fields["id"]
    if not (raw_id.isascii() and raw_id.isdigit()) or int(raw_id) <= 0:
        raise CacheCorruptionError(f"Cached note has invalid id {raw_id!r}", key=key)

    if not fields["title"]:
        raise CacheCorruptionError("Cached note has an empty title", key=key)

    try:
        created_at = parse_rfc3339_nano(fields["created_at"])
        updated_at = parse_rfc3339_nano(fields["updated_at"])
    except ValueError as e:
        raise CacheCorruptionError(str(e), key=key) from e

    return Note(
        id=int(raw_id),
        title=fields["title"],
        content=fields["content"],
        created_at=created_at,
        updated_at=updated_at,
    )


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model with a read-through Redis cache.

    Store handles are passed in explicitly; the repository keeps no other
    state, so one instance per session is cheap and concurrent instances
    need no coordination beyond what Redis and the database provide.

    Args:
        session: Database session used for all store calls
        redis_client: Redis client created with ``decode_responses=True``
        key_prefix: Namespace for cache keys
        ttl_seconds: Optional expiry for cached notes
        self_heal: Drop corrupt cache records and refetch instead of raising
    """

    model = Note

    def __init__(
        self,
        session: AsyncSession,
        redis_client: redis.Redis,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        ttl_seconds: int | None = None,
        self_heal: bool = False,
    ) -> None:
        super().__init__(session)
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds
        self.self_heal = self_heal

    def id_key(self, note_id: int) -> str:
        return f"{self.key_prefix}:{note_id}"

    def title_key(self, title: str) -> str:
        return f"{self.key_prefix}:{title}"

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def save_note(self, note: Note) -> Note:
        """
        Insert or update a note.

        Cache entries for the note are removed before the database is
        touched. If that fails the database is left alone.

        Returns:
            The persisted note with id and timestamps filled in

        Raises:
            RedisError: Cache invalidation failed
            SQLAlchemyError: The database write failed
        """
        await self._invalidate(note)
        saved = await self.upsert(note)
        logger.debug("Note saved", extra={"note_id": saved.id})
        return saved

    async def get_note_by_id(self, note_id: int) -> Note | None:
        """
        Get a note by id, from the cache when possible.

        Returns:
            The note, or None if no such note exists

        Raises:
            CacheCorruptionError: The cached record could not be decoded
            CacheError: Redis failed
            DatabaseError: The database failed
        """
        return await self._read_through(
            self.id_key(note_id),
            lambda: self.find_by_id(note_id),
            lambda cached: cached.id == note_id,
        )

    async def get_note_by_title(self, title: str) -> Note | None:
        """
        Get a note by its unique title, from the cache when possible.

        Returns:
            The note, or None if no such note exists

        Raises:
            CacheCorruptionError: The cached record could not be decoded
            CacheError: Redis failed
            DatabaseError: The database failed
        """
        return await self._read_through(
            self.title_key(title),
            lambda: self.find_by_field("title", title),
            lambda cached: cached.title == title,
        )

    async def delete_note(self, note_id: int) -> None:
        """
        Delete a note and its cache entries.

        The row is deleted whether or not the note was cached. Deleting
        an id that does not exist is not an error.

        Raises:
            RedisError: Cache invalidation failed
            SQLAlchemyError: The database delete failed
        """
        key = self.id_key(note_id)
        cached = await self._load_cached(key)
        if cached is not None and cached.id == note_id:
            await self._delete_keys(key, self._own_title_key(note_id, cached.title))
        elif cached is not None:
            # The id key holds another note whose title is this id.
            title = await self._stored_title(note_id)
            await self._delete_keys(self._own_title_key(note_id, title))

        await self.delete_by_id(note_id)
        logger.debug("Note deleted", extra={"note_id": note_id, "was_cached": cached is not None})

    # -------------------------------------------------------------------------
    # Cache helpers
    # -------------------------------------------------------------------------

    async def _read_through(
        self,
        key: str,
        load: Callable[[], Awaitable[Note | None]],
        owns: Callable[[Note], bool],
    ) -> Note | None:
        """
        Return the cached note under ``key`` or load it and cache it.

        A cached record that ``owns`` rejects belongs to another note
        sharing the key. It counts as a miss, and the loaded note is not
        cached so the other note's entry stays in place.
        """
        try:
            cached = await self._load_cached(key)
        except RedisError as e:
            raise CacheError(f"Cache read failed for {key}") from e

        foreign = False
        if cached is None:
            logger.debug("Note cache miss", extra={"key": key})
        elif owns(cached):
            logger.debug("Note cache hit", extra={"key": key})
            return cached
        else:
            foreign = True
            logger.debug(
                "Cache key holds another note",
                extra={"key": key, "cached_id": cached.id},
            )

        try:
            note = await load()
        except SQLAlchemyError as e:
            logger.error("Note lookup failed", extra={"key": key, "error": str(e)})
            raise DatabaseError(f"Note lookup failed for {key}") from e

        if note is None or foreign:
            return note

        try:
            await self._cache_note(note)
        except RedisError as e:
            raise CacheError(f"Cache write failed for {key}") from e
        return note

    async def _load_cached(self, key: str) -> Note | None:
        """Read and decode the hash under ``key``; None when absent."""
        fields = await self.redis.hgetall(key)
        if not fields:
            return None

        try:
            return note_from_cache_fields(fields, key=key)
        except CacheCorruptionError as e:
            if not self.self_heal:
                logger.error(
                    "Corrupt note in cache",
                    extra={"key": key, "error": e.message},
                )
                raise
            logger.warning(
                "Dropping corrupt note from cache",
                extra={"key": key, "error": e.message},
            )
            await self._drop_corrupt(key, fields)
            return None

    async def _drop_corrupt(self, key: str, fields: Mapping[str, str]) -> None:
        """Delete a corrupt record and whatever sibling key it still names."""
        keys = [key]
        raw_id = fields.get("id", "")
        if raw_id.isascii() and raw_id.isdigit():
            keys.append(self.id_key(int(raw_id)))
        if fields.get("title"):
            keys.append(self.title_key(fields["title"]))
        await self._delete_keys(*keys)

    async def _cache_note(self, note: Note) -> None:
        """
        Write the note under its id key and its title key.

        Both hashes are replaced in one MULTI/EXEC so neither key is ever
        left with a partial record or with fields from an older record.
        The title key is skipped when it is another note's id key.
        """
        fields = note_to_cache_fields(note)
        keys = [self.id_key(note.id)]
        title_key = self._own_title_key(note.id, note.title)
        if title_key not in (None, keys[0]):
            keys.append(title_key)

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(*keys)
            for key in keys:
                pipe.hset(key, mapping=fields)
                if self.ttl_seconds:
                    pipe.expire(key, self.ttl_seconds)
            await pipe.execute()

        logger.debug("Note cached", extra={"note_id": note.id, "keys": keys})

    def _own_title_key(self, note_id: int | None, title: str | None) -> str | None:
        """Title key for the note, or None when it is another note's id key."""
        if not title:
            return None
        if title.isascii() and title.isdigit() and title[0] != "0" and title != str(note_id):
            return None
        return self.title_key(title)

    async def _invalidate(self, note: Note) -> None:
        """
        Delete every cache key that may hold this note.

        That is the id key, the key for the title being saved, and the
        key for the title the note had before, which differs when the
        save renames the note.
        """
        keys: list[str | None] = []
        if note.is_persisted:
            id_key = self.id_key(note.id)
            cached_id, cached_title = await self.redis.hmget(id_key, "id", "title")
            if cached_id is None or cached_id == str(note.id):
                keys.append(id_key)
            else:
                # The id key holds another note whose title is this id.
                cached_title = await self._stored_title(note.id)
            if cached_title != note.title:
                keys.append(self._own_title_key(note.id, cached_title))
        keys.append(self._own_title_key(note.id, note.title))

        await self._delete_keys(*keys)

    async def _stored_title(self, note_id: int) -> str | None:
        """Title of the row as stored, without flushing pending changes."""
        with self.session.no_autoflush:
            result = await self.session.execute(
                select(Note.title).where(Note.id == note_id)
            )
        return result.scalar_one_or_none()

    async def _delete_keys(self, *keys: str | None) -> None:
        unique = list(dict.fromkeys(key for key in keys if key))
        if not unique:
            return
        await self.redis.delete(*unique)
        logger.debug("Note cache invalidated", extra={"keys": unique})
