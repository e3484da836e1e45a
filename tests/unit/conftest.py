"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked or replaced
by in-process fakes. Unit tests never touch a real database.
"""

from collections.abc import Callable
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from notecache.backend.models.note import Note
from notecache.backend.repositories.note import NoteRepository


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = NoteRepository(mock_db_session, redis_client)
            # Test repository methods
    """
    session = AsyncMock(spec=AsyncSession)
    session.add = MagicMock()
    return session


@pytest.fixture
def failing_db_session() -> AsyncMock:
    """
    Database session that fails the test on any store call.

    Used to prove that a code path never reaches the database.
    """
    session = AsyncMock(spec=AsyncSession)
    failure = AssertionError("database must not be called")
    session.execute.side_effect = failure
    session.get.side_effect = failure
    session.commit.side_effect = failure
    session.refresh.side_effect = failure
    session.add = MagicMock(side_effect=failure)
    return session


# =============================================================================
# Redis Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_redis() -> AsyncMock:
    """
    Mock Redis client for unit tests.

    Provides the hash and key commands the note cache uses, all
    returning "nothing cached" by default.
    """
    redis = AsyncMock()
    redis.hgetall = AsyncMock(return_value={})
    redis.hmget = AsyncMock(return_value=[None, None])
    redis.hset = AsyncMock(return_value=5)
    redis.exists = AsyncMock(return_value=0)
    redis.delete = AsyncMock(return_value=0)
    redis.expire = AsyncMock(return_value=True)
    return redis


# =============================================================================
# Note Fixtures
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Factory for persisted-looking notes.

    Usage:
        def test_something(make_note):
            note = make_note(id=7, title="Groceries")
    """

    def _make(
        id: int = 1,
        title: str = "Test Note",
        content: str = "Test content",
        created_at: datetime = datetime(2024, 5, 1, 12, 30, 45, 123456),
        updated_at: datetime = datetime(2024, 5, 2, 8, 0, 0, 654321),
    ) -> Note:
        return Note(
            id=id,
            title=title,
            content=content,
            created_at=created_at,
            updated_at=updated_at,
        )

    return _make


@pytest.fixture
def mock_note_repository() -> AsyncMock:
    """Mock NoteRepository with nothing stored."""
    repo = AsyncMock(spec=NoteRepository)
    repo.get_note_by_id.return_value = None
    repo.get_note_by_title.return_value = None
    repo.save_note.side_effect = lambda note: note
    repo.delete_note.return_value = None
    return repo
