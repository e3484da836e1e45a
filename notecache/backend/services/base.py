"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories and implement business rules. They
are the boundary where backend failures stop: callers of a service see
application exceptions only, never SQLAlchemy or Redis errors.

Usage:
    from notecache.backend.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, repo: NoteRepository) -> None:
            super().__init__()
            self.repo = repo

        async def get_note(self, note_id: int) -> Note:
            note = await self._execute_backend_operation(
                "get_note", self.repo.get_note_by_id(note_id)
            )
            if note is None:
                raise NoteNotFoundError()
            return note
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from notecache.backend.core.exceptions import (
    CacheError,
    DatabaseError,
    InternalError,
    ValidationError,
)
from notecache.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Failures of the database or the cache. Anything else, including
# CacheCorruptionError, is passed through untouched.
BACKEND_ERRORS = (SQLAlchemyError, RedisError, DatabaseError, CacheError)


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Error wrapping for backend operations
    - Common validation patterns
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    async def _execute_backend_operation(
        self,
        operation: str,
        coro: Awaitable[T],
    ) -> T:
        """
        Execute a repository call, collapsing backend failures.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute

        Returns:
            Result of the coroutine

        Raises:
            InternalError: For any database or cache failure
        """
        try:
            return await coro
        except BACKEND_ERRORS as e:
            self._logger.error(
                "Backend operation failed",
                extra={
                    "operation": operation,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            raise InternalError() from e

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _validate_string_length(
        self,
        value: str,
        field_name: str,
        max_length: int,
    ) -> None:
        """
        Validate that a string is at most ``max_length`` characters.

        Raises:
            ValidationError: If the string is too long
        """
        if len(value) > max_length:
            raise ValidationError(
                f"{field_name} too long",
                details={field_name: f"Maximum length is {max_length}"},
            )

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
