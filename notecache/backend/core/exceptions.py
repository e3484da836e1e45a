"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class NoteNotFoundError(NotFoundError):
    """Raised when a note is not found."""

    def __init__(self, message: str = "note not found") -> None:
        super().__init__(message)


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class DuplicateNoteError(ConflictError):
    """Raised when adding a note whose title conflicts with an existing note."""

    def __init__(self, message: str = "note with same title already exists") -> None:
        super().__init__(message)


class InternalError(ApplicationError):
    """Raised when a backend fails in a way the caller cannot act on."""

    def __init__(self, message: str = "something went wrong") -> None:
        super().__init__(message, code="SYS_INTERNAL_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")


class CacheError(ApplicationError):
    """Raised when a cache operation fails."""

    def __init__(self, message: str = "Cache error") -> None:
        super().__init__(message, code="SYS_CACHE_ERROR")


class CacheCorruptionError(ApplicationError):
    """
    Raised when a cached record cannot be decoded.

    The cache was written by incompatible code or corrupted. This is a
    consistency fault, not a cache miss.
    """

    def __init__(self, message: str = "Cached record is corrupted", key: str | None = None) -> None:
        self.key = key
        super().__init__(message, code="SYS_CACHE_CORRUPTED")
