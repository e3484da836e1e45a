"""
Base Repository.

Base class for all repositories with the primitive store operations:
point lookups, upsert and delete by primary key.

Every write is committed before the method returns. Callers that mirror
rows into a cache depend on this: a row must be durable before anything
can copy it out.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notecache.backend.core.exceptions import NotFoundError
from notecache.backend.core.logging import get_logger
from notecache.backend.core.utils import utc_now
from notecache.backend.models.base import Base, TimestampMixin

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common store operations.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note

    Lookups return None when no row matches; that is the not-found
    signal. Store failures are raised as SQLAlchemy exceptions after the
    session has been rolled back.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, id: int) -> ModelType | None:
        """Get a single record by primary key, or None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Get a single record by a unique column, or None if not found.

        Raises:
            ValueError: If the model has no column named ``field``
        """
        if field not in self.model.__table__.columns:
            raise ValueError(f"{self.model.__name__} has no column {field!r}")

        result = await self.session.execute(
            select(self.model).where(getattr(self.model, field) == value)
        )
        return result.scalar_one_or_none()

    async def upsert(self, instance: ModelType) -> ModelType:
        """
        Insert a new record or update an existing one by primary key.

        Records without a positive id are inserted and receive their id
        from the store. Records with an id are written back with an
        UPDATE on that id; the instance may be detached (for example
        rebuilt from a cache). ``updated_at`` is stamped on every write.

        Returns:
            The persistent instance, refreshed from the store

        Raises:
            NotFoundError: No row has the instance's id (it was deleted)
            SQLAlchemyError: Whatever the store raised, unchanged
        """
        now = utc_now()
        try:
            if instance.id is None or instance.id <= 0:
                instance.id = None
                if isinstance(instance, TimestampMixin):
                    instance.created_at = now
                    instance.updated_at = now
                self.session.add(instance)
                await self.session.commit()
            else:
                if isinstance(instance, TimestampMixin):
                    instance.updated_at = now
                await self._update_row(instance)
                await self.session.commit()
                instance = await self.session.get(self.model, instance.id)
        except SQLAlchemyError as e:
            logger.warning(
                "Upsert failed, rolling back",
                extra={"model": self.model.__name__, "error": str(e)},
            )
            await self.session.rollback()
            raise

        await self.session.refresh(instance)
        return instance

    async def _update_row(self, instance: ModelType) -> None:
        """Copy every column but the key onto the stored row."""
        values = {
            attr.key: getattr(instance, attr.key)
            for attr in sa_inspect(self.model).column_attrs
            if attr.key != "id"
        }
        # A pending flush of the same row would fail before the rowcount check.
        with self.session.no_autoflush:
            result = await self.session.execute(
                update(self.model).where(self.model.id == instance.id).values(**values)
            )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError(f"{self.model.__name__} {instance.id} does not exist")

    async def delete_by_id(self, id: int) -> None:
        """
        Delete a record by primary key.

        Deleting an id that does not exist is not an error.

        Raises:
            SQLAlchemyError: Whatever the store raised, unchanged
        """
        try:
            await self.session.execute(
                delete(self.model).where(self.model.id == id)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.warning(
                "Delete failed, rolling back",
                extra={"model": self.model.__name__, "id": id, "error": str(e)},
            )
            await self.session.rollback()
            raise
