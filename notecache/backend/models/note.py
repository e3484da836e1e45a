"""
Note Model.

Database model for notes, the only entity in the system.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notecache.backend.models.base import Base, IntegerIdMixin, TimestampMixin


class Note(IntegerIdMixin, TimestampMixin, Base):
    """
    Note database model.

    A note has a title that is unique across all notes and free-form
    content. The id and both timestamps are assigned by the store, so a
    freshly constructed ``Note(title=..., content=...)`` has none of them.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
