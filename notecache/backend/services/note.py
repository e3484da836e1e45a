"""
Note Service.

Business logic layer for notes. Implements the note use cases on top of
NoteRepository and translates its outcomes into application errors:

    missing note        -> NoteNotFoundError
    title already used  -> DuplicateNoteError
    backend failure     -> InternalError
"""

from notecache.backend.core.exceptions import (
    DuplicateNoteError,
    NoteNotFoundError,
    NotFoundError,
)
from notecache.backend.models.note import Note
from notecache.backend.repositories.note import NoteRepository
from notecache.backend.services.base import BaseService

TITLE_MAX_LENGTH = 255


class NoteService(BaseService):
    """Service for note business logic."""

    def __init__(self, repo: NoteRepository) -> None:
        super().__init__()
        self.repo = repo

    async def create_note(self, title: str, content: str) -> Note:
        """
        Create a new note.

        Args:
            title: Note title, must not be used by another note
            content: Note content

        Returns:
            Created note

        Raises:
            ValidationError: If the title is empty or too long
            DuplicateNoteError: If a note with this title exists
            InternalError: If the note could not be stored
        """
        self._validate_required({"title": title}, ["title"])
        self._validate_string_length(title, "title", max_length=TITLE_MAX_LENGTH)

        self._log_operation("Creating note", title=title)

        existing = await self._execute_backend_operation(
            "get_note_by_title",
            self.repo.get_note_by_title(title),
        )
        if existing is not None:
            raise DuplicateNoteError()

        note = await self._execute_backend_operation(
            "create_note",
            self.repo.save_note(Note(title=title, content=content)),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: int, content: str) -> Note:
        """
        Replace the content of an existing note.

        Raises:
            NoteNotFoundError: If the note does not exist
            InternalError: If the note could not be stored
        """
        note = await self.get_note(note_id)

        self._log_operation("Updating note", note_id=note_id)

        note.content = content
        try:
            return await self._execute_backend_operation(
                "update_note",
                self.repo.save_note(note),
            )
        except NotFoundError as e:
            # Deleted between the lookup and the write.
            raise NoteNotFoundError() from e

    async def get_note(self, note_id: int) -> Note:
        """
        Get a note by ID.

        Raises:
            NoteNotFoundError: If the note does not exist
        """
        note = await self._execute_backend_operation(
            "get_note",
            self.repo.get_note_by_id(note_id),
        )
        if note is None:
            raise NoteNotFoundError()
        return note

    async def delete_note(self, note_id: int) -> None:
        """
        Delete a note.

        Raises:
            NoteNotFoundError: If the note does not exist
            InternalError: If the note could not be deleted
        """
        await self.get_note(note_id)

        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_backend_operation(
            "delete_note",
            self.repo.delete_note(note_id),
        )
