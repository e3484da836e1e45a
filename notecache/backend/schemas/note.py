"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title, unique across all notes",
        examples=["My First Note"],
    )
    content: str = Field(
        default="",
        max_length=10000,
        description="Note content",
        examples=["This is the content of my note."],
    )


class NoteUpdate(BaseModel):
    """Schema for replacing the content of an existing note."""

    content: str = Field(
        ...,
        max_length=10000,
        description="New note content",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: int = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last update timestamp (UTC)")

    model_config = ConfigDict(from_attributes=True)


class NoteDeleteResponse(BaseModel):
    """Schema for the result of a delete."""

    id: int
    deleted: bool = True
