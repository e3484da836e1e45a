"""
Response Envelope.

Every endpoint answers ``{"success", "data", "error", "metadata"}``.
Successful responses carry ``data``; failures carry ``error``. The
metadata picks up the id of the request being served on its own.
"""

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from notecache.backend.core.middleware import current_request_id
from notecache.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = Field(default_factory=current_request_id)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    success: Literal[True] = True
    data: DataT
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
