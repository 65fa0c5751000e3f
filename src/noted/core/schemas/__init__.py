"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import TelegramLoginRequest, TokenResponse, UserResponse
from .common import ErrorResponse, FieldErrorResponse, HealthCheckResponse
from .notes import (
    FileResponse,
    NoteCreate,
    NoteIngestRequest,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    TagCreate,
    TagResponse,
)

__all__ = [
    # Auth schemas
    "TelegramLoginRequest",
    "TokenResponse",
    "UserResponse",
    # Note schemas
    "NoteIngestRequest",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListResponse",
    "TagCreate",
    "TagResponse",
    "FileResponse",
    # Common schemas
    "ErrorResponse",
    "FieldErrorResponse",
    "HealthCheckResponse",
]
