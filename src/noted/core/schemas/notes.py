"""
Note management schemas.

API contracts for ingestion, note CRUD, tags and attachments.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..markdown import render_markdown
from ..models.file import File
from ..models.note import Note
from ..models.tag import Tag


class NoteIngestRequest(BaseModel):
    """Free text: first line is the title, hashtags become tags."""

    text: str = Field(default="", description="Raw note text")

    model_config = ConfigDict(
        json_schema_extra={"example": {"text": "Shopping\nBuy milk #errands #food"}}
    )


class NoteCreate(BaseModel):
    """Explicit note creation."""

    title: str = Field(default="", description="Note title")
    body: str = Field(default="", description="Note body (Markdown)")
    tags: List[str] = Field(default_factory=list, description="Tag names")


class NoteUpdate(BaseModel):
    """Partial update; only title and body are editable."""

    title: Optional[str] = Field(default=None, description="Note title")
    body: Optional[str] = Field(default=None, description="Note body (Markdown)")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TagCreate(BaseModel):
    name: str = Field(description="Tag name, '#' prefix optional")


class TagResponse(BaseModel):
    id: uuid.UUID
    name: str

    @classmethod
    def from_tag(cls, tag: Tag) -> "TagResponse":
        return cls(id=tag.id, name=tag.name)


class FileResponse(BaseModel):
    id: uuid.UUID
    note_id: uuid.UUID
    filename: Optional[str]
    mime_type: str
    created_at: datetime

    @classmethod
    def from_file(cls, file: File) -> "FileResponse":
        return cls(
            id=file.id,
            note_id=file.note_id,
            filename=file.filename,
            mime_type=file.mime_type,
            created_at=file.created_at,
        )


class NoteResponse(BaseModel):
    """Note with rendered body, tags and attachments."""

    id: uuid.UUID = Field(description="Note unique identifier")
    user_id: uuid.UUID = Field(description="Owner ID")
    title: str
    body: str
    body_html: str = Field(description="Sanitized HTML rendering of the body")
    tags: List[str]
    files: List[FileResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_note(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            user_id=note.user_id,
            title=note.title,
            body=note.body,
            body_html=render_markdown(note.body),
            tags=note.tag_names,
            files=[FileResponse.from_file(f) for f in note.files],
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListResponse(BaseModel):
    items: List[NoteResponse]
    total: int
