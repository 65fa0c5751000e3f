# Attachment rows; the bytes live on disk at `path`
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note


class File(BaseModel):
    """File attached to a note."""

    __tablename__ = "files"

    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="files", lazy="noload")

    __table_args__ = (Index("idx_files_note_id", "note_id"),)

    def __repr__(self) -> str:
        return f"<File(path='{self.path}', mime_type='{self.mime_type}')>"
