# Note model for user content
import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Index, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.orm import attributes as orm_attributes

from .base import BaseModel
from .tag import note_tags
from .types import GUID

if TYPE_CHECKING:
    from .file import File
    from .tag import Tag
    from .user import User


class Note(BaseModel):
    """Title + markdown body, tagged and with attachments."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="notes", lazy="noload")

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=note_tags,
        back_populates="notes",
        lazy="selectin",
        doc="Tags associated with this note",
    )

    files: Mapped[List["File"]] = relationship(
        "File",
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="File.created_at",
        doc="Attachments; stored content is removed before the rows",
    )

    __table_args__ = (
        Index("idx_notes_user_id", "user_id"),
        Index("idx_notes_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', user_id={self.user_id})>"

    @property
    def tag_names(self) -> List[str]:
        """Sorted tag names."""
        return sorted(tag.name for tag in self.tags)

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id


# Ensure relationship collections are initialized to avoid implicit lazy loads
@event.listens_for(Note, "init", propagate=True)
def _init_note_collections(target, args, kwargs):
    if "tags" not in kwargs:
        orm_attributes.set_committed_value(target, "tags", [])
    if "files" not in kwargs:
        orm_attributes.set_committed_value(target, "files", [])
