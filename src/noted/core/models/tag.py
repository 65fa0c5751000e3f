# Tag model and the note<->tag association table
import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Table, Text, UniqueConstraint, event
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import attributes as orm_attributes
from sqlalchemy.orm import mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note
    from .user import User


note_tags = Table(
    "note_tags",
    BaseModel.metadata,
    Column("note_id", GUID(), ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", GUID(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_note_tags_tag_id", "tag_id"),
)


class Tag(BaseModel):
    """User-scoped lowercase label."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="tags", lazy="noload")

    notes: Mapped[List["Note"]] = relationship(
        "Note",
        secondary=note_tags,
        back_populates="tags",
        lazy="noload",
        passive_deletes=True,
        doc="Notes that have this tag",
    )

    __table_args__ = (
        # conflict target for the insert-or-ignore in TagRepository.ensure_tags
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
        CheckConstraint("name = lower(name)", name="ck_tags_name_lowercase"),
        Index("idx_tags_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Tag(name='{self.name}')>"

    @classmethod
    def normalize_name(cls, name: str) -> str:
        """Lowercase, trimmed, without a leading '#'."""
        return name.strip().lstrip("#").lower()


@event.listens_for(Tag, "before_insert", propagate=True)
def _normalize_tag_name_before_insert(mapper, connection, target: Tag):
    target.name = Tag.normalize_name(target.name)


@event.listens_for(Tag, "before_update", propagate=True)
def _normalize_tag_name_before_update(mapper, connection, target: Tag):
    target.name = Tag.normalize_name(target.name)


# start with an empty collection instead of triggering a lazy load
@event.listens_for(Tag, "init", propagate=True)
def _init_tag_collections(target, args, kwargs):
    if "notes" not in kwargs:
        orm_attributes.set_committed_value(target, "notes", [])
