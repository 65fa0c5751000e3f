"""
User model. Identity comes from a Telegram login, not a password.
"""

from typing import TYPE_CHECKING, Any, Dict, List

from sqlalchemy import BigInteger, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import JSONDict

if TYPE_CHECKING:
    from .note import Note
    from .tag import Tag


class User(BaseModel):
    """Tenant key for notes and tags."""

    __tablename__ = "users"

    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False)
    # raw profile payload from the login widget, kept as-is
    telegram_data: Mapped[Dict[str, Any]] = mapped_column(JSONDict, nullable=False)

    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    __table_args__ = (Index("idx_users_telegram_id", "telegram_id"),)

    def __repr__(self) -> str:
        return f"<User(telegram_id={self.telegram_id})>"

    @property
    def display_name(self) -> str:
        """First/last name from the profile, else the username, else the id."""
        data = self.telegram_data or {}
        name = " ".join(p for p in (data.get("first_name"), data.get("last_name")) if p)
        return name or data.get("username") or str(self.telegram_id)
