"""
Database models for Noted.

SQLAlchemy ORM models for the personal note store. Every note and tag is
scoped to a user; files hang off notes.

Models included:
    - User: tenant identified by a Telegram account
    - Note: title + markdown body
    - Tag: per-user lowercase label (many-to-many with notes via note_tags)
    - File: attachment stored on disk
"""

from .base import BaseModel
from .file import File
from .note import Note
from .tag import Tag, note_tags
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Tag",
    "note_tags",
    "File",
]
