"""Repository layer for data access."""

from .file_repository import FileRepository
from .note_repository import NoteRepository
from .tag_repository import TagRepository
from .user_repository import UserRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
    "TagRepository",
    "FileRepository",
]
