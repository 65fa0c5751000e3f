"""
Service interfaces for Noted.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set
from uuid import UUID

from ..models.file import File
from ..models.note import Note
from ..models.tag import Tag
from ..schemas.auth import TelegramLoginRequest, TokenResponse
from ..schemas.common import HealthCheckResponse


class IAuthService(ABC):
    """Exchanges a Telegram login for an access token."""

    @abstractmethod
    async def login_with_telegram(self, request: TelegramLoginRequest) -> TokenResponse:
        """Verify the payload, upsert the user, issue a token."""
        pass


class INoteService(ABC):
    """Ingestion and CRUD over notes and their attachments."""

    @abstractmethod
    async def ingest_note(self, user_id: UUID, full_text: str) -> Note:
        """Parse free text into a tagged note and persist it."""
        pass

    @abstractmethod
    async def create_note(
        self, user_id: UUID, title: str, body: str, tag_names: Iterable[str] = ()
    ) -> Note:
        """Create a note from explicit fields."""
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: Optional[UUID] = None) -> Note:
        """Get note by ID, optionally restricted to its owner."""
        pass

    @abstractmethod
    async def list_notes(self, user_id: UUID) -> List[Note]:
        """All notes of a user."""
        pass

    @abstractmethod
    async def update_note(self, note: Note, attrs: Mapping[str, Any]) -> Note:
        """Validate and persist title/body changes."""
        pass

    @abstractmethod
    async def delete_note(self, note: Note) -> None:
        """Delete note, its stored files and file rows."""
        pass

    @abstractmethod
    async def attach_file(self, note: Note, filename: str, mime_type: str, data: bytes) -> File:
        """Store content and add a File row."""
        pass

    @abstractmethod
    async def list_files(self, note_id: UUID) -> List[File]:
        """Attachments of a note, oldest first."""
        pass

    @abstractmethod
    async def get_file(self, file_id: UUID, note: Note) -> File:
        """Get an attachment that belongs to ``note``."""
        pass

    @abstractmethod
    async def delete_file(self, file: File) -> None:
        """Remove stored content, then the File row."""
        pass


class ITagService(ABC):
    """Per-user tags."""

    @abstractmethod
    async def ensure_tags(self, tag_names: Iterable[str], user_id: UUID) -> Set[Tag]:
        """Get-or-create tags by name."""
        pass

    @abstractmethod
    async def list_tags(self, user_id: UUID) -> List[Tag]:
        pass

    @abstractmethod
    async def get_tag(self, tag_id: UUID, user_id: Optional[UUID] = None) -> Tag:
        pass

    @abstractmethod
    async def create_tag(self, user_id: UUID, name: str) -> Tag:
        pass

    @abstractmethod
    async def update_tag(self, tag: Tag, attrs: Mapping[str, Any]) -> Tag:
        pass

    @abstractmethod
    async def delete_tag(self, tag: Tag) -> None:
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_pubsub_health(self) -> Dict[str, Any]:
        """Check the notification bus."""
        pass
