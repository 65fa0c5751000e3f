"""On-disk storage for note attachments."""

import logging
import uuid
from pathlib import Path
from typing import Optional

from ..config import Settings, get_settings
from .exceptions import FileRejectedError, FileRemovalError

logger = logging.getLogger(__name__)


class FileStorage:
    """Writes uploads under ``root`` and removes them again."""

    def __init__(self, root: Optional[str] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.root = Path(root or self.settings.upload_dir)

    @property
    def max_bytes(self) -> int:
        return self.settings.max_file_size_mb * 1024 * 1024

    def check(self, filename: str, size: int) -> None:
        """Apply the configured extension and size limits."""
        suffix = Path(filename).suffix.lower()
        if suffix not in self.settings.allowed_file_extensions:
            raise FileRejectedError(f"File type {suffix or '(none)'} is not allowed")
        if size > self.max_bytes:
            raise FileRejectedError(f"File exceeds {self.settings.max_file_size_mb} MB")

    def save(self, filename: str, data: bytes) -> str:
        """Store ``data`` under a fresh name; returns the path."""
        self.check(filename, len(data))
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / f"{uuid.uuid4().hex}{Path(filename).suffix.lower()}"
        path.write_bytes(data)
        logger.info("Stored file", extra={"path": str(path), "size": len(data)})
        return str(path)

    def remove(self, path: str) -> None:
        """Delete stored content. Raises ``FileRemovalError`` on any OS error."""
        try:
            Path(path).unlink()
        except OSError as e:
            logger.error("Failed to remove stored file", extra={"path": path, "error": str(e)})
            raise FileRemovalError(path, e) from e
        logger.info("Removed stored file", extra={"path": path})
