"""Domain exceptions raised by repositories and services.

The API layer maps these onto HTTP responses in ``register_exception_handlers``.
"""

from dataclasses import dataclass
from typing import Any, List


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class NotedError(Exception):
    """Base class for all application errors."""


class NoteValidationError(NotedError):
    """Input rejected before anything touched storage."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        summary = ", ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(f"Validation failed ({summary})")


class NotFoundError(NotedError):
    """A note, tag, file or user lookup by id found nothing."""

    def __init__(self, resource: str, resource_id: Any):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class StorageError(NotedError):
    """The enclosing unit of work was rolled back."""


class FileRemovalError(NotedError):
    """Stored content of an attached file could not be removed."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        super().__init__(f"Could not remove stored file {path}: {cause}")


class FileRejectedError(NotedError):
    """Upload refused (size or extension)."""


class AuthenticationError(NotedError):
    """Login payload failed verification."""
