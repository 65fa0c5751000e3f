"""
Validation applied before any persistence call.

Each ``validate_*`` function casts the permitted keys out of a raw attribute
mapping, checks them with a pydantic model and either returns the clean
changes or raises ``NoteValidationError`` carrying field-level errors.
Keys that are not permitted are dropped silently.
"""

import uuid
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from .exceptions import FieldError, NoteValidationError
from .models.tag import Tag


class _Changeset(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NoteChanges(_Changeset):
    """Editable note fields. Empty strings are allowed."""

    title: StrictStr = ""
    body: StrictStr = ""


class NewNote(NoteChanges):
    user_id: uuid.UUID


class TagChanges(_Changeset):
    name: StrictStr = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize(cls, v: str) -> str:
        clean = Tag.normalize_name(v)
        if not clean:
            raise ValueError("can't be blank")
        return clean


class NewTag(TagChanges):
    user_id: uuid.UUID


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        message = err["msg"]
        if err["type"] == "missing":
            message = "can't be blank"
        errors.append(FieldError(field=field, message=message))
    return errors


def _cast(model: Type[_Changeset], attrs: Optional[Mapping[str, Any]], partial: bool) -> Dict[str, Any]:
    attrs = dict(attrs or {})
    permitted = {k: v for k, v in attrs.items() if k in model.model_fields}
    try:
        parsed = model.model_validate(permitted)
    except ValidationError as e:
        raise NoteValidationError(_field_errors(e)) from e
    return parsed.model_dump(exclude_unset=partial)


def validate_new_note(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    """Full attribute set for an insert; ``user_id`` is required."""
    return _cast(NewNote, attrs, partial=False)


def validate_note_changes(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    """Only the keys actually supplied, for a partial update."""
    return _cast(NoteChanges, attrs, partial=True)


def validate_new_tag(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    return _cast(NewTag, attrs, partial=False)


def validate_tag_changes(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    return _cast(TagChanges, attrs, partial=True)
