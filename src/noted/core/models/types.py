"""Custom SQLAlchemy types with cross-DB support."""

import json
import uuid
from typing import Any, Optional

from sqlalchemy import String, Text, TypeDecorator


class JSONDict(TypeDecorator):
    """
    Store an opaque JSON object.

    - On PostgreSQL: uses JSONB
    - On SQLite (and others): stores JSON text in a TEXT column
    """

    cache_ok = True
    impl = Text

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import JSONB

            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[dict], dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            return dict(value)
        return json.dumps(value, sort_keys=True)

    def process_result_value(self, value: Any, dialect) -> Optional[dict]:
        if value is None:
            return None
        if isinstance(value, dict):
            return value
        return json.loads(value)


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing hex string form on other DBs (e.g., SQLite)
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
