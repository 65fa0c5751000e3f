"""Tag repository: per-user get-or-create of tag names."""

import logging
import uuid
from typing import Any, Iterable, List, Mapping, Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.base import utcnow
from ..models.tag import Tag
from ..unit_of_work import unit_of_work
from ..validation import validate_new_tag, validate_tag_changes

logger = logging.getLogger(__name__)


class TagRepository:
    """Repository for tag database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def ensure_tags(self, tag_names: Iterable[str], user_id: UUID) -> Set[Tag]:
        """Resolve names to the user's Tag rows, creating the missing ones.

        Names are lowercased first and duplicates collapse, so the result
        holds one Tag per distinct name. Creation is an insert that ignores
        conflicts on ``(user_id, name)``; a concurrent request inserting the
        same name makes us pick up its row instead of failing.
        """
        names = {Tag.normalize_name(name) for name in tag_names}
        names.discard("")
        if not names:
            return set()

        async with unit_of_work(self.session):
            tags = await self._find_by_names(user_id, names)
            missing = names - {tag.name for tag in tags}
            if missing:
                await self._insert_missing(user_id, missing)
                tags.extend(await self._find_by_names(user_id, missing))

        logger.debug(
            "Resolved tags",
            extra={"user_id": str(user_id), "requested": len(names), "created_count": len(missing)},
        )
        return set(tags)

    async def _find_by_names(self, user_id: UUID, names: Set[str]) -> List[Tag]:
        stmt = select(Tag).where(Tag.user_id == user_id, Tag.name.in_(sorted(names)))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _insert_missing(self, user_id: UUID, names: Set[str]) -> None:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            await self._insert_each_with_savepoint(user_id, names)
            return

        now = utcnow()
        rows = [
            {"id": uuid.uuid4(), "user_id": user_id, "name": name, "created_at": now, "updated_at": now}
            for name in sorted(names)
        ]
        stmt = insert(Tag.__table__).values(rows).on_conflict_do_nothing(
            index_elements=["user_id", "name"]
        )
        await self.session.execute(stmt)

    async def _insert_each_with_savepoint(self, user_id: UUID, names: Set[str]) -> None:
        # dialects without ON CONFLICT: let the unique constraint reject duplicates
        for name in sorted(names):
            try:
                async with self.session.begin_nested():
                    self.session.add(Tag(name=name, user_id=user_id))
            except IntegrityError:
                logger.info("Tag created concurrently", extra={"tag": name})

    async def get_by_id(self, tag_id: UUID) -> Tag:
        """Get tag by ID or raise NotFoundError."""
        tag = await self.session.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def list_for_user(self, user_id: UUID) -> List[Tag]:
        stmt = select(Tag).where(Tag.user_id == user_id).order_by(Tag.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, attrs: Mapping[str, Any]) -> Tag:
        """Validated create; an existing tag with the same name is returned as-is."""
        changes = validate_new_tag(attrs)
        (tag,) = await self.ensure_tags([changes["name"]], changes["user_id"])
        return tag

    async def update(self, tag: Tag, attrs: Mapping[str, Any]) -> Tag:
        changes = validate_tag_changes(attrs)
        async with unit_of_work(self.session):
            for key, value in changes.items():
                setattr(tag, key, value)
            await self.session.flush()
        return tag

    async def delete(self, tag: Tag) -> None:
        """Delete the tag; its note links go with it, the notes stay."""
        async with unit_of_work(self.session):
            await self.session.delete(tag)
