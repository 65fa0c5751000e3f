"""Note repository for database operations."""

from typing import Any, Iterable, List, Mapping
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..exceptions import NotFoundError
from ..models.note import Note
from ..models.tag import Tag
from ..unit_of_work import unit_of_work
from ..validation import validate_new_note, validate_note_changes


class NoteRepository:
    """Repository for note database operations.

    Every write runs inside ``unit_of_work``; called from within a larger
    unit (ingestion) it joins that one instead of committing on its own.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _with_relations(self):
        return select(Note).options(selectinload(Note.tags), selectinload(Note.files))

    async def create(self, user_id: UUID, title: str, body: str, tags: Iterable[Tag]) -> Note:
        """Insert a note linked to ``tags``; all or nothing."""
        changes = validate_new_note({"user_id": user_id, "title": title, "body": body})
        async with unit_of_work(self.session):
            note = Note(**changes)
            note.tags = list(tags)
            self.session.add(note)
            await self.session.flush()
        return note

    async def get(self, note_id: UUID) -> Note:
        """Fetch a note with tags and files, re-reading both from the database."""
        stmt = (
            self._with_relations()
            .where(Note.id == note_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError("Note", note_id)
        return note

    async def list_for_user(self, user_id: UUID) -> List[Note]:
        """All of the user's notes, newest first."""
        stmt = (
            self._with_relations()
            .where(Note.user_id == user_id)
            .order_by(desc(Note.created_at), Note.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, note: Note, attrs: Mapping[str, Any]) -> Note:
        """Apply validated title/body changes. Raises NoteValidationError before writing."""
        changes = validate_note_changes(attrs)
        async with unit_of_work(self.session):
            for key, value in changes.items():
                setattr(note, key, value)
            await self.session.flush()
        return note

    async def delete(self, note: Note) -> None:
        """Delete the note row. Tag links cascade, tags survive."""
        async with unit_of_work(self.session):
            await self.session.delete(note)
            await self.session.flush()

