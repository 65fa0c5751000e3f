"""Note service implementation."""

import asyncio
import logging
from typing import Any, Iterable, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import FileRemovalError, NotFoundError
from ..ingestion import parse_note_text
from ..models.file import File
from ..models.note import Note
from ..notifier import UpdateNotifier
from ..repositories.file_repository import FileRepository
from ..repositories.note_repository import NoteRepository
from ..repositories.tag_repository import TagRepository
from ..storage import FileStorage
from ..unit_of_work import unit_of_work
from .interfaces import INoteService

logger = logging.getLogger(__name__)


class NoteService(INoteService):
    """Note service implementation.

    Notifications go out after the outermost commit: once per successful
    ingest, create or update. Deletes do not notify.
    """

    def __init__(
        self,
        session: AsyncSession,
        notifier: UpdateNotifier,
        storage: Optional[FileStorage] = None,
    ):
        self.session = session
        self.notifier = notifier
        self.storage = storage or FileStorage()
        self.note_repo = NoteRepository(session)
        self.tag_repo = TagRepository(session)
        self.file_repo = FileRepository(session)

    async def ingest_note(self, user_id: UUID, full_text: str) -> Note:
        """Create a note from raw text; hashtags anywhere in it become tags."""
        parsed = parse_note_text(full_text)

        async with unit_of_work(self.session):
            tags = await self.tag_repo.ensure_tags(parsed.tag_names, user_id)
            note = await self.note_repo.create(user_id, parsed.title, parsed.body, tags)

        logger.info(
            "Ingested note",
            extra={"note_id": str(note.id), "user_id": str(user_id), "tags": note.tag_names},
        )
        await self.notifier.publish(user_id)
        return note

    async def create_note(
        self, user_id: UUID, title: str, body: str, tag_names: Iterable[str] = ()
    ) -> Note:
        async with unit_of_work(self.session):
            tags = await self.tag_repo.ensure_tags(tag_names, user_id)
            note = await self.note_repo.create(user_id, title, body, tags)

        await self.notifier.publish(user_id)
        return note

    async def get_note(self, note_id: UUID, user_id: Optional[UUID] = None) -> Note:
        """Get a note with tags and files.

        With ``user_id``, someone else's note is reported as not found so
        its existence doesn't leak.
        """
        note = await self.note_repo.get(note_id)
        if user_id is not None and not note.is_owned_by(user_id):
            raise NotFoundError("Note", note_id)
        return note

    async def list_notes(self, user_id: UUID) -> List[Note]:
        return await self.note_repo.list_for_user(user_id)

    async def update_note(self, note: Note, attrs: Mapping[str, Any]) -> Note:
        note = await self.note_repo.update(note, attrs)
        await self.notifier.publish(note.user_id)
        return note

    async def delete_note(self, note: Note) -> None:
        """Delete a note and everything attached to it.

        Stored content of each file is removed before its row; if a removal
        fails the whole unit rolls back and the note with its remaining file
        rows stays in place.
        """
        note = await self.note_repo.get(note.id)

        async with unit_of_work(self.session):
            for file in list(note.files):
                await asyncio.to_thread(self.storage.remove, file.path)
                await self.file_repo.delete(file)
            await self.note_repo.delete(note)

        logger.info("Deleted note", extra={"note_id": str(note.id), "files": len(note.files)})

    async def attach_file(self, note: Note, filename: str, mime_type: str, data: bytes) -> File:
        path = await asyncio.to_thread(self.storage.save, filename, data)
        try:
            return await self.file_repo.create(note.id, path, mime_type, filename)
        except Exception:
            try:
                await asyncio.to_thread(self.storage.remove, path)
            except FileRemovalError:
                logger.error("Orphaned stored file after failed insert", extra={"path": path})
            raise

    async def list_files(self, note_id: UUID) -> List[File]:
        return await self.file_repo.list_for_note(note_id)

    async def get_file(self, file_id: UUID, note: Note) -> File:
        file = await self.file_repo.get_by_id(file_id)
        if file.note_id != note.id:
            raise NotFoundError("File", file_id)
        return file

    async def delete_file(self, file: File) -> None:
        await asyncio.to_thread(self.storage.remove, file.path)
        await self.file_repo.delete(file)
