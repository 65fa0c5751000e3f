"""File (attachment) repository. Only rows; content is FileStorage's job."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.file import File
from ..unit_of_work import unit_of_work


class FileRepository:
    """Repository for attachment rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self, note_id: UUID, path: str, mime_type: str, filename: Optional[str] = None
    ) -> File:
        async with unit_of_work(self.session):
            file = File(note_id=note_id, path=path, mime_type=mime_type, filename=filename)
            self.session.add(file)
            await self.session.flush()
        return file

    async def get_by_id(self, file_id: UUID) -> File:
        file = await self.session.get(File, file_id)
        if file is None:
            raise NotFoundError("File", file_id)
        return file

    async def list_for_note(self, note_id: UUID) -> List[File]:
        stmt = select(File).where(File.note_id == note_id).order_by(File.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, file: File) -> None:
        async with unit_of_work(self.session):
            await self.session.delete(file)
