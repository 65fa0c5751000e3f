"""Shared FastAPI dependencies."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.notifier import UpdateNotifier
from ..core.pubsub import PubSub
from ..core.services import NoteService, TagService
from ..core.storage import FileStorage
from ..database import get_db_session


def get_pubsub(request: Request) -> PubSub:
    """The bus built at startup (see ``main.lifespan``)."""
    return request.app.state.pubsub


def get_file_storage() -> FileStorage:
    return FileStorage()


def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    bus: PubSub = Depends(get_pubsub),
    storage: FileStorage = Depends(get_file_storage),
) -> NoteService:
    return NoteService(session, UpdateNotifier(bus), storage)


def get_tag_service(session: AsyncSession = Depends(get_db_session)) -> TagService:
    return TagService(session)
