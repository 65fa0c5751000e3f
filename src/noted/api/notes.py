"""Notes API endpoints."""

import asyncio
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File as FormFile, Query, UploadFile, WebSocket, WebSocketDisconnect, status

from ..core.notifier import note_topic
from ..core.schemas.notes import (
    FileResponse,
    NoteCreate,
    NoteIngestRequest,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    TagCreate,
    TagResponse,
)
from ..core.services import NoteService, TagService
from ..middleware.auth import get_current_user_id
from ..security import get_user_id_from_token
from .deps import get_note_service, get_tag_service

router = APIRouter(prefix="/notes", tags=["notes"])
logger = logging.getLogger("noted.api.notes")


@router.post("/ingest", response_model=NoteResponse, status_code=201)
async def ingest_note(
    request: NoteIngestRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a note from free text."""
    note = await note_service.ingest_note(current_user_id, request.text)
    return NoteResponse.from_note(note)


@router.post("/", response_model=NoteResponse, status_code=201)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a note from explicit fields."""
    note = await note_service.create_note(current_user_id, request.title, request.body, request.tags)
    return NoteResponse.from_note(note)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    notes = await note_service.list_notes(current_user_id)
    return NoteListResponse(items=[NoteResponse.from_note(n) for n in notes], total=len(notes))


@router.get("/tags/", response_model=List[TagResponse])
async def list_tags(
    current_user_id: UUID = Depends(get_current_user_id),
    tag_service: TagService = Depends(get_tag_service),
):
    tags = await tag_service.list_tags(current_user_id)
    return [TagResponse.from_tag(t) for t in tags]


@router.post("/tags/", response_model=TagResponse, status_code=201)
async def create_tag(
    request: TagCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    tag_service: TagService = Depends(get_tag_service),
):
    tag = await tag_service.create_tag(current_user_id, request.name)
    return TagResponse.from_tag(tag)


@router.delete("/tags/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    tag_service: TagService = Depends(get_tag_service),
):
    tag = await tag_service.get_tag(tag_id, current_user_id)
    await tag_service.delete_tag(tag)


@router.websocket("/updates")
async def note_updates(websocket: WebSocket, token: str = Query(...)):
    """Push a message whenever the user's notes change; clients then re-fetch."""
    user_id = get_user_id_from_token(token)
    if not user_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    bus = websocket.app.state.pubsub

    async with bus.subscribe(note_topic(user_id)) as subscription:
        await websocket.send_json({"event": "subscribed", "topic": subscription.topic})
        # the client never sends anything meaningful; receiving just detects disconnects
        receiver = asyncio.create_task(websocket.receive_text())
        try:
            while True:
                getter = asyncio.create_task(subscription.get())
                done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
                if getter in done:
                    await websocket.send_json(getter.result())
                if receiver in done:
                    if receiver.exception() is not None:
                        getter.cancel()
                        break
                    receiver = asyncio.create_task(websocket.receive_text())
                if getter not in done:
                    getter.cancel()
        except WebSocketDisconnect:
            pass
        finally:
            receiver.cancel()
            logger.debug("Update stream closed", extra={"user_id": str(user_id)})


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(note_id, current_user_id)
    return NoteResponse.from_note(note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(note_id, current_user_id)
    note = await note_service.update_note(note, request.changes())
    return NoteResponse.from_note(note)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(note_id, current_user_id)
    await note_service.delete_note(note)


@router.post("/{note_id}/files", response_model=FileResponse, status_code=201)
async def upload_file(
    note_id: UUID,
    upload: UploadFile = FormFile(...),
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(note_id, current_user_id)
    filename = upload.filename or "upload"
    storage = note_service.storage
    if upload.size is not None:
        storage.check(filename, upload.size)
    # one byte past the limit is enough for save() to reject it
    data = await upload.read(storage.max_bytes + 1)
    file = await note_service.attach_file(
        note,
        filename,
        upload.content_type or "application/octet-stream",
        data,
    )
    return FileResponse.from_file(file)


@router.delete("/{note_id}/files/{file_id}", status_code=204)
async def delete_file(
    note_id: UUID,
    file_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(note_id, current_user_id)
    file = await note_service.get_file(file_id, note)
    await note_service.delete_file(file)
