"""Unit tests for NoteService: ingestion, CRUD, notifications and file cleanup."""

import uuid
from pathlib import Path

import pytest

from noted.core.exceptions import FileRemovalError, NotFoundError, NoteValidationError, StorageError
from noted.core.repositories.file_repository import FileRepository
from noted.core.repositories.note_repository import NoteRepository
from noted.core.repositories.tag_repository import TagRepository


def _expected(user_id):
    return (f"note-update:{user_id}", {"event": "notes_updated", "user_id": str(user_id)})


class TestIngest:
    @pytest.mark.asyncio
    async def test_shopping_example(self, note_service, bus, test_user):
        note = await note_service.ingest_note(test_user.id, "Shopping\nBuy milk #errands #food")

        assert note.title == "Shopping"
        assert note.body == "Buy milk #errands #food"
        assert set(note.tag_names) == {"errands", "food"}
        assert bus.published == [_expected(test_user.id)]

        fetched = await note_service.get_note(note.id)
        assert set(fetched.tag_names) == {"errands", "food"}

    @pytest.mark.asyncio
    async def test_repeated_tags_reuse_rows(self, note_service, test_session, test_user):
        first = await note_service.ingest_note(test_user.id, "One #work #work")
        second = await note_service.ingest_note(test_user.id, "Two\n#work #home")

        tags = await TagRepository(test_session).list_for_user(test_user.id)
        assert [t.name for t in tags] == ["home", "work"]
        assert first.tag_names == ["work"]
        assert second.tag_names == ["home", "work"]

    @pytest.mark.asyncio
    async def test_long_hashtag(self, note_service, test_user):
        name = "z" * 150
        note = await note_service.ingest_note(test_user.id, f"Long\n#{name}")
        assert note.tag_names == [name]

    @pytest.mark.asyncio
    async def test_no_tags(self, note_service, test_user):
        note = await note_service.ingest_note(test_user.id, "plain title")
        assert (note.title, note.body, note.tag_names) == ("plain title", "", [])

    @pytest.mark.asyncio
    async def test_failed_insert_rolls_back_tags_and_stays_silent(
        self, note_service, bus, test_session, test_user, monkeypatch
    ):
        async def fail(*args, **kwargs):
            raise StorageError("insert failed")

        monkeypatch.setattr(note_service.note_repo, "create", fail)
        user_id = test_user.id

        with pytest.raises(StorageError):
            await note_service.ingest_note(user_id, "Broken #orphan")

        assert await TagRepository(test_session).list_for_user(user_id) == []
        assert bus.published == []


class TestNotifications:
    @pytest.mark.asyncio
    async def test_create_notifies_once(self, note_service, bus, test_user):
        await note_service.create_note(test_user.id, "t", "b", ["x"])
        assert bus.published == [_expected(test_user.id)]

    @pytest.mark.asyncio
    async def test_update_notifies_once(self, note_service, bus, test_user):
        note = await note_service.create_note(test_user.id, "t", "b")
        bus.published.clear()

        updated = await note_service.update_note(note, {"title": "new"})
        assert updated.title == "new"
        assert bus.published == [_expected(test_user.id)]

    @pytest.mark.asyncio
    async def test_failed_validation_is_silent(self, note_service, bus, test_user):
        note = await note_service.create_note(test_user.id, "t", "b")
        bus.published.clear()

        with pytest.raises(NoteValidationError):
            await note_service.update_note(note, {"title": None})
        with pytest.raises(NoteValidationError):
            await note_service.create_note(test_user.id, 123, "b")
        assert bus.published == []

    @pytest.mark.asyncio
    async def test_delete_does_not_notify(self, note_service, bus, test_user):
        note = await note_service.create_note(test_user.id, "t", "b")
        bus.published.clear()

        await note_service.delete_note(note)
        assert bus.published == []

    @pytest.mark.asyncio
    async def test_topic_is_per_owner(self, note_service, bus, test_user, other_user):
        await note_service.create_note(test_user.id, "mine", "")
        await note_service.create_note(other_user.id, "theirs", "")
        assert bus.topics() == [f"note-update:{test_user.id}", f"note-update:{other_user.id}"]


class TestReadAccess:
    @pytest.mark.asyncio
    async def test_other_users_note_is_not_found(self, note_service, test_user, other_user):
        note = await note_service.create_note(test_user.id, "private", "")
        with pytest.raises(NotFoundError):
            await note_service.get_note(note.id, other_user.id)
        assert (await note_service.get_note(note.id, test_user.id)).id == note.id

    @pytest.mark.asyncio
    async def test_list_notes(self, note_service, test_user, other_user):
        await note_service.create_note(test_user.id, "a", "")
        await note_service.create_note(test_user.id, "b", "")
        await note_service.create_note(other_user.id, "c", "")
        assert {n.title for n in await note_service.list_notes(test_user.id)} == {"a", "b"}


class TestFiles:
    @pytest.mark.asyncio
    async def test_attach_and_delete_file(self, note_service, test_user):
        note = await note_service.create_note(test_user.id, "t", "")
        file = await note_service.attach_file(note, "a.txt", "text/plain", b"hello")
        assert Path(file.path).read_bytes() == b"hello"

        assert (await note_service.get_file(file.id, note)).id == file.id
        assert [f.id for f in await note_service.list_files(note.id)] == [file.id]
        await note_service.delete_file(file)
        assert not Path(file.path).exists()
        assert (await note_service.get_note(note.id)).files == []

    @pytest.mark.asyncio
    async def test_file_of_other_note_is_not_found(self, note_service, test_user):
        one = await note_service.create_note(test_user.id, "one", "")
        two = await note_service.create_note(test_user.id, "two", "")
        file = await note_service.attach_file(one, "a.txt", "text/plain", b"x")
        with pytest.raises(NotFoundError):
            await note_service.get_file(file.id, two)

    @pytest.mark.asyncio
    async def test_delete_note_removes_all_files(self, note_service, test_session, test_user):
        note = await note_service.create_note(test_user.id, "t", "", ["kept"])
        first = await note_service.attach_file(note, "a.txt", "text/plain", b"1")
        second = await note_service.attach_file(note, "b.txt", "text/plain", b"2")

        await note_service.delete_note(note)

        assert not Path(first.path).exists()
        assert not Path(second.path).exists()
        with pytest.raises(NotFoundError):
            await note_service.get_note(note.id)
        assert await FileRepository(test_session).list_for_note(note.id) == []
        assert [t.name for t in await TagRepository(test_session).list_for_user(test_user.id)] == ["kept"]

    @pytest.mark.asyncio
    async def test_failed_removal_aborts_delete(self, note_service, storage, session_maker, test_user, monkeypatch):
        note = await note_service.create_note(test_user.id, "t", "")
        first = await note_service.attach_file(note, "a.txt", "text/plain", b"1")
        second = await note_service.attach_file(note, "b.txt", "text/plain", b"2")
        # the rollback expires these instances
        note_id = note.id
        paths = {first.path, second.path}
        file_ids = {first.id, second.id}

        real_remove = storage.remove
        removed = []

        def remove_then_fail(path):
            if removed:
                raise FileRemovalError(path, OSError("permission denied"))
            real_remove(path)
            removed.append(path)

        monkeypatch.setattr(storage, "remove", remove_then_fail)

        with pytest.raises(FileRemovalError):
            await note_service.delete_note(note)

        assert len(removed) == 1
        (untouched,) = paths - set(removed)
        assert Path(untouched).exists()

        async with session_maker() as session:
            still_there = await NoteRepository(session).get(note_id)
            assert {f.id for f in still_there.files} == file_ids
