"""
Unit tests for ORM models.
"""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from noted.core.models import File, Note, Tag, User


class TestTagModel:
    def test_normalize_name(self):
        assert Tag.normalize_name("  #Work ") == "work"
        assert Tag.normalize_name("#") == ""

    @pytest.mark.asyncio
    async def test_name_normalized_on_insert(self, test_session, test_user):
        tag = Tag(name="#Mixed", user_id=test_user.id)
        test_session.add(tag)
        await test_session.commit()
        assert tag.name == "mixed"

    @pytest.mark.asyncio
    async def test_name_unique_per_user(self, test_session, test_user):
        test_session.add_all([Tag(name="dup", user_id=test_user.id), Tag(name="dup", user_id=test_user.id)])
        with pytest.raises(IntegrityError):
            await test_session.flush()
        await test_session.rollback()

    def test_new_tag_has_empty_notes(self):
        assert Tag(name="x").notes == []


class TestNoteModel:
    def test_new_note_has_empty_collections(self):
        note = Note(title="t", body="b")
        assert note.tags == []
        assert note.files == []

    def test_tag_names_sorted(self):
        note = Note(title="t", body="", tags=[Tag(name="b"), Tag(name="a")])
        assert note.tag_names == ["a", "b"]

    def test_is_owned_by(self):
        uid = uuid.uuid4()
        note = Note(title="t", body="", user_id=uid)
        assert note.is_owned_by(uid)
        assert not note.is_owned_by(uuid.uuid4())

    def test_repr_truncates_long_titles(self):
        assert "..." in repr(Note(title="x" * 50, body=""))

    @pytest.mark.asyncio
    async def test_defaults_and_timestamps(self, test_session, test_user):
        note = Note(user_id=test_user.id)
        test_session.add(note)
        await test_session.commit()

        assert isinstance(note.id, uuid.UUID)
        assert note.title == ""
        assert note.body == ""
        assert note.created_at is not None
        assert note.updated_at is not None

    @pytest.mark.asyncio
    async def test_files_cascade_with_note(self, test_session, test_user):
        note = Note(title="t", body="", user_id=test_user.id)
        note.files.append(File(path="/tmp/x", mime_type="text/plain"))
        test_session.add(note)
        await test_session.commit()

        await test_session.delete(note)
        await test_session.commit()

        assert (await test_session.execute(select(File))).scalars().all() == []


class TestUserModel:
    def test_display_name_fallbacks(self):
        assert User(telegram_id=1, telegram_data={"first_name": "A", "last_name": "B"}).display_name == "A B"
        assert User(telegram_id=1, telegram_data={"username": "ab"}).display_name == "ab"
        assert User(telegram_id=1, telegram_data={}).display_name == "1"

    @pytest.mark.asyncio
    async def test_profile_round_trips(self, test_session):
        user = User(telegram_id=5, telegram_data={"id": 5, "photo_url": "https://t.me/i/5.jpg"})
        test_session.add(user)
        await test_session.commit()

        stored = (
            await test_session.execute(
                select(User).where(User.id == user.id).execution_options(populate_existing=True)
            )
        ).scalar_one()
        assert stored.telegram_data == {"id": 5, "photo_url": "https://t.me/i/5.jpg"}
