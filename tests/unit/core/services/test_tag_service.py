"""Unit tests for TagService."""

import pytest

from noted.core.exceptions import NotFoundError
from noted.core.services.tag_service import TagService


@pytest.mark.asyncio
async def test_create_list_delete(test_session, test_user):
    svc = TagService(test_session)
    tag = await svc.create_tag(test_user.id, "#Reading")
    await svc.ensure_tags(["music"], test_user.id)

    assert [t.name for t in await svc.list_tags(test_user.id)] == ["music", "reading"]

    await svc.delete_tag(tag)
    assert [t.name for t in await svc.list_tags(test_user.id)] == ["music"]


@pytest.mark.asyncio
async def test_get_tag_checks_owner(test_session, test_user, other_user):
    svc = TagService(test_session)
    tag = await svc.create_tag(test_user.id, "private")

    assert (await svc.get_tag(tag.id, test_user.id)).id == tag.id
    with pytest.raises(NotFoundError):
        await svc.get_tag(tag.id, other_user.id)


@pytest.mark.asyncio
async def test_update_tag(test_session, test_user):
    svc = TagService(test_session)
    tag = await svc.create_tag(test_user.id, "draft")
    updated = await svc.update_tag(tag, {"name": "Final"})
    assert updated.name == "final"
