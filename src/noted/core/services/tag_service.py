"""Tag service implementation."""

from typing import Any, Iterable, List, Mapping, Optional, Set
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import NotFoundError
from ..models.tag import Tag
from ..repositories.tag_repository import TagRepository
from .interfaces import ITagService


class TagService(ITagService):
    """Tag service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repo = TagRepository(session)

    async def ensure_tags(self, tag_names: Iterable[str], user_id: UUID) -> Set[Tag]:
        return await self.tag_repo.ensure_tags(tag_names, user_id)

    async def list_tags(self, user_id: UUID) -> List[Tag]:
        return await self.tag_repo.list_for_user(user_id)

    async def get_tag(self, tag_id: UUID, user_id: Optional[UUID] = None) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if user_id is not None and tag.user_id != user_id:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def create_tag(self, user_id: UUID, name: str) -> Tag:
        return await self.tag_repo.create({"user_id": user_id, "name": name})

    async def update_tag(self, tag: Tag, attrs: Mapping[str, Any]) -> Tag:
        return await self.tag_repo.update(tag, attrs)

    async def delete_tag(self, tag: Tag) -> None:
        await self.tag_repo.delete(tag)
