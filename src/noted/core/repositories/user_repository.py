"""User repository for database operations."""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import FieldError, NotFoundError, NoteValidationError
from ..models.user import User
from ..unit_of_work import unit_of_work


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[User]:
        stmt = select(User).where(User.telegram_id == telegram_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_from_telegram(self, telegram_id: Any, telegram_data: Dict[str, Any]) -> User:
        """Get or create the user for a Telegram account, refreshing the profile."""
        errors = []
        if telegram_id is None:
            errors.append(FieldError("telegram_id", "can't be blank"))
        elif not isinstance(telegram_id, int) or isinstance(telegram_id, bool):
            errors.append(FieldError("telegram_id", "must be an integer"))
        if not telegram_data:
            errors.append(FieldError("telegram_data", "can't be blank"))
        if errors:
            raise NoteValidationError(errors)

        async with unit_of_work(self.session):
            user = await self.get_by_telegram_id(telegram_id)
            if user is None:
                user = User(telegram_id=telegram_id, telegram_data=dict(telegram_data))
                self.session.add(user)
            else:
                user.telegram_data = dict(telegram_data)
            await self.session.flush()
        return user
