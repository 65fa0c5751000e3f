"""Authentication service implementation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import create_access_token, verify_login
from ..repositories.user_repository import UserRepository
from ..schemas.auth import TelegramLoginRequest, TokenResponse, UserResponse
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.settings = get_settings()

    async def login_with_telegram(self, request: TelegramLoginRequest) -> TokenResponse:
        """Verify the widget payload, then get or create the matching user."""
        fields = request.fields()
        verify_login(fields)

        profile = {k: v for k, v in fields.items() if k != "hash"}
        user = await self.user_repo.upsert_from_telegram(request.id, profile)
        logger.info("User logged in", extra={"user_id": str(user.id)})

        token = create_access_token({"sub": str(user.id)})
        return TokenResponse(
            access_token=token,
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse(
                id=user.id,
                telegram_id=user.telegram_id,
                display_name=user.display_name,
                created_at=user.created_at,
            ),
        )
