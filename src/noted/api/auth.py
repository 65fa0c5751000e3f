"""Authentication API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import TelegramLoginRequest, TokenResponse
from ..core.services import AuthService
from ..database import get_db_session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/telegram", response_model=TokenResponse)
async def telegram_login(
    request: TelegramLoginRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """Exchange a Telegram login widget payload for an access token."""
    auth_service = AuthService(session)
    return await auth_service.login_with_telegram(request)
