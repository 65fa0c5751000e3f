"""Health check API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.pubsub import PubSub
from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session
from .deps import get_pubsub

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    session: AsyncSession = Depends(get_db_session),
    bus: PubSub = Depends(get_pubsub),
):
    """Database and notification bus status."""
    health_service = HealthService(session, bus)
    return await health_service.get_health_status()
