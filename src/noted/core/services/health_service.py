"""Health service implementation."""

import time
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..pubsub import PubSub
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, bus: PubSub):
        self.session = session
        self.bus = bus
        self.settings = get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        db_health = await self.check_database_health()
        pubsub_health = await self.check_pubsub_health()

        healthy = db_health["connected"] and pubsub_health["connected"]
        return HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            version=self.settings.app_version,
            checks={"database": db_health, "pubsub": pubsub_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        start = time.perf_counter()
        try:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
        except Exception as e:
            return {"connected": False, "status": "unhealthy", "error": str(e)}
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def check_pubsub_health(self) -> Dict[str, Any]:
        connected = await self.bus.healthy()
        return {
            "connected": connected,
            "status": "healthy" if connected else "unhealthy",
            "backend": self.settings.pubsub_backend,
        }
