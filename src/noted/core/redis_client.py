"""Redis connection used by the Redis-backed notification bus."""

import logging
from typing import Optional

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Thin wrapper holding one connection pool."""

    def __init__(self, url: Optional[str] = None, max_connections: Optional[int] = None):
        settings = get_settings()
        self.url = url or settings.redis_url
        self.max_connections = max_connections or settings.redis_max_connections
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.from_url(
                self.url,
                max_connections=self.max_connections,
                decode_responses=True,
            )
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis = None
            raise

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        try:
            return bool(await self.redis.ping())
        except Exception as e:
            logger.error(f"Redis PING error: {e}")
            return False

    async def publish(self, channel: str, message: str) -> int:
        """PUBLISH; returns the number of receivers."""
        if not self.redis:
            raise RuntimeError("Redis client is not connected")
        return await self.redis.publish(channel, message)

    def pubsub(self):
        if not self.redis:
            raise RuntimeError("Redis client is not connected")
        return self.redis.pubsub(ignore_subscribe_messages=True)
