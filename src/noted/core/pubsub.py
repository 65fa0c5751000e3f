"""
Publish/subscribe bus addressed by string topic.

The bus is built once at startup (``create_pubsub``) and handed to the
services that publish; consumers (the WebSocket stream) subscribe through
the same object. Delivery is fire-and-forget: no persistence, no replay,
subscribers only see what is published while they are subscribed.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Set

from ..config import Settings, get_settings
from .redis_client import RedisClient

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]


class Subscription(ABC):
    """Async-iterable stream of payloads for one topic."""

    def __init__(self, topic: str):
        self.topic = topic

    @abstractmethod
    async def get(self) -> Payload:
        """Wait for the next payload."""

    def __aiter__(self):
        return self

    async def __anext__(self) -> Payload:
        return await self.get()


class PubSub(ABC):
    """Bus interface the services depend on."""

    @abstractmethod
    async def publish(self, topic: str, payload: Payload) -> None:
        """Broadcast to current subscribers of ``topic``."""

    @abstractmethod
    def subscribe(self, topic: str):
        """Async context manager yielding a ``Subscription``."""

    async def start(self) -> None:
        """Acquire connections, if any."""

    async def stop(self) -> None:
        """Release connections, if any."""

    async def healthy(self) -> bool:
        return True


class _QueueSubscription(Subscription):
    def __init__(self, topic: str, queue: "asyncio.Queue[Payload]"):
        super().__init__(topic)
        self.queue = queue

    async def get(self) -> Payload:
        return await self.queue.get()

    def get_nowait(self) -> Optional[Payload]:
        try:
            return self.queue.get_nowait()
        except asyncio.QueueEmpty:
            return None


class InMemoryPubSub(PubSub):
    """In-process bus: one unbounded queue per live subscription."""

    def __init__(self):
        self._queues: Dict[str, Set[asyncio.Queue]] = defaultdict(set)

    async def publish(self, topic: str, payload: Payload) -> None:
        queues = self._queues.get(topic, ())
        for queue in list(queues):
            queue.put_nowait(payload)
        logger.debug("Published", extra={"topic": topic, "receivers": len(queues)})

    @asynccontextmanager
    async def subscribe(self, topic: str) -> AsyncIterator[_QueueSubscription]:
        queue: asyncio.Queue = asyncio.Queue()
        self._queues[topic].add(queue)
        try:
            yield _QueueSubscription(topic, queue)
        finally:
            subscribers = self._queues.get(topic)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._queues[topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._queues.get(topic, ()))


class _RedisSubscription(Subscription):
    def __init__(self, topic: str, pubsub):
        super().__init__(topic)
        self._pubsub = pubsub

    async def get(self) -> Payload:
        while True:
            message = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            if message and message.get("type") == "message":
                return json.loads(message["data"])


class RedisPubSub(PubSub):
    """Redis PUBLISH/SUBSCRIBE with JSON payloads; works across processes."""

    def __init__(self, client: Optional[RedisClient] = None):
        self.client = client or RedisClient()

    async def start(self) -> None:
        await self.client.connect()

    async def stop(self) -> None:
        await self.client.disconnect()

    async def healthy(self) -> bool:
        return await self.client.ping()

    async def publish(self, topic: str, payload: Payload) -> None:
        # the write this announces has already committed; never fail the caller
        try:
            receivers = await self.client.publish(topic, json.dumps(payload))
            logger.debug("Published", extra={"topic": topic, "receivers": receivers})
        except Exception as e:
            logger.error(f"Redis PUBLISH error for topic {topic}: {e}")

    @asynccontextmanager
    async def subscribe(self, topic: str) -> AsyncIterator[_RedisSubscription]:
        pubsub = self.client.pubsub()
        await pubsub.subscribe(topic)
        try:
            yield _RedisSubscription(topic, pubsub)
        finally:
            await pubsub.unsubscribe(topic)
            await pubsub.aclose()


def create_pubsub(settings: Optional[Settings] = None) -> PubSub:
    """Build the bus named by ``settings.pubsub_backend``."""
    settings = settings or get_settings()
    backend = settings.pubsub_backend.lower()
    if backend == "memory":
        return InMemoryPubSub()
    if backend == "redis":
        return RedisPubSub(RedisClient(settings.redis_url, settings.redis_max_connections))
    raise ValueError(f"Unknown pubsub backend: {settings.pubsub_backend}")
