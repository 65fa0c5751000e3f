"""Broadcasts "notes changed for user X" so live sessions re-query."""

import logging
from typing import Any, Dict
from uuid import UUID

from .pubsub import PubSub

logger = logging.getLogger(__name__)

NOTES_UPDATED = "notes_updated"


def note_topic(user_id: Any) -> str:
    return f"note-update:{user_id}"


def notes_updated_payload(user_id: Any) -> Dict[str, str]:
    # no note data on purpose: subscribers must re-query for current state
    return {"event": NOTES_UPDATED, "user_id": str(user_id)}


class UpdateNotifier:
    """Publishes on the per-user topic. Call only after a successful commit."""

    def __init__(self, bus: PubSub):
        self.bus = bus

    async def publish(self, user_id: UUID) -> None:
        topic = note_topic(user_id)
        await self.bus.publish(topic, notes_updated_payload(user_id))
        logger.debug("Notes updated notification sent", extra={"topic": topic})
