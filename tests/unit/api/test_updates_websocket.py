"""WebSocket update stream (/api/notes/updates)."""

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from noted.core.notifier import note_topic, notes_updated_payload
from noted.main import app
from noted.security.jwt import create_access_token


@pytest.fixture
def live_client():
    with TestClient(app) as client:
        yield client


def test_stream_forwards_user_notifications(live_client):
    user_id = uuid.uuid4()
    token = create_access_token({"sub": str(user_id)})
    bus = live_client.app.state.pubsub

    with live_client.websocket_connect(f"/api/notes/updates?token={token}") as ws:
        assert ws.receive_json() == {"event": "subscribed", "topic": note_topic(user_id)}

        live_client.portal.call(bus.publish, note_topic(uuid.uuid4()), {"event": "not for us"})
        live_client.portal.call(bus.publish, note_topic(user_id), notes_updated_payload(user_id))

        assert ws.receive_json() == {"event": "notes_updated", "user_id": str(user_id)}


def test_subscription_released_on_disconnect(live_client):
    user_id = uuid.uuid4()
    token = create_access_token({"sub": str(user_id)})
    bus = live_client.app.state.pubsub

    with live_client.websocket_connect(f"/api/notes/updates?token={token}") as ws:
        ws.receive_json()
        assert bus.subscriber_count(note_topic(user_id)) == 1

    # give the server side a moment to run its cleanup
    for _ in range(50):
        if bus.subscriber_count(note_topic(user_id)) == 0:
            break
        live_client.portal.call(asyncio.sleep, 0.01)
    assert bus.subscriber_count(note_topic(user_id)) == 0


def test_invalid_token_closes_with_policy_violation(live_client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with live_client.websocket_connect("/api/notes/updates?token=garbage") as ws:
            ws.receive_json()
    assert exc_info.value.code == 1008
