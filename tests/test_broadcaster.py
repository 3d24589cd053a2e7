"""Tests for live-update fan-out."""

import json
from unittest.mock import MagicMock

import pytest
from starlette.websockets import WebSocketState

from devserver.live.broadcaster import NotificationBroadcaster, WebSocketConnection
from devserver.models.messages import LiveUpdateMessage


class FakeConnection:
    def __init__(self, fail: bool = False):
        self.closed = False
        self.fail = fail
        self.received = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            self.closed = True
            raise ConnectionError("client went away")
        self.received.append(data)


def make_message(files=("src/code.js",)) -> LiveUpdateMessage:
    return LiveUpdateMessage.source_code_changed(
        add_on_id="panel-1",
        changed_files=list(files),
        is_build_successful=True,
        is_manifest_changed=False,
    )


class TestNotificationBroadcaster:
    """Tests for NotificationBroadcaster."""

    @pytest.mark.asyncio
    async def test_sends_to_every_connection(self):
        broadcaster = NotificationBroadcaster()
        first, second = FakeConnection(), FakeConnection()
        broadcaster.register(first)
        broadcaster.register(second)

        delivered = await broadcaster.broadcast(make_message())

        assert delivered == 2
        assert first.received == second.received
        assert json.loads(first.received[0])["action"] == "SourceCodeChanged"

    @pytest.mark.asyncio
    async def test_disconnect_mid_broadcast(self):
        """A failing connection is dropped and the others still get the message."""
        broadcaster = NotificationBroadcaster()
        healthy, broken = FakeConnection(), FakeConnection(fail=True)
        broadcaster.register(healthy)
        broadcaster.register(broken)

        delivered = await broadcaster.broadcast(make_message())

        assert delivered == 1
        assert len(healthy.received) == 1
        assert broadcaster.count() == 1
        assert broadcaster.open_connections() == [healthy]

    @pytest.mark.asyncio
    async def test_closed_connections_are_removed(self):
        broadcaster = NotificationBroadcaster()
        closed = FakeConnection()
        closed.closed = True
        broadcaster.register(closed)

        assert await broadcaster.broadcast(make_message()) == 0
        assert broadcaster.count() == 0
        assert closed.received == []

    @pytest.mark.asyncio
    async def test_no_replay_for_late_joiners(self):
        broadcaster = NotificationBroadcaster()
        await broadcaster.broadcast(make_message())

        late = FakeConnection()
        broadcaster.register(late)
        await broadcaster.broadcast(make_message(files=("src/other.js",)))

        assert len(late.received) == 1
        assert json.loads(late.received[0])["payload"]["changedFiles"] == ["src/other.js"]

    def test_unregister_unknown_connection(self):
        broadcaster = NotificationBroadcaster()
        broadcaster.unregister(FakeConnection())

        assert broadcaster.count() == 0


class TestWebSocketConnection:
    """Tests for the WebSocket adapter."""

    def test_closed_reflects_socket_state(self):
        websocket = MagicMock()
        websocket.client_state = WebSocketState.CONNECTED
        websocket.application_state = WebSocketState.CONNECTED
        connection = WebSocketConnection(websocket)

        assert connection.closed is False

        websocket.client_state = WebSocketState.DISCONNECTED
        assert connection.closed is True
