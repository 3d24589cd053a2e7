"""Notification broadcaster - fans live-update messages out to connected runtimes."""

import asyncio
import logging
from typing import List, Protocol, Set, runtime_checkable

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from devserver.models.messages import LiveUpdateMessage

logger = logging.getLogger(__name__)


@runtime_checkable
class LiveConnection(Protocol):
    """A client that can receive text frames and knows when it has closed."""

    @property
    def closed(self) -> bool:
        ...

    async def send_text(self, data: str) -> None:
        ...


class WebSocketConnection:
    """LiveConnection backed by a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    @property
    def closed(self) -> bool:
        return (
            self.websocket.client_state != WebSocketState.CONNECTED
            or self.websocket.application_state != WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)

    def __repr__(self) -> str:
        client = self.websocket.client
        return f"WebSocketConnection({client.host}:{client.port})" if client else "WebSocketConnection()"


class NotificationBroadcaster:
    """Tracks open live connections and pushes messages to all of them.

    Delivery is best effort: a connection that is closed or fails to send is
    dropped and the rest still get the message. Connections that join later
    do not get earlier messages.
    """

    def __init__(self):
        self._connections: Set[LiveConnection] = set()

    def register(self, connection: LiveConnection) -> None:
        self._connections.add(connection)
        logger.info(f"Live connection opened ({len(self._connections)} open)")

    def unregister(self, connection: LiveConnection) -> None:
        if connection in self._connections:
            self._connections.discard(connection)
            logger.info(f"Live connection closed ({len(self._connections)} open)")

    def open_connections(self) -> List[LiveConnection]:
        return [c for c in self._connections if not c.closed]

    def count(self) -> int:
        return len(self._connections)

    async def broadcast(self, message: LiveUpdateMessage) -> int:
        """Send a message to every open connection.

        Args:
            message: Message to serialize and send

        Returns:
            Number of connections the message was delivered to
        """
        targets = list(self._connections)
        if not targets:
            logger.debug(f"No live connections, skipping {message.action.value} for '{message.id}'")
            return 0

        data = message.to_json()
        results = await asyncio.gather(*(self._send(connection, data) for connection in targets))
        delivered = sum(results)
        logger.debug(f"Broadcast {message.action.value} for '{message.id}' to {delivered}/{len(targets)} connection(s)")
        return delivered

    async def _send(self, connection: LiveConnection, data: str) -> bool:
        if connection.closed:
            self.unregister(connection)
            return False
        try:
            await connection.send_text(data)
            return True
        except Exception as e:
            logger.warning(f"Dropping live connection {connection!r} after send failure: {e}")
            self.unregister(connection)
            return False
