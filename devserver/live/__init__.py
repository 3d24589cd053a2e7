"""Live-update channel to add-on runtimes."""

from .broadcaster import LiveConnection, NotificationBroadcaster, WebSocketConnection

__all__ = ["LiveConnection", "NotificationBroadcaster", "WebSocketConnection"]
