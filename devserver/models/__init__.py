"""Data models shared across the add-on scripts."""

from .messages import (
    MESSAGE_VERSION,
    AddOnAction,
    LiveUpdateMessage,
    SourceChangedPayload,
    parse_message,
)
from .options import BuildCommandOptions, PackageCommandOptions, StartCommandOptions

__all__ = [
    "MESSAGE_VERSION",
    "AddOnAction",
    "LiveUpdateMessage",
    "SourceChangedPayload",
    "parse_message",
    "BuildCommandOptions",
    "PackageCommandOptions",
    "StartCommandOptions",
]
