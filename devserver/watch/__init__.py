"""Filesystem watching and change batching."""

from .tracker import ChangeAction, ChangeBatch, FileChangeTracker
from .watcher import AddOnEventHandler, SourceWatcher

__all__ = [
    "ChangeAction",
    "ChangeBatch",
    "FileChangeTracker",
    "AddOnEventHandler",
    "SourceWatcher",
]
