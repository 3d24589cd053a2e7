"""Source watcher - forwards filesystem events from watchdog to the change tracker."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from devserver.watch.tracker import FileChangeTracker

logger = logging.getLogger(__name__)


def is_hidden(relative_path: str) -> bool:
    """True when any component of the path is a dotfile or dot-directory."""
    return any(part.startswith(".") and part not in (".", "..") for part in Path(relative_path).parts)


class AddOnEventHandler(FileSystemEventHandler):
    """Turns file create/modify/delete/move events into changed paths."""

    def __init__(self, on_path: Callable[[str], None]):
        super().__init__()
        self._on_path = on_path

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._dispatch(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._dispatch(event)
        dest_path = getattr(event, "dest_path", None)
        if dest_path and not event.is_directory:
            self._on_path(os.fsdecode(dest_path))

    def _dispatch(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._on_path(os.fsdecode(event.src_path))


class SourceWatcher:
    """Watches an add-on's source directory and tracks every changed file.

    watchdog delivers events on its own thread; paths are handed to the
    tracker on the event loop with call_soon_threadsafe. Paths are reported
    relative to root_directory using forward slashes, e.g. "src/code.js".
    """

    def __init__(
        self,
        tracker: FileChangeTracker,
        add_on_id: str,
        src_directory: Path,
        root_directory: Path,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        observer_factory: Callable = Observer,
    ):
        self.tracker = tracker
        self.add_on_id = add_on_id
        self.src_directory = Path(src_directory)
        self.root_directory = Path(root_directory)
        self._loop = loop
        self._observer_factory = observer_factory
        self._observer = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Start watching. Restarts the observer if already running."""
        if self._observer is not None:
            self.stop()

        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        observer = self._observer_factory()
        observer.schedule(AddOnEventHandler(self.on_path), str(self.src_directory), recursive=True)
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self.src_directory} for add-on '{self.add_on_id}'")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.debug(f"Stopped watching {self.src_directory}")

    def on_path(self, path: str) -> None:
        """Called from the watchdog thread for every changed file."""
        relative = Path(os.path.relpath(path, self.root_directory)).as_posix()
        if is_hidden(relative):
            return
        if self._loop is None or self._loop.is_closed():
            logger.debug(f"Event loop unavailable, ignoring change: {relative}")
            return
        self._loop.call_soon_threadsafe(self.tracker.track, self.add_on_id, relative)
