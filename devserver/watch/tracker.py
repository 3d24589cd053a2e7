"""File change tracker - batches file changes per add-on and debounces delivery."""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set

from devserver.constants import DEBOUNCE_INTERVAL

logger = logging.getLogger(__name__)


@dataclass
class ChangeBatch:
    """Files changed for one add-on during one quiet period."""

    add_on_id: str
    changed_files: Set[str] = field(default_factory=set)


ChangeAction = Callable[[ChangeBatch], Any]


class FileChangeTracker:
    """Collects changed paths per add-on id and hands each batch to a registered action.

    Each id has its own trailing debounce timer: every track() call for an id
    re-arms that id's timer, so a burst of edits is delivered once the id has
    been quiet for debounce_interval seconds. Ids never delay each other.

    Must be used from the event loop thread; other threads should go through
    loop.call_soon_threadsafe(tracker.track, ...).
    """

    def __init__(
        self,
        debounce_interval: float = DEBOUNCE_INTERVAL,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.debounce_interval = debounce_interval
        self._loop = loop
        self._changes: Dict[str, Set[str]] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._action: Optional[ChangeAction] = None
        self._tasks: Set[asyncio.Future] = set()

    def register_action(self, action: Optional[ChangeAction]) -> None:
        """Set the action run for each delivered batch, replacing any previous one."""
        self._action = action

    def track(self, add_on_id: str, path: str) -> None:
        """Add a changed path to the add-on's pending batch and restart its timer."""
        loop = self._loop or asyncio.get_running_loop()
        self._changes.setdefault(add_on_id, set()).add(path)

        timer = self._timers.get(add_on_id)
        if timer is not None:
            timer.cancel()
        self._timers[add_on_id] = loop.call_later(self.debounce_interval, self._trigger_action, add_on_id)

    def is_pending(self, add_on_id: str) -> bool:
        return add_on_id in self._changes

    def pending(self) -> Dict[str, Set[str]]:
        """Snapshot of the batches still waiting for their timer."""
        return {add_on_id: set(paths) for add_on_id, paths in self._changes.items()}

    async def drain(self) -> None:
        """Wait for actions already dispatched to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Drop pending batches and cancel their timers."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._changes.clear()

    def _trigger_action(self, add_on_id: str) -> None:
        self._timers.pop(add_on_id, None)
        changes = self._changes.pop(add_on_id, None)
        if not changes:
            return

        if self._action is None:
            logger.debug(f"No action registered, dropping {len(changes)} change(s) for '{add_on_id}'")
            return

        batch = ChangeBatch(add_on_id=add_on_id, changed_files=changes)
        try:
            result = self._action(batch)
        except Exception as e:
            logger.error(f"Change action failed for '{add_on_id}': {e}")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Change action failed: {error}")
