"""Build coordinator - rebuilds an add-on for each change batch and notifies live runtimes."""

import asyncio
import logging
from typing import Dict, Optional

from devserver.live.broadcaster import NotificationBroadcaster
from devserver.manifest.model import AddOnManifest
from devserver.manifest.reader import AddOnManifestReader
from devserver.models.addon_directory import AddOnDirectory
from devserver.models.messages import LiveUpdateMessage
from devserver.models.options import BuildCommandOptions
from devserver.services.script_manager import ScriptManager
from devserver.utils import log_validation_errors
from devserver.watch.tracker import ChangeBatch, FileChangeTracker

logger = logging.getLogger(__name__)


class BuildCoordinator:
    """Runs the rebuild cycle for change batches.

    Batches for the same add-on id run one at a time in arrival order;
    batches for different ids may overlap. Nothing raised inside a cycle
    escapes: failures are logged and reported as an unsuccessful build.
    """

    def __init__(
        self,
        script_manager: ScriptManager,
        manifest_reader: AddOnManifestReader,
        broadcaster: NotificationBroadcaster,
        add_on_directory: AddOnDirectory,
        options: BuildCommandOptions,
    ):
        self.script_manager = script_manager
        self.manifest_reader = manifest_reader
        self.broadcaster = broadcaster
        self.add_on_directory = add_on_directory
        self.options = options
        self._locks: Dict[str, asyncio.Lock] = {}
        # Serialized manifest last announced per id, seeded from the startup manifest
        self._snapshots: Dict[str, str] = {}

        if add_on_directory.manifest is not None:
            self._snapshots[add_on_directory.add_on_id] = add_on_directory.manifest.to_json()

    def attach(self, tracker: FileChangeTracker) -> None:
        """Register on_change as the tracker's action."""
        tracker.register_action(self.on_change)

    def snapshot(self, add_on_id: str) -> Optional[str]:
        return self._snapshots.get(add_on_id)

    async def on_change(self, batch: ChangeBatch) -> Optional[LiveUpdateMessage]:
        """Handle one batch of changed files.

        Returns:
            The message that was broadcast, or None if the cycle failed unexpectedly
        """
        lock = self._locks.setdefault(batch.add_on_id, asyncio.Lock())
        async with lock:
            try:
                return await self._run_cycle(batch)
            except Exception as e:
                logger.error(f"Rebuild for '{batch.add_on_id}' failed: {e}", exc_info=True)
                return None

    async def _run_cycle(self, batch: ChangeBatch) -> LiveUpdateMessage:
        changed_files = sorted(batch.changed_files)
        logger.info(f"Rebuilding '{batch.add_on_id}' after {len(changed_files)} change(s)")
        for path in changed_files:
            logger.debug(f"  changed: {path}")

        is_build_successful = await self._build()

        read_result = self.manifest_reader.read()
        manifest: Optional[AddOnManifest] = read_result.manifest
        if not read_result.success:
            log_validation_errors(logger, read_result.validation)

        is_manifest_changed = self._update_snapshot(batch.add_on_id, manifest)

        if is_build_successful and manifest is not None:
            name = manifest.name
            self.script_manager.override_global_console(
                self.add_on_directory.output_dir_path,
                name if isinstance(name, str) and name else batch.add_on_id,
            )
            logger.info(f"Rebuilt '{batch.add_on_id}'")
        else:
            await self.script_manager.clean_directory_and_add_manifest(
                self.add_on_directory.output_dir_path,
                self.add_on_directory.src_manifest_path,
            )
            if not is_build_successful:
                logger.error(f"Build failed for '{batch.add_on_id}'")

        message = LiveUpdateMessage.source_code_changed(
            add_on_id=batch.add_on_id,
            changed_files=changed_files,
            is_build_successful=is_build_successful,
            is_manifest_changed=is_manifest_changed,
            manifest=manifest.manifest_properties if manifest is not None else None,
        )
        await self.broadcaster.broadcast(message)
        return message

    async def _build(self) -> bool:
        output_dir = self.add_on_directory.output_dir_path
        await self.script_manager.clean_directory(output_dir)
        if self.options.transpiler:
            return await self.script_manager.transpile(self.options.transpiler)
        return await self.script_manager.copy_static_files(self.add_on_directory.src_dir_path, output_dir)

    def _update_snapshot(self, add_on_id: str, manifest: Optional[AddOnManifest]) -> bool:
        if manifest is None:
            return False
        serialized = manifest.to_json()
        if self._snapshots.get(add_on_id) == serialized:
            return False
        self._snapshots[add_on_id] = serialized
        return True
