"""Composition root - wires the dev server's services for one add-on."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from devserver.constants import DEBOUNCE_INTERVAL, IS_PRIVILEGED
from devserver.live.broadcaster import NotificationBroadcaster
from devserver.manifest.reader import AddOnManifestReader
from devserver.manifest.types import AdditionalAddOnInfo
from devserver.models.addon_directory import AddOnDirectory
from devserver.models.options import StartCommandOptions
from devserver.services.build_coordinator import BuildCoordinator
from devserver.services.script_manager import ScriptManager
from devserver.watch.tracker import FileChangeTracker
from devserver.watch.watcher import SourceWatcher

logger = logging.getLogger(__name__)


def get_additional_info() -> AdditionalAddOnInfo:
    return AdditionalAddOnInfo(privileged=IS_PRIVILEGED)


def get_script_manager(root_directory: Path) -> ScriptManager:
    return ScriptManager(root_directory)


def get_manifest_reader(output_directory: Path) -> AddOnManifestReader:
    return AddOnManifestReader(output_directory, additional_info=get_additional_info())


@dataclass
class DevServerContext:
    """Everything the running server needs, created once per start command."""

    options: StartCommandOptions
    add_on_directory: AddOnDirectory
    script_manager: ScriptManager
    manifest_reader: AddOnManifestReader
    broadcaster: NotificationBroadcaster
    tracker: FileChangeTracker
    coordinator: BuildCoordinator
    watcher: SourceWatcher


def build_context(
    options: StartCommandOptions,
    add_on_directory: AddOnDirectory,
    script_manager: Optional[ScriptManager] = None,
    manifest_reader: Optional[AddOnManifestReader] = None,
    debounce_interval: float = DEBOUNCE_INTERVAL,
) -> DevServerContext:
    """Create and connect the services for serving add_on_directory."""
    script_manager = script_manager or get_script_manager(add_on_directory.root_dir_path)
    manifest_reader = manifest_reader or get_manifest_reader(add_on_directory.output_dir_path)
    broadcaster = NotificationBroadcaster()
    tracker = FileChangeTracker(debounce_interval=debounce_interval)

    coordinator = BuildCoordinator(
        script_manager=script_manager,
        manifest_reader=manifest_reader,
        broadcaster=broadcaster,
        add_on_directory=add_on_directory,
        options=options,
    )
    coordinator.attach(tracker)

    watcher = SourceWatcher(
        tracker=tracker,
        add_on_id=add_on_directory.add_on_id,
        src_directory=add_on_directory.src_dir_path,
        root_directory=add_on_directory.root_dir_path,
    )

    logger.debug(f"Created server context for '{add_on_directory.add_on_id}'")
    return DevServerContext(
        options=options,
        add_on_directory=add_on_directory,
        script_manager=script_manager,
        manifest_reader=manifest_reader,
        broadcaster=broadcaster,
        tracker=tracker,
        coordinator=coordinator,
        watcher=watcher,
    )
