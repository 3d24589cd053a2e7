"""Listing and resource data served to the host application."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from devserver.constants import (
    DEFAULT_ADD_ON_NAME,
    MANIFEST_JSON,
    SUPPORTED_APPS,
    SUPPORTED_LANGUAGES,
)
from devserver.manifest.model import AddOnManifest
from devserver.models.addon_directory import AddOnDirectory


def get_base_url(scheme: str, host: str) -> str:
    return f"{scheme}://{host}"


def get_add_on_listing_data(
    manifest: Optional[AddOnManifest],
    add_on_directory: AddOnDirectory,
    base_url: str,
) -> List[Dict[str, Any]]:
    """Build the add-on listing for GET /.

    Falls back to the manifest read at startup for the id and version when
    the current manifest did not validate.
    """
    startup_manifest = add_on_directory.manifest
    add_on_id = (manifest.id if manifest is not None else None) or (
        startup_manifest.id if startup_manifest is not None else None
    )
    version = (manifest.version if manifest is not None else None) or (
        startup_manifest.version if startup_manifest is not None else None
    )

    name = manifest.name if manifest is not None else None
    if not isinstance(name, str) or not name:
        name = DEFAULT_ADD_ON_NAME

    entry_points = []
    if manifest is not None:
        for entrypoint in manifest.entry_points:
            discoverable = entrypoint.discoverable
            entry_points.append(
                {**entrypoint.entrypoint_properties, "discoverable": True if discoverable is None else discoverable}
            )

    return [
        {
            "addonId": add_on_id,
            "versionString": version,
            "supportedLanguages": list(SUPPORTED_LANGUAGES),
            "supportedApps": list(SUPPORTED_APPS),
            "downloadUrl": f"{base_url}/{add_on_id}/{MANIFEST_JSON}",
            "addon": {"localizedMetadata": {"name": name}},
            "entryPoints": entry_points,
        }
    ]


def get_resources(add_on_id: str, output_directory: Path, base_url: str) -> List[str]:
    """URLs of every file in the output directory, skipping dotfiles."""
    output_directory = Path(output_directory)
    if not output_directory.is_dir():
        return []

    resources = []
    for folder, _, files in os.walk(output_directory):
        for name in sorted(files):
            if name.startswith("."):
                continue
            relative = (Path(folder) / name).relative_to(output_directory).as_posix()
            resources.append(f"{base_url}/{add_on_id}/{relative}")
    return resources
