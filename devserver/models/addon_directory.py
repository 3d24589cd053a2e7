"""Add-on directory information the scripts run against."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from devserver.constants import MANIFEST_JSON
from devserver.manifest.model import AddOnManifest


@dataclass(frozen=True)
class AddOnDirectory:
    """Layout of the add-on being served.

    manifest is the manifest read when the server started; request handlers
    fall back to it when the current manifest fails to validate.
    """

    root_dir_path: Path
    src_dir_name: str
    output_dir_name: str
    manifest: Optional[AddOnManifest] = None

    @property
    def root_dir_name(self) -> str:
        return self.root_dir_path.name

    @property
    def src_dir_path(self) -> Path:
        return self.root_dir_path / self.src_dir_name

    @property
    def output_dir_path(self) -> Path:
        return self.root_dir_path / self.output_dir_name

    @property
    def src_manifest_path(self) -> Path:
        return self.src_dir_path / MANIFEST_JSON

    @property
    def add_on_id(self) -> str:
        """Id the add-on is served and notified under."""
        if self.manifest is not None and self.manifest.id:
            return self.manifest.id
        return self.root_dir_name
