"""Manifest reader - loads manifest.json from the build output and validates it."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from devserver.constants import MANIFEST_JSON
from devserver.manifest.model import AddOnManifest
from devserver.manifest.types import AdditionalAddOnInfo, ManifestValidationResult
from devserver.manifest.validator import AddOnManifestValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestReadResult:
    """Result of reading manifest.json. manifest is set only when it validated."""

    validation: ManifestValidationResult
    manifest: Optional[AddOnManifest] = None

    @property
    def success(self) -> bool:
        return self.manifest is not None


class AddOnManifestReader:
    """Reads the add-on manifest from the build output directory.

    Every failure (missing directory, unreadable file, bad JSON, schema errors,
    missing entry point files) comes back as a failed ManifestReadResult.
    """

    def __init__(
        self,
        output_directory: Path,
        additional_info: Optional[AdditionalAddOnInfo] = None,
        validator: Optional[AddOnManifestValidator] = None,
    ):
        self.output_directory = Path(output_directory)
        self.additional_info = additional_info or AdditionalAddOnInfo()
        self.validator = validator or AddOnManifestValidator()
        self._manifest: Optional[AddOnManifest] = None

    @property
    def manifest_path(self) -> Path:
        return self.output_directory / MANIFEST_JSON

    @property
    def cached_manifest(self) -> Optional[AddOnManifest]:
        """Last manifest that read and validated successfully, if any."""
        return self._manifest

    def get_manifest(self, from_cache: bool = True) -> ManifestReadResult:
        """Get the manifest, from cache when allowed and available."""
        if from_cache and self._manifest is not None:
            return ManifestReadResult(validation=ManifestValidationResult.ok(), manifest=self._manifest)
        return self.read()

    def read(self) -> ManifestReadResult:
        """Read and validate manifest.json from disk, replacing the cached manifest."""
        result = self._read()
        self._manifest = result.manifest
        return result

    def _read(self) -> ManifestReadResult:
        output_dir = self.output_directory
        if not output_dir.is_dir():
            return self._failed(
                f"Could not find the {output_dir.name} directory.",
                "Please build your add-on.",
            )

        manifest_path = self.manifest_path
        if not manifest_path.is_file():
            return self._failed(f"Could not find {MANIFEST_JSON} in {output_dir.name}.")

        try:
            content = manifest_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {manifest_path}: {e}")
            return self._failed(f"Could not read {MANIFEST_JSON}.")

        if not content.strip():
            return self._failed(f"{MANIFEST_JSON} is empty.")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.debug(f"Invalid JSON in {manifest_path}: {e}")
            return self._failed(f"JSON format error in {MANIFEST_JSON}")

        created = AddOnManifest.create_manifest(data, self.additional_info, self.validator)
        if created.manifest is None:
            return ManifestReadResult(validation=created.manifest_validation_result)

        missing = [
            f"Specified main in the {entrypoint.type}: {entrypoint.main} does not exist in {output_dir.name}."
            for entrypoint in created.manifest.entry_points
            if not (output_dir / entrypoint.main).is_file()
        ]
        if missing:
            return self._failed(*missing)

        logger.debug(f"Read manifest {created.manifest!r} from {manifest_path}")
        return ManifestReadResult(validation=created.manifest_validation_result, manifest=created.manifest)

    @staticmethod
    def _failed(*messages: str) -> ManifestReadResult:
        return ManifestReadResult(validation=ManifestValidationResult.from_messages(*messages))
