"""Add-on manifest model - a versioned, read-only view of manifest.json."""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devserver.manifest.entrypoint import AddOnManifestEntrypoint
from devserver.manifest.requirement import AddOnManifestRequirement
from devserver.manifest.types import (
    AdditionalAddOnInfo,
    ManifestError,
    ManifestValidationResult,
    ManifestVersion,
)
from devserver.manifest.validator import AddOnManifestValidator

logger = logging.getLogger(__name__)


class ManifestV1(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    id: str
    name: Optional[Union[str, Dict[str, str]]] = None
    version: Optional[str] = None
    manifest_version: int = Field(default=ManifestVersion.V1, alias="manifestVersion")
    icon: Optional[Union[Dict[str, Any], List[Dict[str, Any]]]] = None
    author_info: Optional[Dict[str, Any]] = Field(default=None, alias="authorInfo")


class ManifestV2(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    test_id: Optional[str] = Field(default=None, alias="testId")
    name: Optional[str] = None
    version: str
    manifest_version: int = Field(alias="manifestVersion")


@dataclass(frozen=True)
class CreateManifestResult:
    manifest_validation_result: ManifestValidationResult
    manifest: Optional["AddOnManifest"] = None


def _pydantic_errors(error: ValidationError) -> List[ManifestError]:
    return [
        ManifestError(
            instance_path="".join(f"/{part}" for part in err["loc"]),
            keyword=err["type"],
            message=err["msg"],
        )
        for err in error.errors()
    ]


class AddOnManifest:
    """Metadata and configuration of an add-on.

    Built once per read of manifest.json through create_manifest() and never
    mutated afterwards; a re-read produces a new instance. Fields that only
    exist in one manifest version return None for the other.
    """

    def __init__(self, properties: Dict[str, Any]):
        self._properties = copy.deepcopy(properties)
        version = self._properties.get("manifestVersion") or ManifestVersion.V1

        if version == ManifestVersion.V1:
            self._manifest: Union[ManifestV1, ManifestV2] = ManifestV1.model_validate(self._properties)
        else:
            self._manifest = ManifestV2.model_validate(self._properties)

        self._entrypoints: Tuple[AddOnManifestEntrypoint, ...] = tuple(
            AddOnManifestEntrypoint(version, entrypoint) for entrypoint in self._properties.get("entryPoints") or []
        )
        self._requirement = AddOnManifestRequirement(version, self._properties.get("requirements"))

    @classmethod
    def create_manifest(
        cls,
        manifest: Any,
        additional_info: Optional[AdditionalAddOnInfo] = None,
        validator: Optional[AddOnManifestValidator] = None,
    ) -> CreateManifestResult:
        """Validate raw manifest JSON and build the model when it is valid.

        Args:
            manifest: Parsed manifest.json content
            additional_info: Developer/privilege context, developer mode by default
            validator: Validator to use, the jsonschema-backed one by default

        Returns:
            CreateManifestResult, manifest is None when validation failed
        """
        validator = validator or AddOnManifestValidator()
        try:
            result = validator.validate_manifest_schema(manifest, additional_info or AdditionalAddOnInfo())
        except Exception as e:
            logger.error(f"Manifest validator failed: {e}", exc_info=True)
            result = ManifestValidationResult.from_messages(f"Could not validate manifest: {e}")
        if not result.success:
            return CreateManifestResult(manifest_validation_result=result)

        try:
            instance = cls(manifest)
        except ValidationError as e:
            return CreateManifestResult(
                manifest_validation_result=ManifestValidationResult(success=False, error_details=_pydantic_errors(e))
            )
        return CreateManifestResult(manifest_validation_result=result, manifest=instance)

    @property
    def manifest_properties(self) -> Dict[str, Any]:
        """Raw manifest object (a copy)."""
        return copy.deepcopy(self._properties)

    @property
    def manifest_version(self) -> ManifestVersion:
        return ManifestVersion(self._manifest.manifest_version or ManifestVersion.V1)

    @property
    def id(self) -> Optional[str]:
        """V1 id, or the V2 testId used by the developer workflow."""
        if isinstance(self._manifest, ManifestV1):
            return self._manifest.id
        return self._manifest.test_id

    @property
    def name(self) -> Optional[Union[str, Dict[str, str]]]:
        return self._manifest.name

    @property
    def version(self) -> Optional[str]:
        return self._manifest.version

    @property
    def requirements(self) -> AddOnManifestRequirement:
        return self._requirement

    @property
    def entry_points(self) -> Tuple[AddOnManifestEntrypoint, ...]:
        return self._entrypoints

    @property
    def icon(self) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        if isinstance(self._manifest, ManifestV1):
            return copy.deepcopy(self._manifest.icon)
        return None

    @property
    def author_info(self) -> Optional[Dict[str, Any]]:
        if isinstance(self._manifest, ManifestV1):
            return copy.deepcopy(self._manifest.author_info)
        return None

    def to_json(self) -> str:
        """Canonical serialized form, stable across re-reads of the same content."""
        return json.dumps(self._properties, sort_keys=True, ensure_ascii=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AddOnManifest):
            return NotImplemented
        return self.to_json() == other.to_json()

    def __hash__(self) -> int:
        return hash(self.to_json())

    def __repr__(self) -> str:
        return f"AddOnManifest(v{int(self.manifest_version)}, id={self.id!r}, version={self.version!r})"
