"""Shared manifest types: versions, entry point kinds and validation results."""

from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ManifestVersion(IntEnum):
    """Supported manifest schema versions."""

    V1 = 1
    V2 = 2


class EntrypointType(str, Enum):
    """Surfaces an add-on can expose to its host."""

    WIDGET = "widget"
    COMMAND = "command"
    PANEL = "panel"
    SCRIPT = "script"
    SHARE = "share"
    CONTENT_HUB = "content-hub"
    SCHEDULE = "schedule"


class ManifestError(BaseModel):
    """A single validation problem.

    instance_path is a JSON pointer into the manifest, e.g. "/entryPoints/0/type".
    """

    instance_path: Optional[str] = Field(default=None, serialization_alias="instancePath")
    keyword: Optional[str] = None
    params: Optional[Any] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ManifestValidationResult(BaseModel):
    """Outcome of a manifest validation. Failures are data, never exceptions."""

    success: bool
    error_details: Optional[List[ManifestError]] = Field(default=None, serialization_alias="errorDetails")
    warning_details: Optional[List[ManifestError]] = Field(default=None, serialization_alias="warningDetails")

    @classmethod
    def ok(cls, warnings: Optional[List[ManifestError]] = None) -> "ManifestValidationResult":
        return cls(success=True, warning_details=warnings or None)

    @classmethod
    def failed(cls, *errors: ManifestError) -> "ManifestValidationResult":
        return cls(success=False, error_details=list(errors))

    @classmethod
    def from_messages(cls, *messages: str) -> "ManifestValidationResult":
        return cls.failed(*(ManifestError(message=m) for m in messages))


class AdditionalAddOnInfo(BaseModel):
    """Context the validator needs beyond the manifest itself."""

    source_id: str = "local"
    privileged: bool = False
    is_developer_add_on: bool = True


def _error(instance_path: str, message: str) -> ManifestError:
    return ManifestError(instance_path=instance_path, message=message)


# Errors raised by checks that live outside the JSON schemas
OTHER_MANIFEST_ERRORS: Dict[str, ManifestError] = {
    "ManifestVersionType": _error("/manifestVersion", "Manifest version should be a number"),
    "InvalidManifestVersion": _error("/manifestVersion", "Invalid manifest version"),
    "EmptyEntrypoint": _error("/entryPoints", "At least one entrypoint should be defined"),
    "EmptyIcon": _error("/icon", "At least one icon should be defined"),
    "TestIdRequired": _error("/testId", "testId should be defined in manifest for developer workflow"),
    "InvalidClipboardPermission": _error(
        "/entryPoints/permissions/clipboard",
        "Clipboard read permission is not allowed for this AddOn",
    ),
    "RestrictedPrivilegedApis": _error(
        "/requirements/privilegedApis",
        "Privileged apis are not allowed for this add-on",
    ),
    "DocumentSandboxWithScript": _error(
        "/entryPoints/documentSandbox",
        "Manifest entrypoint should have either 'documentSandbox' or 'script', not both",
    ),
    "InvalidHostDomain": _error(
        "/entryPoints/hostDomain",
        "Manifest entrypoint should have valid hostDomain",
    ),
    "AdditionPropertyExperimentalApis": _error(
        "/requirements/experimentalApis",
        "Experimental apis are not supported for production add-ons",
    ),
    "RestrictedContentHubEntrypoint": _error(
        "/entryPoints/type",
        "Entrypoint type 'content-hub' is allowed only for privileged add-ons",
    ),
}
