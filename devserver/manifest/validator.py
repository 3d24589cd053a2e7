"""Manifest validation - picks a schema validator by manifest version and normalizes its errors."""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as SchemaError

from devserver.manifest import schemas
from devserver.manifest.types import (
    OTHER_MANIFEST_ERRORS,
    AdditionalAddOnInfo,
    EntrypointType,
    ManifestError,
    ManifestValidationResult,
    ManifestVersion,
)

logger = logging.getLogger(__name__)

# validate(manifest) -> list of problems, empty when the manifest conforms
SchemaValidator = Callable[[Dict[str, Any]], List[ManifestError]]

HOST_DOMAIN_PATTERN = re.compile(r"https://[a-zA-Z0-9-.]{3,}.[a-zA-Z]{2,}(.[a-zA-Z]{2,})?")


def _error_params(error: SchemaError) -> Dict[str, Any]:
    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [p for p in error.validator_value if p not in error.instance]
        if missing:
            return {"missingProperty": missing[0]}
    if error.validator == "additionalProperties" and isinstance(error.instance, dict):
        known = set(error.schema.get("properties", {}))
        extra = [p for p in error.instance if p not in known]
        if extra:
            return {"additionalProperty": extra[0]}
    return {error.validator: error.validator_value}


def to_manifest_error(error: SchemaError) -> ManifestError:
    """Convert a jsonschema error to a ManifestError."""
    return ManifestError(
        instance_path="".join(f"/{part}" for part in error.absolute_path),
        keyword=str(error.validator),
        params=_error_params(error),
        message=error.message,
    )


def json_schema_validator(schema: Dict[str, Any]) -> SchemaValidator:
    """Build a SchemaValidator backed by a Draft 7 JSON schema."""
    validator = Draft7Validator(schema)

    def validate(manifest: Dict[str, Any]) -> List[ManifestError]:
        return [to_manifest_error(e) for e in validator.iter_errors(manifest)]

    return validate


# Indexed by manifest version
DEFAULT_VALIDATORS: Dict[int, SchemaValidator] = {
    ManifestVersion.V1: json_schema_validator(schemas.MANIFEST_SCHEMA_V1),
    ManifestVersion.V2: json_schema_validator(schemas.MANIFEST_SCHEMA_V2),
}

DEFAULT_DEVELOPER_VALIDATORS: Dict[int, SchemaValidator] = {
    ManifestVersion.V1: json_schema_validator(schemas.MANIFEST_SCHEMA_DEVELOPER_V1),
    ManifestVersion.V2: json_schema_validator(schemas.MANIFEST_SCHEMA_DEVELOPER_V2),
}


def get_manifest_version(manifest: Dict[str, Any], is_developer_add_on: bool) -> Any:
    """Raw manifestVersion value; developer add-ons default to V1 when it is missing."""
    version = manifest.get("manifestVersion")
    if version is None and is_developer_add_on:
        return ManifestVersion.V1
    return version


def _entry_points(manifest: Dict[str, Any]) -> List[Dict[str, Any]]:
    entry_points = manifest.get("entryPoints")
    if not isinstance(entry_points, list):
        return []
    return [e for e in entry_points if isinstance(e, dict)]


def _requirements(manifest: Dict[str, Any]) -> Dict[str, Any]:
    requirements = manifest.get("requirements")
    return requirements if isinstance(requirements, dict) else {}


def _clipboard_permissions(entry_point: Dict[str, Any]) -> List[Any]:
    # Malformed shapes are already reported by the schema
    permissions = entry_point.get("permissions")
    if not isinstance(permissions, dict):
        return []
    clipboard = permissions.get("clipboard")
    return clipboard if isinstance(clipboard, list) else []


class AddOnManifestValidator:
    """Validates raw manifest JSON against the schema for its version.

    Validation failures are returned as ManifestValidationResult, never raised.
    """

    def __init__(
        self,
        validators: Optional[Dict[int, SchemaValidator]] = None,
        developer_validators: Optional[Dict[int, SchemaValidator]] = None,
    ):
        self.validators = validators if validators is not None else DEFAULT_VALIDATORS
        self.developer_validators = (
            developer_validators if developer_validators is not None else DEFAULT_DEVELOPER_VALIDATORS
        )

    def validate_manifest_schema(
        self, manifest: Any, additional_info: AdditionalAddOnInfo
    ) -> ManifestValidationResult:
        """Validate a parsed manifest.

        Args:
            manifest: Parsed manifest.json content
            additional_info: Developer/privilege context

        Returns:
            ManifestValidationResult
        """
        if not isinstance(manifest, dict) or not manifest:
            return ManifestValidationResult.from_messages("Manifest should be a non-empty JSON object")

        raw_version = get_manifest_version(manifest, additional_info.is_developer_add_on)
        if isinstance(raw_version, bool) or not isinstance(raw_version, (int, float)):
            logger.debug("Manifest version should be a number")
            return ManifestValidationResult.failed(OTHER_MANIFEST_ERRORS["ManifestVersionType"])

        table = self.developer_validators if additional_info.is_developer_add_on else self.validators
        if raw_version <= 0 or int(raw_version) != raw_version or int(raw_version) not in table:
            logger.debug(f"Incorrect manifest version: {raw_version}")
            return ManifestValidationResult.failed(OTHER_MANIFEST_ERRORS["InvalidManifestVersion"])

        version = int(raw_version)
        schema_errors = table[version](manifest)
        if schema_errors:
            logger.debug(f"Schema errors in manifest.json: {[e.message for e in schema_errors]}")

        if additional_info.is_developer_add_on:
            errors, warnings = self._developer_validations(manifest, version, additional_info)
        else:
            errors, warnings = self._production_validations(manifest, version, additional_info), []

        all_errors = schema_errors + errors
        if all_errors:
            return ManifestValidationResult(
                success=False,
                error_details=all_errors,
                warning_details=warnings or None,
            )
        return ManifestValidationResult.ok(warnings)

    def _common_validations(
        self, manifest: Dict[str, Any], version: int, additional_info: AdditionalAddOnInfo
    ) -> List[ManifestError]:
        errors: List[ManifestError] = []
        entry_points = _entry_points(manifest)
        requirements = _requirements(manifest)

        if not entry_points:
            errors.append(OTHER_MANIFEST_ERRORS["EmptyEntrypoint"])

        for entry_point in entry_points:
            if entry_point.get("type") == EntrypointType.CONTENT_HUB.value and not requirements.get("privilegedApis"):
                errors.append(OTHER_MANIFEST_ERRORS["RestrictedContentHubEntrypoint"])

        if not additional_info.privileged:
            if requirements.get("privilegedApis"):
                errors.append(OTHER_MANIFEST_ERRORS["RestrictedPrivilegedApis"])
            for entry_point in entry_points:
                if "clipboard-read" in _clipboard_permissions(entry_point):
                    logger.debug(f"Clipboard-read permission is not allowed for entrypoint: {entry_point.get('id')}")
                    errors.append(OTHER_MANIFEST_ERRORS["InvalidClipboardPermission"])

        if version > ManifestVersion.V1:
            for entry_point in entry_points:
                if entry_point.get("documentSandbox") and entry_point.get("script"):
                    errors.append(OTHER_MANIFEST_ERRORS["DocumentSandboxWithScript"])
                host_domain = entry_point.get("hostDomain")
                if host_domain is not None and not (
                    isinstance(host_domain, str) and HOST_DOMAIN_PATTERN.search(host_domain)
                ):
                    errors.append(OTHER_MANIFEST_ERRORS["InvalidHostDomain"])

        return errors

    def _developer_validations(
        self, manifest: Dict[str, Any], version: int, additional_info: AdditionalAddOnInfo
    ) -> Tuple[List[ManifestError], List[ManifestError]]:
        errors = self._common_validations(manifest, version, additional_info)
        warnings: List[ManifestError] = []

        if version == ManifestVersion.V1:
            icon = manifest.get("icon")
            if isinstance(icon, list) and not icon:
                warnings.append(OTHER_MANIFEST_ERRORS["EmptyIcon"])
        elif not manifest.get("testId"):
            errors.append(OTHER_MANIFEST_ERRORS["TestIdRequired"])

        return errors, warnings

    def _production_validations(
        self, manifest: Dict[str, Any], version: int, additional_info: AdditionalAddOnInfo
    ) -> List[ManifestError]:
        errors: List[ManifestError] = []
        if _requirements(manifest).get("experimentalApis") and not additional_info.is_developer_add_on:
            errors.append(OTHER_MANIFEST_ERRORS["AdditionPropertyExperimentalApis"])

        errors.extend(self._common_validations(manifest, version, additional_info))

        if version == ManifestVersion.V1:
            icon = manifest.get("icon")
            if isinstance(icon, list) and not icon:
                errors.append(OTHER_MANIFEST_ERRORS["EmptyIcon"])
        return errors
