"""Manifest requirements field, shaped differently per manifest version."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from devserver.manifest.types import ManifestVersion


class App(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    api_version: float = Field(alias="apiVersion")
    supported_device_class: Optional[List[str]] = Field(default=None, alias="supportedDeviceClass")


class RequirementsV1(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    apps: List[str] = Field(default_factory=list)
    experimental_apis: Optional[bool] = Field(default=None, alias="experimentalApis")


class RequirementsV2(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    apps: List[App] = Field(default_factory=list)
    experimental_apis: Optional[bool] = Field(default=None, alias="experimentalApis")
    supports_touch: Optional[bool] = Field(default=None, alias="supportsTouch")
    rendition_preview: Optional[bool] = Field(default=None, alias="renditionPreview")
    privileged_apis: Optional[bool] = Field(default=None, alias="privilegedApis")
    blessed_partner_access: Optional[str] = Field(default=None, alias="_blessedPartnerAccess")


class AddOnManifestRequirement:
    """Read-only view over the manifest's requirements object."""

    def __init__(self, manifest_version: int, requirements: Optional[dict]):
        requirements = requirements or {}
        if manifest_version == ManifestVersion.V1:
            self._requirements: Union[RequirementsV1, RequirementsV2] = RequirementsV1.model_validate(requirements)
        else:
            self._requirements = RequirementsV2.model_validate(requirements)

    @property
    def apps(self) -> Union[List[str], List[App]]:
        """App names for V1 manifests, App records for V2."""
        return list(self._requirements.apps)

    @property
    def experimental_apis(self) -> bool:
        return bool(self._requirements.experimental_apis)

    @property
    def supports_touch(self) -> bool:
        if isinstance(self._requirements, RequirementsV2):
            return bool(self._requirements.supports_touch)
        return False

    @property
    def rendition_preview(self) -> bool:
        if isinstance(self._requirements, RequirementsV2):
            return bool(self._requirements.rendition_preview)
        return False

    @property
    def privileged_apis(self) -> bool:
        if isinstance(self._requirements, RequirementsV2):
            return bool(self._requirements.privileged_apis)
        return False

    @property
    def blessed_partner_access(self) -> Optional[str]:
        if isinstance(self._requirements, RequirementsV2):
            return self._requirements.blessed_partner_access
        return None
