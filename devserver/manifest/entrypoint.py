"""Manifest entry point field, shaped differently per manifest version."""

import copy
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from devserver.manifest.types import ManifestVersion


class Size(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float
    height: float


class Command(BaseModel):
    """A command exposed by a command-provider entry point."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    supported_mime_types: Optional[List[str]] = Field(default=None, alias="supportedMimeTypes")
    discoverable: Optional[bool] = None


class EntrypointV1(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str
    id: str
    main: str
    label: Union[str, Dict[str, str]]
    permissions: Optional[Dict[str, Any]] = None
    default_size: Optional[Size] = Field(default=None, alias="defaultSize")


class EntrypointV2(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str
    id: str
    main: str
    script: Optional[str] = None  # deprecated, use document_sandbox
    document_sandbox: Optional[str] = Field(default=None, alias="documentSandbox")
    permissions: Optional[Dict[str, Any]] = None
    default_size: Optional[Size] = Field(default=None, alias="defaultSize")
    discoverable: Optional[bool] = None
    host_domain: Optional[str] = Field(default=None, alias="hostDomain")
    commands: Optional[List[Command]] = None


class AddOnManifestEntrypoint:
    """Read-only view over one entry in the manifest's entryPoints list.

    Fields that only exist in one manifest version return None for the other.
    """

    def __init__(self, manifest_version: int, properties: Dict[str, Any]):
        self._manifest_version = manifest_version
        self._properties = copy.deepcopy(properties)
        if manifest_version == ManifestVersion.V1:
            self._entrypoint: Union[EntrypointV1, EntrypointV2] = EntrypointV1.model_validate(self._properties)
        else:
            self._entrypoint = EntrypointV2.model_validate(self._properties)

    @property
    def type(self) -> str:
        return self._entrypoint.type

    @property
    def id(self) -> str:
        return self._entrypoint.id

    @property
    def main(self) -> str:
        return self._entrypoint.main

    @property
    def permissions(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._entrypoint.permissions)

    @property
    def default_size(self) -> Optional[Size]:
        return self._entrypoint.default_size

    @property
    def entrypoint_properties(self) -> Dict[str, Any]:
        """Raw entry point object as written in the manifest."""
        return copy.deepcopy(self._properties)

    @property
    def label(self) -> Optional[Union[str, Dict[str, str]]]:
        if isinstance(self._entrypoint, EntrypointV1):
            return self._entrypoint.label
        return None

    @property
    def document_sandbox(self) -> Optional[str]:
        if isinstance(self._entrypoint, EntrypointV2):
            # "script" is the deprecated name of the same field
            return self._entrypoint.document_sandbox or self._entrypoint.script
        return None

    @property
    def host_domain(self) -> Optional[str]:
        if isinstance(self._entrypoint, EntrypointV2):
            return self._entrypoint.host_domain
        return None

    @property
    def discoverable(self) -> Optional[bool]:
        if isinstance(self._entrypoint, EntrypointV2):
            return self._entrypoint.discoverable
        return None

    @property
    def commands(self) -> Optional[List[Command]]:
        if isinstance(self._entrypoint, EntrypointV2):
            return self._entrypoint.commands
        return None

    def __repr__(self) -> str:
        return f"AddOnManifestEntrypoint(v{self._manifest_version}, type={self.type!r}, id={self.id!r})"
