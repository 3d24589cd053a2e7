"""Options accepted by the add-on script commands."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from devserver.constants import (
    DEFAULT_HOST_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_PORT,
    DEFAULT_SRC_DIRECTORY,
    SSL_CERTFILE,
    SSL_KEYFILE,
)


class BuildCommandOptions(BaseModel):
    """Options for the build command."""

    src_directory: str = Field(default=DEFAULT_SRC_DIRECTORY, description="Source directory of the add-on")
    output_directory: str = Field(default=DEFAULT_OUTPUT_DIRECTORY, description="Build output directory")
    transpiler: Optional[str] = Field(default=None, description="Command used to transpile the sources")
    verbose: bool = False

    @field_validator("src_directory", "output_directory")
    @classmethod
    def directory_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("directory cannot be empty")
        return v.strip()

    @field_validator("transpiler")
    @classmethod
    def blank_transpiler_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v and v.strip() else None


class PackageCommandOptions(BuildCommandOptions):
    """Options for the package command."""

    should_rebuild: bool = Field(default=True, description="Rebuild before creating the package")


class StartCommandOptions(BuildCommandOptions):
    """Options for the start command."""

    hostname: str = Field(default=DEFAULT_HOST_NAME, description="Host the server binds to")
    port: int = Field(default=DEFAULT_PORT, description="Port the server listens on")
    ssl_certfile: Optional[str] = Field(default=SSL_CERTFILE or None, description="TLS certificate file")
    ssl_keyfile: Optional[str] = Field(default=SSL_KEYFILE or None, description="TLS private key file")

    @field_validator("hostname")
    @classmethod
    def hostname_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("hostname cannot be empty")
        return v.strip()

    @field_validator("port")
    @classmethod
    def port_in_range(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("ssl_certfile", "ssl_keyfile")
    @classmethod
    def ssl_file_exists(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not Path(v).is_file():
            raise ValueError(f"file does not exist: {v}")
        return v

    @property
    def use_ssl(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"
