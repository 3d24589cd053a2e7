"""Command executors for clean, build, package and start."""

import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from devserver.app import create_app
from devserver.dependencies import build_context, get_manifest_reader, get_script_manager
from devserver.manifest.model import AddOnManifest
from devserver.manifest.reader import AddOnManifestReader
from devserver.models.addon_directory import AddOnDirectory
from devserver.models.options import BuildCommandOptions, PackageCommandOptions, StartCommandOptions
from devserver.services.script_manager import ScriptManager
from devserver.utils import log_validation_errors

logger = logging.getLogger(__name__)


class CleanCommandExecutor:
    """Recreates the output directory."""

    def __init__(self, script_manager: ScriptManager):
        self.script_manager = script_manager

    async def execute(self, output_directory: str) -> None:
        logger.info(f"Cleaning output directory {output_directory}/ ...")
        await self.script_manager.clean_directory(output_directory)
        logger.info("Done.")


class BuildCommandExecutor:
    """Cleans, builds and validates the add-on.

    An invalid manifest after a successful build is fatal and exits with status 1.
    """

    def __init__(
        self,
        script_manager: ScriptManager,
        manifest_reader: AddOnManifestReader,
        clean_executor: Optional[CleanCommandExecutor] = None,
    ):
        self.script_manager = script_manager
        self.manifest_reader = manifest_reader
        self.clean_executor = clean_executor or CleanCommandExecutor(script_manager)

    async def execute(self, options: BuildCommandOptions) -> bool:
        await self.clean_executor.execute(options.output_directory)

        logger.info(f"Building source directory {options.src_directory}/ to {options.output_directory}/ ...")
        if options.transpiler:
            is_build_successful = await self.script_manager.transpile(options.transpiler)
        else:
            is_build_successful = await self.script_manager.copy_static_files(
                options.src_directory, options.output_directory
            )

        if not is_build_successful:
            logger.error("Build generation failed.")
            return False

        self.validated_manifest()
        logger.info("Done.")
        return True

    def validated_manifest(self, from_cache: bool = False) -> AddOnManifest:
        """Read the built manifest, exiting with status 1 if it is invalid."""
        result = self.manifest_reader.get_manifest(from_cache=from_cache)
        if not result.success:
            log_validation_errors(logger, result.validation)
            sys.exit(1)
        return result.manifest


class PackageCommandExecutor:
    """Zips the output directory into <output>.zip, rebuilding first unless told not to."""

    def __init__(self, script_manager: ScriptManager, build_executor: BuildCommandExecutor):
        self.script_manager = script_manager
        self.build_executor = build_executor

    async def execute(self, options: PackageCommandOptions) -> bool:
        if options.should_rebuild:
            if not await self.build_executor.execute(options):
                return False
        else:
            self.build_executor.validated_manifest()

        output_directory = options.output_directory
        logger.info(f"Creating a zip from {output_directory}/ ...")
        zip_path = Path(f"{Path(output_directory).name}.zip")
        if not self.script_manager.create_package(output_directory, zip_path):
            logger.error(f"Something went wrong while creating a zip from {output_directory}.")
            return False

        logger.info("Done.")
        return True


class StartCommandExecutor:
    """Builds the add-on, then serves it and watches its sources until interrupted."""

    def __init__(
        self,
        script_manager: ScriptManager,
        manifest_reader: AddOnManifestReader,
        build_executor: BuildCommandExecutor,
        root_directory: Path,
    ):
        self.script_manager = script_manager
        self.manifest_reader = manifest_reader
        self.build_executor = build_executor
        self.root_directory = Path(root_directory)

    async def execute(self, options: StartCommandOptions) -> None:
        if not await self.build_executor.execute(options):
            logger.error("Error while generating build.")
            sys.exit(1)

        manifest = self.build_executor.validated_manifest(from_cache=True)
        add_on_directory = AddOnDirectory(
            root_dir_path=self.root_directory,
            src_dir_name=options.src_directory,
            output_dir_name=options.output_directory,
            manifest=manifest,
        )
        server = self.create_server(add_on_directory, options)

        logger.info("Starting server ...")
        await server.serve()

    def create_server(self, add_on_directory: AddOnDirectory, options: StartCommandOptions) -> uvicorn.Server:
        context = build_context(
            options,
            add_on_directory,
            script_manager=self.script_manager,
            manifest_reader=self.manifest_reader,
        )
        app = create_app(context)

        logger.info(
            f"Your add-on '{add_on_directory.root_dir_name}' is hosted on: "
            f"{options.scheme}://{options.hostname}:{options.port}"
        )
        config = uvicorn.Config(
            app,
            host=options.hostname,
            port=options.port,
            ssl_certfile=options.ssl_certfile if options.use_ssl else None,
            ssl_keyfile=options.ssl_keyfile if options.use_ssl else None,
            log_level="debug" if options.verbose else "info",
        )
        return uvicorn.Server(config)


def create_executors(root_directory: Path, output_directory: str) -> dict:
    """Create the executors for an add-on rooted at root_directory."""
    root_directory = Path(root_directory)
    script_manager = get_script_manager(root_directory)
    manifest_reader = get_manifest_reader(root_directory / output_directory)
    clean = CleanCommandExecutor(script_manager)
    build = BuildCommandExecutor(script_manager, manifest_reader, clean)
    return {
        "clean": clean,
        "build": build,
        "package": PackageCommandExecutor(script_manager, build),
        "start": StartCommandExecutor(script_manager, manifest_reader, build, root_directory),
    }
