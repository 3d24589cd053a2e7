"""Script manager - the file and process operations behind build, clean and package."""

import asyncio
import json
import logging
import os
import shutil
import zipfile
from pathlib import Path
from typing import Union

from devserver.constants import (
    CONSOLE_OVERRIDE_SCRIPT,
    CONSOLE_OVERRIDE_SCRIPT_NAME,
    EXTENSIONS_TO_TRANSPILE,
    MANIFEST_JSON,
    OS_FILES_TO_SKIP,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ScriptManager:
    """Runs build steps for an add-on rooted at root_directory.

    Relative paths are resolved against root_directory. Failures are logged
    and reported as False rather than raised.
    """

    def __init__(self, root_directory: PathLike):
        self.root_directory = Path(root_directory)

    def _resolve(self, path: PathLike) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root_directory / path

    async def clean_directory(self, directory: PathLike) -> None:
        """Remove a directory and recreate it empty."""
        target = self._resolve(directory)
        await asyncio.to_thread(shutil.rmtree, target, ignore_errors=True)
        target.mkdir(parents=True, exist_ok=True)

    async def clean_directory_and_add_manifest(self, directory: PathLike, manifest_path: PathLike) -> bool:
        """Clean a directory and copy the source manifest into it.

        Keeps manifest.json available to the host after a failed build.
        """
        await self.clean_directory(directory)
        source = self._resolve(manifest_path)
        if not source.is_file():
            logger.warning(f"Cannot restore {MANIFEST_JSON}, {source} does not exist")
            return False
        try:
            await asyncio.to_thread(shutil.copyfile, source, self._resolve(directory) / MANIFEST_JSON)
            return True
        except OSError as e:
            logger.error(f"Failed to copy {source}: {e}")
            return False

    async def transpile(self, transpiler: str) -> bool:
        """Run the transpiler command in the add-on root.

        Args:
            transpiler: Shell command, e.g. "npx webpack --mode development"

        Returns:
            True if the command exited with status 0
        """
        logger.debug(f"Running transpiler: {transpiler}")
        try:
            process = await asyncio.create_subprocess_shell(transpiler, cwd=str(self.root_directory))
            return_code = await process.wait()
        except OSError as e:
            logger.error(f"Failed to run transpiler '{transpiler}': {e}")
            return False

        if return_code != 0:
            logger.error(f"Transpiler '{transpiler}' exited with status {return_code}")
            return False
        return True

    async def copy_static_files(self, source_directory: PathLike, destination_directory: PathLike) -> bool:
        """Copy sources that need no transpilation into the output directory."""
        source = self._resolve(source_directory)
        destination = self._resolve(destination_directory)

        def ignore(directory: str, names: list) -> set:
            return {name for name in names if Path(name).suffix in EXTENSIONS_TO_TRANSPILE}

        try:
            await asyncio.to_thread(shutil.copytree, source, destination, ignore=ignore, dirs_exist_ok=True)
            return True
        except OSError as e:
            logger.error(f"Failed to copy static files from {source}: {e}")
            return False

    def override_global_console(self, output_directory: PathLike, add_on_name: str) -> Path:
        """Write a script into the output that prefixes add-on console logs with its name."""
        script = CONSOLE_OVERRIDE_SCRIPT.format(add_on_name=json.dumps(add_on_name))
        script_path = self._resolve(output_directory) / CONSOLE_OVERRIDE_SCRIPT_NAME
        script_path.write_text(script, encoding="utf-8")
        return script_path

    def create_package(self, directory: PathLike, zip_path: PathLike) -> bool:
        """Zip the contents of a directory, skipping OS metadata files."""
        source = self._resolve(directory)
        target = self._resolve(zip_path)
        try:
            with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for folder, _, files in os.walk(source):
                    for name in sorted(files):
                        if name in OS_FILES_TO_SKIP:
                            continue
                        file_path = Path(folder) / name
                        archive.write(file_path, file_path.relative_to(source).as_posix())
            return True
        except OSError as e:
            logger.error(f"Failed to create package {target}: {e}")
            return False
