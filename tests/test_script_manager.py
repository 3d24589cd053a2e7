"""Tests for build file and process operations."""

import asyncio
import threading
import zipfile
from unittest.mock import patch

import pytest

from devserver.services import script_manager
from devserver.services.script_manager import ScriptManager


class TestDirectories:
    """Tests for cleaning directories."""

    @pytest.mark.asyncio
    async def test_clean_directory(self, add_on_root):
        manager = ScriptManager(add_on_root)

        await manager.clean_directory("dist")

        assert (add_on_root / "dist").is_dir()
        assert list((add_on_root / "dist").iterdir()) == []

    @pytest.mark.asyncio
    async def test_clean_directory_and_add_manifest(self, add_on_root):
        manager = ScriptManager(add_on_root)

        assert await manager.clean_directory_and_add_manifest("dist", "src/manifest.json") is True
        assert [p.name for p in (add_on_root / "dist").iterdir()] == ["manifest.json"]

    @pytest.mark.asyncio
    async def test_missing_source_manifest(self, tmp_path):
        manager = ScriptManager(tmp_path)

        assert await manager.clean_directory_and_add_manifest("dist", "src/manifest.json") is False
        assert (tmp_path / "dist").is_dir()


class TestBuild:
    """Tests for transpiling and static copies."""

    @pytest.mark.asyncio
    async def test_copy_skips_transpiled_sources(self, add_on_root):
        (add_on_root / "src" / "ui").mkdir()
        (add_on_root / "src" / "ui" / "app.js").write_text("app")
        (add_on_root / "src" / "ui" / "app.tsx").write_text("tsx")
        manager = ScriptManager(add_on_root)
        await manager.clean_directory("dist")

        assert await manager.copy_static_files("src", "dist") is True
        assert (add_on_root / "dist" / "ui" / "app.js").read_text() == "app"
        assert not (add_on_root / "dist" / "ui" / "app.tsx").exists()
        assert (add_on_root / "dist" / "manifest.json").exists()

    @pytest.mark.asyncio
    async def test_copy_leaves_event_loop_running(self, add_on_root):
        """The loop keeps scheduling callbacks while files are copied."""
        loop_ticked = threading.Event()
        observed = []

        def slow_copytree(*args, **kwargs):
            observed.append(loop_ticked.wait(timeout=2))

        async def tick():
            await asyncio.sleep(0.01)
            loop_ticked.set()

        with patch.object(script_manager.shutil, "copytree", side_effect=slow_copytree):
            ticker = asyncio.ensure_future(tick())
            assert await ScriptManager(add_on_root).copy_static_files("src", "dist") is True
            await ticker

        assert observed == [True]

    @pytest.mark.asyncio
    async def test_copy_missing_source(self, tmp_path):
        assert await ScriptManager(tmp_path).copy_static_files("src", "dist") is False

    @pytest.mark.asyncio
    async def test_transpile_exit_status(self, tmp_path):
        manager = ScriptManager(tmp_path)

        assert await manager.transpile("exit 0") is True
        assert await manager.transpile("exit 3") is False

    @pytest.mark.asyncio
    async def test_transpile_runs_in_root(self, tmp_path):
        await ScriptManager(tmp_path).transpile("echo built > marker.txt")

        assert (tmp_path / "marker.txt").read_text().strip() == "built"


class TestOutputs:
    """Tests for the console override and packaging."""

    def test_override_global_console(self, add_on_root):
        script = ScriptManager(add_on_root).override_global_console("dist", "Test App")

        assert script == add_on_root / "dist" / "console-override.js"
        assert '"[Add-on: " + "Test App" + "]"' in script.read_text()

    def test_create_package(self, add_on_root):
        (add_on_root / "dist" / ".DS_Store").write_bytes(b"")
        (add_on_root / "dist" / "assets").mkdir()
        (add_on_root / "dist" / "assets" / "icon.png").write_bytes(b"png")

        assert ScriptManager(add_on_root).create_package("dist", "dist.zip") is True

        with zipfile.ZipFile(add_on_root / "dist.zip") as archive:
            assert sorted(archive.namelist()) == ["assets/icon.png", "index.html", "manifest.json"]
