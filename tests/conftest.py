"""Shared fixtures: sample manifests and on-disk add-on directories."""

import json
from pathlib import Path

import pytest

from devserver.manifest.model import AddOnManifest
from devserver.models.addon_directory import AddOnDirectory


def make_v2_manifest(**overrides) -> dict:
    manifest = {
        "testId": "test-app",
        "name": "Test App",
        "version": "1.0.0",
        "manifestVersion": 2,
        "requirements": {"apps": [{"name": "Express", "apiVersion": 1}]},
        "entryPoints": [{"type": "panel", "id": "panel1", "main": "index.html"}],
    }
    manifest.update(overrides)
    return manifest


def make_v1_manifest(**overrides) -> dict:
    manifest = {
        "id": "test-app-v1",
        "name": "Test App",
        "version": "1.0.0",
        "manifestVersion": 1,
        "requirements": {"apps": ["Express"]},
        "icon": {"href": "icon.png", "theme": ["all"]},
        "entryPoints": [
            {"type": "panel", "id": "panel1", "label": {"default": "Panel"}, "main": "index.html"}
        ],
    }
    manifest.update(overrides)
    return manifest


def write_manifest(directory: Path, manifest: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "manifest.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


@pytest.fixture
def v2_manifest():
    return make_v2_manifest()


@pytest.fixture
def v1_manifest():
    return make_v1_manifest()


@pytest.fixture
def add_on_root(tmp_path):
    """An add-on with a source directory and a matching build output."""
    root = tmp_path / "my-add-on"
    for folder in ("src", "dist"):
        write_manifest(root / folder, make_v2_manifest())
        (root / folder / "index.html").write_text("<html></html>", encoding="utf-8")
    return root


@pytest.fixture
def add_on_directory(add_on_root):
    manifest = AddOnManifest.create_manifest(make_v2_manifest()).manifest
    return AddOnDirectory(
        root_dir_path=add_on_root,
        src_dir_name="src",
        output_dir_name="dist",
        manifest=manifest,
    )
