"""Tests for reading manifest.json from the build output."""

import json

from devserver.manifest.reader import AddOnManifestReader

from conftest import make_v2_manifest, write_manifest


class TestAddOnManifestReader:
    """Tests for AddOnManifestReader.read and get_manifest."""

    def test_reads_valid_manifest(self, add_on_root):
        result = AddOnManifestReader(add_on_root / "dist").read()

        assert result.success is True
        assert result.manifest.id == "test-app"
        assert result.validation.success is True

    def test_missing_output_directory(self, tmp_path):
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert result.manifest is None
        assert "Could not find the dist directory." in result.validation.error_details[0].message

    def test_missing_manifest(self, tmp_path):
        (tmp_path / "dist").mkdir()
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert "Could not find manifest.json" in result.validation.error_details[0].message

    def test_empty_manifest(self, tmp_path):
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "manifest.json").write_text("  \n", encoding="utf-8")
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert result.validation.error_details[0].message == "manifest.json is empty."

    def test_invalid_json(self, tmp_path):
        (tmp_path / "dist").mkdir()
        (tmp_path / "dist" / "manifest.json").write_text("{not json", encoding="utf-8")
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert "JSON format error" in result.validation.error_details[0].message

    def test_schema_failure(self, tmp_path):
        write_manifest(tmp_path / "dist", make_v2_manifest(entryPoints=[]))
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert result.validation.error_details

    def test_missing_entrypoint_main(self, tmp_path):
        write_manifest(tmp_path / "dist", make_v2_manifest())
        result = AddOnManifestReader(tmp_path / "dist").read()

        assert result.success is False
        assert "index.html does not exist in dist" in result.validation.error_details[0].message

    def test_cache(self, add_on_root):
        reader = AddOnManifestReader(add_on_root / "dist")
        first = reader.get_manifest()

        manifest_path = add_on_root / "dist" / "manifest.json"
        manifest_path.write_text(json.dumps(make_v2_manifest(version="2.0.0")), encoding="utf-8")

        assert reader.get_manifest(from_cache=True).manifest is first.manifest
        assert reader.get_manifest(from_cache=False).manifest.version == "2.0.0"

    def test_failed_read_clears_cache(self, add_on_root):
        reader = AddOnManifestReader(add_on_root / "dist")
        reader.read()
        (add_on_root / "dist" / "manifest.json").unlink()

        assert reader.read().success is False
        assert reader.cached_manifest is None
