"""Tests for manifest validation."""

from devserver.manifest.types import OTHER_MANIFEST_ERRORS, AdditionalAddOnInfo, ManifestError
from devserver.manifest.validator import AddOnManifestValidator, get_manifest_version

from conftest import make_v1_manifest, make_v2_manifest

DEVELOPER = AdditionalAddOnInfo()


def messages(result):
    return [e.message for e in result.error_details or []]


class TestManifestVersion:
    """Tests for version selection."""

    def test_developer_default_is_v1(self):
        assert get_manifest_version({"id": "x"}, is_developer_add_on=True) == 1

    def test_production_has_no_default(self):
        assert get_manifest_version({"id": "x"}, is_developer_add_on=False) is None

    def test_non_number_version(self):
        result = AddOnManifestValidator().validate_manifest_schema(make_v2_manifest(manifestVersion="2"), DEVELOPER)

        assert result.success is False
        assert messages(result) == [OTHER_MANIFEST_ERRORS["ManifestVersionType"].message]

    def test_unsupported_versions(self):
        validator = AddOnManifestValidator()
        for version in (0, -1, 1.5, 3):
            result = validator.validate_manifest_schema(make_v2_manifest(manifestVersion=version), DEVELOPER)
            assert messages(result) == [OTHER_MANIFEST_ERRORS["InvalidManifestVersion"].message], version

    def test_empty_manifest(self):
        result = AddOnManifestValidator().validate_manifest_schema({}, DEVELOPER)

        assert result.success is False


class TestSchemaValidation:
    """Tests for JSON schema errors."""

    def test_valid_manifests(self):
        validator = AddOnManifestValidator()

        assert validator.validate_manifest_schema(make_v2_manifest(), DEVELOPER).success is True
        assert validator.validate_manifest_schema(make_v1_manifest(), DEVELOPER).success is True

    def test_missing_property_reports_path_and_params(self):
        manifest = make_v2_manifest(entryPoints=[{"type": "panel", "main": "index.html"}])
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        error = next(e for e in result.error_details if e.keyword == "required")
        assert error.instance_path == "/entryPoints/0"
        assert error.params == {"missingProperty": "id"}

    def test_additional_property(self):
        manifest = make_v2_manifest(
            entryPoints=[{"type": "panel", "id": "p", "main": "index.html", "unknown": 1}]
        )
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        error = next(e for e in result.error_details if e.keyword == "additionalProperties")
        assert error.params == {"additionalProperty": "unknown"}

    def test_custom_schema_validator(self):
        calls = []

        def validate(manifest):
            calls.append(manifest)
            return [ManifestError(instance_path="/name", message="bad name")]

        validator = AddOnManifestValidator(developer_validators={2: validate})
        result = validator.validate_manifest_schema(make_v2_manifest(), DEVELOPER)

        assert len(calls) == 1
        assert "bad name" in messages(result)


class TestDeveloperValidations:
    """Tests for checks outside the schemas."""

    def test_test_id_required_for_v2(self):
        manifest = make_v2_manifest()
        del manifest["testId"]
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        assert OTHER_MANIFEST_ERRORS["TestIdRequired"].message in messages(result)

    def test_empty_entrypoints(self):
        result = AddOnManifestValidator().validate_manifest_schema(make_v2_manifest(entryPoints=[]), DEVELOPER)

        assert OTHER_MANIFEST_ERRORS["EmptyEntrypoint"].message in messages(result)

    def test_document_sandbox_with_script(self):
        manifest = make_v2_manifest(
            entryPoints=[
                {"type": "panel", "id": "p", "main": "index.html", "script": "a.js", "documentSandbox": "b.js"}
            ]
        )
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        assert OTHER_MANIFEST_ERRORS["DocumentSandboxWithScript"].message in messages(result)

    def test_invalid_host_domain(self):
        manifest = make_v2_manifest(
            entryPoints=[{"type": "panel", "id": "p", "main": "index.html", "hostDomain": "example"}]
        )
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        assert OTHER_MANIFEST_ERRORS["InvalidHostDomain"].message in messages(result)

    def test_clipboard_read_needs_privilege(self):
        manifest = make_v2_manifest(
            entryPoints=[
                {
                    "type": "panel",
                    "id": "p",
                    "main": "index.html",
                    "permissions": {"clipboard": ["clipboard-read"]},
                }
            ]
        )
        validator = AddOnManifestValidator()

        denied = validator.validate_manifest_schema(manifest, DEVELOPER)
        allowed = validator.validate_manifest_schema(manifest, AdditionalAddOnInfo(privileged=True))

        assert OTHER_MANIFEST_ERRORS["InvalidClipboardPermission"].message in messages(denied)
        assert allowed.success is True

    def test_malformed_permissions_are_schema_errors(self):
        """Permissions of the wrong shape fail validation instead of raising."""
        validator = AddOnManifestValidator()
        for permissions in ("x", ["clipboard-read"], {"clipboard": "clipboard-read"}, {"clipboard": 1}):
            manifest = make_v2_manifest(
                entryPoints=[{"type": "panel", "id": "p", "main": "index.html", "permissions": permissions}]
            )

            result = validator.validate_manifest_schema(manifest, DEVELOPER)

            assert result.success is False
            assert any(e.instance_path.startswith("/entryPoints/0/permissions") for e in result.error_details)
            assert OTHER_MANIFEST_ERRORS["InvalidClipboardPermission"].message not in messages(result)

    def test_privileged_apis_need_privilege(self):
        manifest = make_v2_manifest(
            requirements={"apps": [{"name": "Express", "apiVersion": 1}], "privilegedApis": True}
        )
        result = AddOnManifestValidator().validate_manifest_schema(manifest, DEVELOPER)

        assert OTHER_MANIFEST_ERRORS["RestrictedPrivilegedApis"].message in messages(result)

    def test_empty_icon_is_a_warning_for_developers(self):
        result = AddOnManifestValidator().validate_manifest_schema(make_v1_manifest(icon=[]), DEVELOPER)

        assert result.success is True
        assert [w.message for w in result.warning_details] == [OTHER_MANIFEST_ERRORS["EmptyIcon"].message]

    def test_experimental_apis_rejected_in_production(self):
        manifest = make_v1_manifest(requirements={"apps": ["Express"], "experimentalApis": True})
        info = AdditionalAddOnInfo(is_developer_add_on=False)
        result = AddOnManifestValidator().validate_manifest_schema(manifest, info)

        assert OTHER_MANIFEST_ERRORS["AdditionPropertyExperimentalApis"].message in messages(result)
