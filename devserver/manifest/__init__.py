"""Add-on manifest model, validation and reading.

Imports are lazy so that lightweight pieces (types, schemas) can be used
without building the jsonschema validators.
"""

__all__ = [
    "AddOnManifest",
    "CreateManifestResult",
    "AddOnManifestEntrypoint",
    "AddOnManifestRequirement",
    "AddOnManifestValidator",
    "AddOnManifestReader",
    "ManifestReadResult",
    "AdditionalAddOnInfo",
    "EntrypointType",
    "ManifestError",
    "ManifestValidationResult",
    "ManifestVersion",
]


def __getattr__(name):
    if name in ("AddOnManifest", "CreateManifestResult"):
        from devserver.manifest import model
        return getattr(model, name)
    if name == "AddOnManifestEntrypoint":
        from devserver.manifest.entrypoint import AddOnManifestEntrypoint
        return AddOnManifestEntrypoint
    if name == "AddOnManifestRequirement":
        from devserver.manifest.requirement import AddOnManifestRequirement
        return AddOnManifestRequirement
    if name == "AddOnManifestValidator":
        from devserver.manifest.validator import AddOnManifestValidator
        return AddOnManifestValidator
    if name in ("AddOnManifestReader", "ManifestReadResult"):
        from devserver.manifest import reader
        return getattr(reader, name)
    if name in ("AdditionalAddOnInfo", "EntrypointType", "ManifestError", "ManifestValidationResult", "ManifestVersion"):
        from devserver.manifest import types
        return getattr(types, name)
    raise AttributeError(f"module 'devserver.manifest' has no attribute {name!r}")
