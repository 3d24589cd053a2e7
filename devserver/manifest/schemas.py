"""JSON schemas for add-on manifests, one per manifest version."""

from devserver.manifest.types import EntrypointType

_ENTRYPOINT_TYPES = [t.value for t in EntrypointType]
_SANDBOX_PATTERN = "^(allow-popups|allow-presentation|allow-downloads|allow-popups-to-escape-sandbox)$"
_CLIPBOARD_PATTERN = "^(clipboard-write|clipboard-read)$"
_ICON_THEME_PATTERN = "^(lightest|light|medium|dark|darkest|all)$"
_APP_PATTERN = "^(Express)$"
_DEVICE_CLASS_PATTERN = "^(desktop|mobile|app)$"

ICON_SCHEMA = {
    "type": "object",
    "properties": {
        "width": {"type": "number"},
        "height": {"type": "number"},
        "href": {"type": "string"},
        "theme": {"type": "array", "items": {"type": "string", "pattern": _ICON_THEME_PATTERN}},
        "scale": {"type": "array", "items": {"type": "number"}},
    },
    "required": ["href", "theme"],
    "additionalProperties": False,
}

LABEL_SCHEMA = {
    "type": "object",
    "properties": {"default": {"type": "string"}},
    "required": ["default"],
    "additionalProperties": True,
}

AUTHOR_INFO_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "email": {"type": "string"},
        "url": {"type": "string"},
    },
    "required": ["name", "email"],
    "additionalProperties": False,
}

SIZE_SCHEMA = {
    "type": "object",
    "properties": {"width": {"type": "number"}, "height": {"type": "number"}},
    "required": ["width", "height"],
    "additionalProperties": False,
}

COMMAND_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "supportedMimeTypes": {"type": "array", "items": {"type": "string"}},
        "discoverable": {"type": "boolean"},
    },
    "required": ["name"],
    "additionalProperties": False,
}

ENTRYPOINT_SCHEMA_V1 = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": _ENTRYPOINT_TYPES},
        "id": {"type": "string"},
        "main": {"type": "string"},
        "label": {"anyOf": [{"type": "string"}, LABEL_SCHEMA]},
        "permissions": {
            "type": "object",
            "properties": {
                "sandbox": {"type": "array", "items": {"type": "string", "pattern": _SANDBOX_PATTERN}},
                "oauth": {"type": "array", "items": {"type": "string"}},
                "microphone": {"type": "string"},
                "camera": {"type": "string"},
                "clipboard": {"type": "array", "items": {"type": "string", "pattern": _CLIPBOARD_PATTERN}},
            },
            "additionalProperties": False,
        },
        "defaultSize": SIZE_SCHEMA,
    },
    "required": ["type", "id", "label", "main"],
    "additionalProperties": False,
}

ENTRYPOINT_SCHEMA_V2 = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": _ENTRYPOINT_TYPES},
        "id": {"type": "string"},
        "main": {"type": "string"},
        "script": {"type": "string"},
        "documentSandbox": {"type": "string"},
        "permissions": {
            "type": "object",
            "properties": {
                "sandbox": {"type": "array", "items": {"type": "string", "pattern": _SANDBOX_PATTERN}},
                "oauth": {"type": "array", "items": {"type": "string"}},
                "microphone": {"type": "string"},
                "camera": {"type": "string"},
                "analytics": {"type": "boolean"},
                "clipboard": {"type": "array", "items": {"type": "string", "pattern": _CLIPBOARD_PATTERN}},
            },
            "additionalProperties": False,
        },
        "defaultSize": SIZE_SCHEMA,
        "discoverable": {"type": "boolean"},
        "hostDomain": {"type": "string"},
        "commands": {"type": "array", "items": COMMAND_SCHEMA},
    },
    "required": ["type", "id", "main"],
    "additionalProperties": False,
}

REQUIREMENT_SCHEMA_V1 = {
    "type": "object",
    "properties": {
        "apps": {"type": "array", "items": {"type": "string", "pattern": _APP_PATTERN}},
        "experimentalApis": {"type": "boolean"},
    },
    "required": ["apps"],
    "additionalProperties": False,
}

APP_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "pattern": _APP_PATTERN},
        "apiVersion": {"type": "number"},
        "supportedDeviceClass": {
            "type": "array",
            "items": {"type": "string", "pattern": _DEVICE_CLASS_PATTERN},
        },
    },
    "required": ["name", "apiVersion"],
    "additionalProperties": False,
}

REQUIREMENT_SCHEMA_V2 = {
    "type": "object",
    "properties": {
        "apps": {"type": "array", "items": APP_SCHEMA},
        "experimentalApis": {"type": "boolean"},
        "supportsTouch": {"type": "boolean"},
        "renditionPreview": {"type": "boolean"},
        "privilegedApis": {"type": "boolean"},
        "_blessedPartnerAccess": {"type": "string"},
        "trustedPartnerApis": {"type": "object"},
    },
    "required": ["apps"],
    "additionalProperties": False,
}

MANIFEST_SCHEMA_V1 = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "name": {"anyOf": [{"type": "string"}, LABEL_SCHEMA]},
        "version": {"type": "string"},
        "manifestVersion": {"type": "number"},
        "requirements": REQUIREMENT_SCHEMA_V1,
        "icon": {"anyOf": [ICON_SCHEMA, {"type": "array", "items": ICON_SCHEMA}]},
        "entryPoints": {"type": "array", "items": ENTRYPOINT_SCHEMA_V1},
        "authorInfo": AUTHOR_INFO_SCHEMA,
    },
    "required": ["id", "name", "version", "manifestVersion", "requirements", "icon", "entryPoints"],
    "additionalProperties": False,
}

# Developer add-ons are still being written, so only the essentials are required
MANIFEST_SCHEMA_DEVELOPER_V1 = {
    "type": "object",
    "properties": {
        **MANIFEST_SCHEMA_V1["properties"],
        "externalURL": {"type": "string"},
    },
    "required": ["id", "entryPoints"],
    "additionalProperties": True,
}

MANIFEST_SCHEMA_V2 = {
    "type": "object",
    "properties": {
        "testId": {"type": "string"},
        "name": {"type": "string", "pattern": "^[a-zA-Z0-9]+[a-zA-Z0-9 ]{2,44}$"},
        "version": {"type": "string", "pattern": "^[0-9]+.[0-9]+.[0-9]+$"},
        "manifestVersion": {"type": "number"},
        "requirements": REQUIREMENT_SCHEMA_V2,
        "entryPoints": {"type": "array", "items": ENTRYPOINT_SCHEMA_V2},
    },
    "required": ["version", "manifestVersion", "requirements", "entryPoints"],
    "additionalProperties": True,
}

MANIFEST_SCHEMA_DEVELOPER_V2 = MANIFEST_SCHEMA_V2
