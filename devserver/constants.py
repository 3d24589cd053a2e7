"""Global constants for the add-on development server."""

import os

# Add-on directory layout
DEFAULT_SRC_DIRECTORY = os.getenv("ADDON_SRC_DIRECTORY", "src")
DEFAULT_OUTPUT_DIRECTORY = os.getenv("ADDON_OUTPUT_DIRECTORY", "dist")
MANIFEST_JSON = "manifest.json"

# Server
DEFAULT_HOST_NAME = os.getenv("ADDON_HOST", "localhost")
DEFAULT_PORT = int(os.getenv("ADDON_PORT", "5241"))
SSL_CERTFILE = os.getenv("ADDON_SSL_CERTFILE", "")
SSL_KEYFILE = os.getenv("ADDON_SSL_KEYFILE", "")

# Time (seconds) a burst of file changes must be quiet for before a rebuild
DEBOUNCE_INTERVAL = float(os.getenv("ADDON_DEBOUNCE_SECONDS", "1.0"))

# Whether the developer account may use privileged APIs
IS_PRIVILEGED = os.getenv("ADDON_PRIVILEGED", "false").lower() in ("1", "true", "yes")

DEFAULT_ADD_ON_NAME = "Add-on"
SUPPORTED_LANGUAGES = ["en-US"]
SUPPORTED_APPS = ["Express"]

# Files the transpiler owns; static copies skip them
EXTENSIONS_TO_TRANSPILE = {".ts", ".tsx", ".jsx"}

# Injected into the output so add-on logs carry the add-on name
CONSOLE_OVERRIDE_SCRIPT_NAME = "console-override.js"
CONSOLE_OVERRIDE_SCRIPT = """(function () {{
    const prefix = "[Add-on: " + {add_on_name} + "]";
    ["log", "info", "warn", "error", "debug"].forEach(function (level) {{
        const original = console[level].bind(console);
        console[level] = function () {{
            original(prefix, ...arguments);
        }};
    }});
}})();
"""

# OS metadata files never packaged
OS_FILES_TO_SKIP = {".DS_Store", "Thumbs.db", "desktop.ini"}
