"""
Tracked Typings
===============

The closed set of Sciter declaration files kept in sync, and the names the
rest of the package uses to locate them remotely and on disk.
"""

MODULES_DIR_NAME = "sciter_modules"

# Raw GitHub folder holding the upstream .d.ts files
TYPINGS_BASE_URL = "https://raw.githubusercontent.com/shujaatak/sciter-intellisense/main/sciter_modules"

STATE_KEY_ETAG_PREFIX = "sciter_typings_etag:"

TYPINGS_FILES: tuple[str, ...] = (
    "Element.d.ts",
    "Element.selection.d.ts",
    "Element.state.d.ts",
    "Element.style.d.ts",
    "Event.d.ts",
    "Graphics.d.ts",
    "Node.d.ts",
    "Window.d.ts",
    "behaviors.d.ts",
    "document.d.ts",
    "global.d.ts",
    "jsx.d.ts",
    "module-debug.d.ts",
    "module-env.d.ts",
    "module-sciter.d.ts",
    "module-storage.d.ts",
    "module-sys.d.ts",
)


def typing_url(file_name: str, base_url: str = TYPINGS_BASE_URL) -> str:
    """Build the remote location of a tracked file."""
    return f"{base_url.rstrip('/')}/{file_name}"
