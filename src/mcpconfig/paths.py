"""
Platform-aware path resolution.

Templates use ``${NAME}`` placeholders:

- ``${HOME}``: the user's home directory (required)
- ``${APPDATA}``: the platform application-data directory (required on Windows)
- ``${SERVER_NAME}``: the server whose configuration is being managed
- any environment variable that is set

Placeholders that match none of these are left untouched.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

from mcpconfig.config.settings import APP_NAME, Settings, get_settings
from mcpconfig.core.errors import MissingEnvironmentError
from mcpconfig.core.scope import Scope

PLACEHOLDER_PATTERN = re.compile(r"\$\{(\w+)\}")

WINDOWS = "win32"
MACOS = "darwin"
LINUX = "linux"


def current_platform() -> str:
    """Platform identifier used as key in path templates."""
    if sys.platform.startswith("win"):
        return WINDOWS
    if sys.platform == MACOS:
        return MACOS
    return LINUX


def home_dir() -> str:
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if home:
        return home
    try:
        return str(Path.home())
    except RuntimeError as exc:
        raise MissingEnvironmentError("Unable to determine home directory", "HOME") from exc


def app_data_dir() -> str:
    """Per-user application data directory for the current platform."""
    platform = current_platform()
    if platform == WINDOWS:
        app_data = os.environ.get("APPDATA")
        if not app_data:
            raise MissingEnvironmentError(
                "APPDATA environment variable not found on Windows", "APPDATA"
            )
        return app_data
    if platform == MACOS:
        return str(Path(home_dir()) / "Library" / "Application Support")
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return xdg_config
    return str(Path(home_dir()) / ".config")


def user_config_dir() -> Path:
    """Directory holding mcpconfig's own per-user files."""
    return Path(app_data_dir()) / APP_NAME


def resolve_template(template: str, variables: dict[str, str] | None = None) -> str:
    """Substitute placeholders in a path template.

    Explicit ``variables`` win over the built-in and environment lookups.
    """
    variables = variables or {}

    def replace_match(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        if name == "HOME":
            return home_dir()
        if name == "APPDATA":
            return app_data_dir()
        value = os.environ.get(name)
        return value if value is not None else match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace_match, template)


def anchor(path: str | Path, project_root: Path) -> Path:
    """Make a resolved template absolute; relative paths are project-relative."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return project_root / candidate


def storage_dir(
    scope: Scope,
    server_name: str,
    project_root: Path,
    settings: Settings | None = None,
) -> Path:
    """Directory holding the value document and secrets file for a scope."""
    settings = settings or get_settings()
    if scope == Scope.LOCAL:
        return project_root / settings.local_dir
    return user_config_dir() / server_name
