"""
Server identity lookup.

The server name is the project's own package name, read from
``pyproject.toml`` (``[project].name`` or ``[tool.poetry].name``) or
``package.json``. Lookup never fails; it falls back to ``mcp-server``.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

import structlog

from mcpconfig.config.settings import DEFAULT_SERVER_NAME, get_settings

logger = structlog.get_logger()


def _name_from_pyproject(path: Path) -> str | None:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    name = data.get("project", {}).get("name")
    if not name:
        name = data.get("tool", {}).get("poetry", {}).get("name")
    return name or None


def _name_from_package_json(path: Path) -> str | None:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return data.get("name") if isinstance(data, dict) else None


def get_server_name(project_root: Path | None = None) -> str:
    """Name of the server being configured.

    Search order:
    1. MCPCONFIG_SERVER_NAME
    2. pyproject.toml in the project root
    3. package.json in the project root
    4. ``mcp-server``
    """
    override = get_settings().server_name
    if override:
        return override

    root = project_root or Path.cwd()
    for filename, reader in (
        ("pyproject.toml", _name_from_pyproject),
        ("package.json", _name_from_package_json),
    ):
        path = root / filename
        if not path.exists():
            continue
        try:
            name = reader(path)
        except (OSError, ValueError, AttributeError) as e:
            logger.debug("server_name_lookup_failed", path=str(path), error=str(e))
            continue
        if name:
            return str(name)

    return DEFAULT_SERVER_NAME
