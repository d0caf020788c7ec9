"""
Bundled client descriptors and sensitive-key patterns.

Used when no registry file exists yet, and as the fallback pattern set for
the sensitivity classifier.
"""

from __future__ import annotations

import copy
from typing import Any

SCHEMA_VERSION_KEY = "schemaVersion"
SENSITIVE_PATTERNS_KEY = "sensitivePatterns"
CURRENT_SCHEMA_VERSION = 2

DEFAULT_SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "key",
    "token",
    "auth",
    "credential",
    "private",
    "api_key",
    "api_secret",
    "access_token",
    "refresh_token",
    "private_key",
    "certificate",
]


def _same_everywhere(template: str) -> dict[str, str]:
    return {"win32": template, "darwin": template, "linux": template}


# Secrets for every client sit next to the server's global value document.
_GLOBAL_ENV_PATH = _same_everywhere("${APPDATA}/mcpconfig/${SERVER_NAME}/.env")
_LOCAL_ENV_PATH = _same_everywhere(".mcpconfig/.env")

DEFAULT_CLIENTS: dict[str, dict[str, Any]] = {
    "vscode": {
        "name": "Visual Studio Code",
        "configKey": "servers",
        "autoLoadEnv": False,
        "configFormat": "structured",
        "envFormat": "${env:${VAR}}",
        "global": {
            "config-path": {
                "win32": "${APPDATA}/Code/User/mcp.json",
                "darwin": "${HOME}/Library/Application Support/Code/User/mcp.json",
                "linux": "${HOME}/.config/Code/User/mcp.json",
            },
            "env-path": _GLOBAL_ENV_PATH,
        },
        "local": {
            "config-path": _same_everywhere(".vscode/mcp.json"),
            "env-path": _LOCAL_ENV_PATH,
        },
    },
    "claude-code": {
        "name": "Claude Code",
        "configKey": "mcpServers",
        "autoLoadEnv": False,
        "configFormat": "default",
        "global": {
            "config-path": _same_everywhere("${HOME}/.claude.json"),
            "env-path": _GLOBAL_ENV_PATH,
        },
        "local": {
            "config-path": _same_everywhere(".mcp.json"),
            "env-path": _LOCAL_ENV_PATH,
        },
    },
    "claude-desktop": {
        "name": "Claude Desktop",
        "configKey": "mcpServers",
        "autoLoadEnv": False,
        "configFormat": "default",
        "global": {
            "config-path": {
                "win32": "${APPDATA}/Claude/claude_desktop_config.json",
                "darwin": "${HOME}/Library/Application Support/Claude/claude_desktop_config.json",
                "linux": "${HOME}/.config/Claude/claude_desktop_config.json",
            },
            "env-path": _GLOBAL_ENV_PATH,
        },
        # Claude Desktop has no project-level configuration
        "local": {
            "config-path": {
                "win32": "${APPDATA}/Claude/claude_desktop_config.json",
                "darwin": "${HOME}/Library/Application Support/Claude/claude_desktop_config.json",
                "linux": "${HOME}/.config/Claude/claude_desktop_config.json",
            },
            "env-path": _LOCAL_ENV_PATH,
        },
    },
    "cursor": {
        "name": "Cursor",
        "configKey": "mcpServers",
        "autoLoadEnv": True,
        "configFormat": "structured",
        "global": {
            "config-path": _same_everywhere("${HOME}/.cursor/mcp.json"),
            "env-path": _GLOBAL_ENV_PATH,
        },
        "local": {
            "config-path": _same_everywhere(".cursor/mcp.json"),
            "env-path": _LOCAL_ENV_PATH,
        },
    },
}


def default_mappings() -> dict[str, Any]:
    """A fresh copy of the bundled registry document."""
    return {
        SCHEMA_VERSION_KEY: CURRENT_SCHEMA_VERSION,
        **copy.deepcopy(DEFAULT_CLIENTS),
        SENSITIVE_PATTERNS_KEY: list(DEFAULT_SENSITIVE_PATTERNS),
    }
