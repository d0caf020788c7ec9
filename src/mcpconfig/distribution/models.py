"""
Client descriptors and distribution data.

A descriptor is persisted in the registry file as:

    "vscode": {
        "name": "Visual Studio Code",
        "configKey": "servers",
        "autoLoadEnv": false,
        "configFormat": "structured",
        "envFormat": "${env:${VAR}}",
        "global": {"config-path": {"linux": "..."}, "env-path": {...}},
        "local": {...}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from mcpconfig.core.scope import Scope


class ConfigFormat(StrEnum):
    """Shape of the entry written into a client's file."""

    DEFAULT = "default"
    STRUCTURED = "structured"


class PathKind(StrEnum):
    """Which of a client's files a template points at."""

    CONFIG = "config-path"
    SECRETS = "env-path"


@dataclass
class ClientDescriptor:
    """Static metadata describing how to locate and format one client's config."""

    id: str
    name: str
    config_key: str = "mcpServers"
    auto_load_env: bool = False
    config_format: ConfigFormat = ConfigFormat.DEFAULT
    env_format: str | None = None
    paths: dict[Scope, dict[PathKind, dict[str, str]]] = field(default_factory=dict)

    def template(self, scope: Scope, kind: PathKind, platform: str) -> str | None:
        return self.paths.get(scope, {}).get(kind, {}).get(platform)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "configKey": self.config_key,
            "autoLoadEnv": self.auto_load_env,
            "configFormat": str(self.config_format),
        }
        if self.env_format:
            data["envFormat"] = self.env_format
        for scope, kinds in self.paths.items():
            data[str(scope)] = {
                str(kind): dict(templates) for kind, templates in kinds.items()
            }
        return data

    @classmethod
    def from_dict(cls, client_id: str, data: dict[str, Any]) -> ClientDescriptor:
        paths: dict[Scope, dict[PathKind, dict[str, str]]] = {}
        for scope in Scope:
            section = data.get(str(scope))
            if not isinstance(section, dict):
                continue
            paths[scope] = {
                kind: dict(section[str(kind)])
                for kind in PathKind
                if isinstance(section.get(str(kind)), dict)
            }
        return cls(
            id=client_id,
            name=data.get("name") or client_id,
            config_key=data.get("configKey", "mcpServers"),
            auto_load_env=bool(data.get("autoLoadEnv", False)),
            config_format=ConfigFormat(data.get("configFormat", ConfigFormat.DEFAULT)),
            env_format=data.get("envFormat"),
            paths=paths,
        )


@dataclass(frozen=True)
class ClientInfo:
    """Summary of a registered client."""

    id: str
    name: str
    auto_load_env: bool


@dataclass
class ConfigSnapshot:
    """The settings and secrets handed to every client adapter."""

    server_name: str
    settings: dict[str, Any] = field(default_factory=dict)
    secrets: dict[str, str] = field(default_factory=dict)


@dataclass
class DistributionOutcome:
    """Result of writing the snapshot into one client's file."""

    client_id: str
    path: Path | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
