"""
Client adapters.

One adapter per registered client. An adapter formats the configuration
snapshot in the client's shape and merges it into the client's own file,
touching only this server's entry under the client's namespace key.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog

from mcpconfig.core.errors import McpConfigError
from mcpconfig.core.scope import Scope
from mcpconfig.distribution.models import ClientDescriptor, ConfigFormat, ConfigSnapshot, PathKind
from mcpconfig.distribution.registry import ClientRegistry
from mcpconfig.paths import home_dir
from mcpconfig.storage.files import dump_json, read_text, write_text_atomic
from mcpconfig.storage.locking import file_lock

logger = structlog.get_logger()

ENV_VAR_PLACEHOLDER = "${VAR}"
DEFAULT_ENV_REFERENCE = "${{env:{name}}}"


def _load_client_document(path: Path) -> dict[str, Any]:
    """Existing client file contents; missing or malformed files read as ``{}``."""
    content = read_text(path)
    if not content:
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        logger.warning("client_config_unparsable", path=str(path))
        return {}
    return data if isinstance(data, dict) else {}


class ClientAdapter:
    """Writes configuration snapshots into one client's config file."""

    def __init__(
        self,
        descriptor: ClientDescriptor,
        registry: ClientRegistry,
        scope: Scope = Scope.GLOBAL,
    ):
        self.descriptor = descriptor
        self.registry = registry
        self.scope = scope

    @property
    def client_id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name or self.descriptor.id

    async def config_path(self) -> Path:
        return await self.registry.get_client_path(self.client_id, self.scope, PathKind.CONFIG)

    async def is_installed(self) -> bool:
        """Whether this client's config directory exists or can be created.

        Files directly in the home directory (``~/.claude.json``) always count
        as installed.
        """
        try:
            parent = (await self.config_path()).parent
            if parent == Path(home_dir()):
                return True
            await asyncio.to_thread(parent.mkdir, parents=True, exist_ok=True)
            return True
        except (McpConfigError, OSError) as e:
            logger.debug("client_not_installed", client=self.client_id, reason=str(e))
            return False

    def format_env(self, secrets: dict[str, str]) -> dict[str, str]:
        env = {}
        for name, value in secrets.items():
            if self.descriptor.auto_load_env:
                env[name] = value
            elif self.descriptor.env_format:
                env[name] = self.descriptor.env_format.replace(ENV_VAR_PLACEHOLDER, name)
            else:
                env[name] = DEFAULT_ENV_REFERENCE.format(name=name)
        return env

    def format_config(self, snapshot: ConfigSnapshot) -> dict[str, Any]:
        """This server's entry in the client's shape."""
        settings = dict(snapshot.settings or {})
        config_format = self.descriptor.config_format

        if config_format == ConfigFormat.STRUCTURED and "command" in settings:
            formatted: dict[str, Any] = {
                "command": settings.pop("command"),
                "args": settings.pop("args", None) or [],
            }
            if settings:
                formatted["config"] = settings
        elif config_format in (ConfigFormat.STRUCTURED, ConfigFormat.DEFAULT):
            formatted = {"config": settings}
        else:
            raise ValueError(f"Unsupported config format: {config_format}")

        if snapshot.secrets:
            formatted["env"] = self.format_env(snapshot.secrets)
        return formatted

    def _merge_and_write(self, path: Path, snapshot: ConfigSnapshot) -> None:
        document = _load_client_document(path)
        namespace = document.get(self.descriptor.config_key)
        if not isinstance(namespace, dict):
            namespace = document[self.descriptor.config_key] = {}
        namespace[snapshot.server_name] = self.format_config(snapshot)
        write_text_atomic(path, dump_json(document))

    async def update_config(self, snapshot: ConfigSnapshot) -> Path:
        """Replace this server's entry in the client's file; returns the path written."""
        path = await self.config_path()
        async with file_lock(path):
            await asyncio.to_thread(self._merge_and_write, path, snapshot)
        logger.info("client_config_updated", client=self.client_id, path=str(path))
        return path
