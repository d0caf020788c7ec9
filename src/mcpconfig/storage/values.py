"""
JSON value store.

Non-sensitive configuration lives in one JSON document per scope:

- local:  ``<project>/.mcpconfig/config.json``
- global: ``<user config dir>/mcpconfig/<server>/config.json``
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog

from mcpconfig.config.settings import Settings, get_settings
from mcpconfig.core.scope import Scope
from mcpconfig.paths import storage_dir
from mcpconfig.storage.files import dump_json, read_json_document, write_text_atomic
from mcpconfig.storage.keys import delete_nested, flatten_keys, get_nested, set_nested, split_key
from mcpconfig.storage.locking import file_lock

logger = structlog.get_logger()


class ValueStore:
    """Nested-key JSON document storage, one document per scope."""

    storage_type = "json"

    def __init__(
        self,
        server_name: str,
        project_root: Path | None = None,
        settings: Settings | None = None,
    ):
        self.server_name = server_name
        self.project_root = project_root or Path.cwd()
        self.settings = settings or get_settings()

    def path(self, scope: Scope = Scope.LOCAL) -> Path:
        directory = storage_dir(scope, self.server_name, self.project_root, self.settings)
        return directory / self.settings.value_filename

    async def _read(self, path: Path) -> dict[str, Any]:
        data = await asyncio.to_thread(read_json_document, path, self.storage_type)
        return data if data is not None else {}

    async def _write(self, path: Path, data: dict[str, Any]) -> None:
        await asyncio.to_thread(write_text_atomic, path, dump_json(data))

    async def get(self, key: str, scope: Scope = Scope.LOCAL, default: Any = None) -> Any:
        """Value at ``key``; ``default`` when any segment is missing."""
        if not key:
            return default
        data = await self._read(self.path(scope))
        return get_nested(data, key, default)

    async def set(self, key: str, value: Any, scope: Scope = Scope.LOCAL) -> None:
        split_key(key)
        path = self.path(scope)
        async with file_lock(path):
            data = await self._read(path)
            set_nested(data, key, value)
            await self._write(path, data)
        logger.debug("value_set", key=key, scope=str(scope), path=str(path))

    async def delete(self, key: str, scope: Scope = Scope.LOCAL) -> bool:
        """Remove ``key``; returns whether anything was removed."""
        split_key(key)
        path = self.path(scope)
        async with file_lock(path):
            data = await asyncio.to_thread(read_json_document, path, self.storage_type)
            if data is None or not delete_nested(data, key):
                return False
            await self._write(path, data)
        logger.debug("value_deleted", key=key, scope=str(scope), path=str(path))
        return True

    async def get_all_keys(self, scope: Scope = Scope.LOCAL) -> list[str]:
        return flatten_keys(await self._read(self.path(scope)))

    async def get_all(self, scope: Scope = Scope.LOCAL) -> dict[str, Any]:
        return await self._read(self.path(scope))
