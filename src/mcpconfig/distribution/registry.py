"""
Client registry.

Maps client ids (``vscode``, ``claude-code``, ...) to descriptors holding
per-scope, per-platform path templates. The map is persisted as JSON in the
user config directory and loaded lazily once per registry instance.

Registry files carry a ``schemaVersion`` tag. Files written before the tag
existed (version 1) are upgraded in place by ``upgrade_registry``; the upgrade
only ever moves forward.
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from typing import Any

import structlog

from mcpconfig.config.settings import Settings, get_settings
from mcpconfig.core.errors import ClientError, ConfigurationError, StorageError, ValidationError
from mcpconfig.core.scope import Scope
from mcpconfig.distribution.defaults import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_CLIENTS,
    DEFAULT_SENSITIVE_PATTERNS,
    SCHEMA_VERSION_KEY,
    SENSITIVE_PATTERNS_KEY,
    default_mappings,
)
from mcpconfig.distribution.models import ClientDescriptor, ClientInfo, PathKind
from mcpconfig.paths import anchor, current_platform, resolve_template, user_config_dir
from mcpconfig.storage.files import dump_json, read_json_document, write_text_atomic
from mcpconfig.storage.locking import file_lock

logger = structlog.get_logger()

REGISTRY_FILENAME = "client-mappings.json"

# Shapes written by earlier releases
_LEGACY_SCOPE_KEYS = {"global-paths": Scope.GLOBAL, "local-paths": Scope.LOCAL}
_DESCRIPTOR_FIELDS = ("name", "configKey", "autoLoadEnv", "configFormat", "envFormat")


def _upgrade_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    clients: dict[str, dict[str, Any]] = {}

    if any(key in data for key in _LEGACY_SCOPE_KEYS):
        # {"global-paths": {id: {..., "config-path": {...}}}, "local-paths": {...}}
        for legacy_key, scope in _LEGACY_SCOPE_KEYS.items():
            for client_id, entry in (data.get(legacy_key) or {}).items():
                if not isinstance(entry, dict):
                    continue
                client = clients.setdefault(client_id, {})
                for name in _DESCRIPTOR_FIELDS:
                    if name in entry and name not in client:
                        client[name] = entry[name]
                client[str(scope)] = {
                    str(kind): dict(entry[str(kind)])
                    for kind in PathKind
                    if isinstance(entry.get(str(kind)), dict)
                }
    elif isinstance(data.get("clients"), dict):
        # {"clients": {id: {"name": ..., "paths": {platform: template}}}, "storage": {...}}
        for client_id, entry in data["clients"].items():
            if not isinstance(entry, dict):
                continue
            client = {name: entry[name] for name in _DESCRIPTOR_FIELDS if name in entry}
            client[str(Scope.GLOBAL)] = {str(PathKind.CONFIG): dict(entry.get("paths") or {})}
            clients[client_id] = client
    else:
        # Untagged, but already client-first
        clients = {
            key: value
            for key, value in data.items()
            if key not in (SCHEMA_VERSION_KEY, SENSITIVE_PATTERNS_KEY) and isinstance(value, dict)
        }

    if not clients:
        clients = copy.deepcopy(DEFAULT_CLIENTS)

    patterns = data.get(SENSITIVE_PATTERNS_KEY)
    if not isinstance(patterns, list):
        patterns = list(DEFAULT_SENSITIVE_PATTERNS)

    return {SCHEMA_VERSION_KEY: 2, **clients, SENSITIVE_PATTERNS_KEY: patterns}


_UPGRADES = {1: _upgrade_v1_to_v2}


def upgrade_registry(data: dict[str, Any]) -> dict[str, Any]:
    """Bring a registry document up to ``CURRENT_SCHEMA_VERSION``."""
    version = data.get(SCHEMA_VERSION_KEY, 1)
    while version < CURRENT_SCHEMA_VERSION:
        data = _UPGRADES[version](data)
        version = data[SCHEMA_VERSION_KEY]
    return data


class ClientRegistry:
    """Loads, caches and persists client descriptors; resolves their paths."""

    storage_type = "registry"

    def __init__(
        self,
        server_name: str | None = None,
        path: Path | None = None,
        project_root: Path | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.server_name = server_name
        self.project_root = project_root or Path.cwd()
        self._path = path or self.settings.registry_path
        self._clients: dict[str, ClientDescriptor] | None = None
        self._sensitive_patterns: list[str] = []

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = user_config_dir() / REGISTRY_FILENAME
        return self._path

    def set_server_name(self, server_name: str) -> None:
        self.server_name = server_name

    def _parse(self, data: dict[str, Any]) -> None:
        clients: dict[str, ClientDescriptor] = {}
        for key, value in data.items():
            if key in (SCHEMA_VERSION_KEY, SENSITIVE_PATTERNS_KEY):
                continue
            if not isinstance(value, dict):
                raise StorageError(
                    f"Client entry {key!r} in {self.path} is not an object",
                    str(self.path),
                    self.storage_type,
                )
            try:
                clients[key] = ClientDescriptor.from_dict(key, value)
            except ValueError as exc:
                raise StorageError(
                    f"Invalid client entry {key!r} in {self.path}: {exc}",
                    str(self.path),
                    self.storage_type,
                ) from exc
        self._clients = clients
        patterns = data.get(SENSITIVE_PATTERNS_KEY) or []
        self._sensitive_patterns = [str(p) for p in patterns]

    def _serialize(self) -> dict[str, Any]:
        return {
            SCHEMA_VERSION_KEY: CURRENT_SCHEMA_VERSION,
            **{cid: descriptor.to_dict() for cid, descriptor in (self._clients or {}).items()},
            SENSITIVE_PATTERNS_KEY: list(self._sensitive_patterns),
        }

    async def _save(self) -> None:
        await asyncio.to_thread(write_text_atomic, self.path, dump_json(self._serialize()))
        logger.info("saved_registry", path=str(self.path))

    async def load(self) -> dict[str, ClientDescriptor]:
        """Load the descriptor map once; later calls return the cached map."""
        if self._clients is not None:
            return self._clients

        async with file_lock(self.path):
            if self._clients is not None:
                return self._clients

            data = await asyncio.to_thread(read_json_document, self.path, self.storage_type)
            if data is None:
                self._parse(default_mappings())
                await self._save()
                logger.info("created_default_registry", path=str(self.path))
                return self._clients

            version = data.get(SCHEMA_VERSION_KEY, 1)
            if not isinstance(version, int):
                raise StorageError(
                    f"Invalid {SCHEMA_VERSION_KEY} in {self.path}: {version!r}",
                    str(self.path),
                    self.storage_type,
                )
            if version < CURRENT_SCHEMA_VERSION:
                self._parse(upgrade_registry(data))
                await self._save()
                logger.info(
                    "migrated_registry",
                    path=str(self.path),
                    from_version=version,
                    to_version=CURRENT_SCHEMA_VERSION,
                )
            else:
                if version > CURRENT_SCHEMA_VERSION:
                    logger.warning("registry_schema_newer", path=str(self.path), version=version)
                self._parse(data)
                logger.debug("loaded_registry", path=str(self.path), clients=len(self._clients))

        return self._clients

    async def get_client_config(self, client_id: str) -> ClientDescriptor | None:
        clients = await self.load()
        return clients.get(client_id)

    async def get_available_clients(self) -> list[ClientInfo]:
        clients = await self.load()
        return [
            ClientInfo(id=cid, name=descriptor.name, auto_load_env=descriptor.auto_load_env)
            for cid, descriptor in clients.items()
        ]

    async def get_sensitive_patterns(self) -> list[str]:
        await self.load()
        return list(self._sensitive_patterns)

    async def add_client(self, client_id: str, descriptor: ClientDescriptor | dict[str, Any]) -> None:
        """Add or replace a client descriptor and persist the registry."""
        clients = await self.load()
        if isinstance(descriptor, dict):
            try:
                descriptor = ClientDescriptor.from_dict(client_id, descriptor)
            except ValueError as exc:
                raise ValidationError(
                    f"Invalid client descriptor {client_id!r}: {exc}",
                    "configFormat",
                    descriptor.get("configFormat"),
                ) from exc
        descriptor.id = client_id
        clients[client_id] = descriptor
        async with file_lock(self.path):
            await self._save()

    def resolve_path(self, template: str) -> str:
        """Substitute placeholders; unknown ones are left as they are."""
        variables = {"SERVER_NAME": self.server_name} if self.server_name else {}
        return resolve_template(template, variables)

    async def get_client_path(
        self,
        client_id: str,
        scope: Scope = Scope.GLOBAL,
        kind: PathKind = PathKind.CONFIG,
    ) -> Path:
        """Resolved path of a client's config (or secrets) file for ``scope``."""
        clients = await self.load()
        descriptor = clients.get(client_id)
        if descriptor is None:
            raise ClientError(f"Unknown client: {client_id}", client_id)

        platform = current_platform()
        template = descriptor.template(scope, kind, platform)
        if not template:
            raise ConfigurationError(
                f"No {scope} {kind} mapping for {client_id} on {platform}",
                client_id=client_id,
                platform=platform,
            )
        return anchor(self.resolve_path(template), self.project_root)
