"""
Configuration manager.

The single entry point used by the CLI (and by MCP servers embedding
mcpconfig): set, get, list and delete values, load secrets, and push the
configuration out to MCP clients.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog

from mcpconfig.config.resolver import ConfigResolver, ResolvedValue
from mcpconfig.config.sensitivity import SensitivityClassifier
from mcpconfig.config.settings import Settings, get_settings
from mcpconfig.core.scope import Scope
from mcpconfig.distribution.distributor import Distributor
from mcpconfig.distribution.models import ClientInfo, DistributionOutcome
from mcpconfig.distribution.registry import ClientRegistry
from mcpconfig.identity import get_server_name
from mcpconfig.storage.gitignore import GitignoreManager
from mcpconfig.storage.keys import split_key
from mcpconfig.storage.secrets import SecretStore
from mcpconfig.storage.values import ValueStore

logger = structlog.get_logger()


class ConfigManager:
    """Wires stores, classifier, resolver and distributor for one project."""

    def __init__(
        self,
        project_root: Path | None = None,
        server_name: str | None = None,
        registry: ClientRegistry | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.project_root = project_root or Path.cwd()
        self.server_name = server_name or get_server_name(self.project_root)

        self.registry = registry or ClientRegistry(
            server_name=self.server_name,
            project_root=self.project_root,
            settings=self.settings,
        )
        if self.registry.server_name is None:
            self.registry.set_server_name(self.server_name)

        self.values = ValueStore(self.server_name, self.project_root, self.settings)
        self.secrets = SecretStore(self.server_name, self.project_root, self.settings)
        self.gitignore = GitignoreManager(self.project_root, self.secrets.path(Scope.LOCAL))
        self.classifier = SensitivityClassifier(self.registry)
        self.resolver = ConfigResolver(self.values, self.secrets)
        self.distributor = Distributor(
            self.registry,
            self.values,
            self.secrets,
            server_name=self.server_name,
            project_root=self.project_root,
            settings=self.settings,
        )

    async def set(self, key: str, value: Any, scope: Scope = Scope.LOCAL) -> bool:
        """Store ``value`` in the store its key belongs to; returns whether it was secret.

        Local writes are distributed to the clients straight away.
        """
        split_key(key)
        sensitive = await self.classifier.is_sensitive(key)
        if sensitive:
            await self.secrets.set(key, value, scope)
            await self.values.delete(key, scope)
            await self.gitignore.ensure(scope)
        else:
            await self.values.set(key, value, scope)
            await self.secrets.delete(key, scope)
        logger.info("config_set", key=key, scope=str(scope), sensitive=sensitive)

        if scope == Scope.LOCAL:
            await self.distributor.distribute()
        return sensitive

    async def get(self, key: str) -> ResolvedValue | None:
        return await self.resolver.resolve(key)

    async def get_all(self) -> list[ResolvedValue]:
        return await self.resolver.resolve_all()

    async def delete(self, key: str, scope: Scope = Scope.LOCAL) -> bool:
        """Remove ``key`` from both stores of ``scope``; returns whether it existed."""
        split_key(key)
        removed_secret = await self.secrets.delete(key, scope)
        removed_value = await self.values.delete(key, scope)
        removed = removed_secret or removed_value
        logger.info("config_deleted", key=key, scope=str(scope), removed=removed)

        if scope == Scope.LOCAL:
            await self.distributor.distribute()
        return removed

    async def load_environment(self, scope: Scope = Scope.LOCAL) -> dict[str, str]:
        """Secrets of ``scope`` as an environment map; the caller decides how to apply it."""
        return await self.secrets.load(scope)

    async def distribute(self) -> list[DistributionOutcome]:
        return await self.distributor.distribute()

    async def distribute_to_clients(self, client_ids: list[str]) -> list[DistributionOutcome]:
        return await self.distributor.distribute_to_clients(client_ids)

    async def get_available_clients(self) -> list[ClientInfo]:
        return await self.distributor.get_available_clients()
