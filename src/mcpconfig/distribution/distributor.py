"""
Distributor.

Builds one configuration snapshot from the local stores and writes it into
every registered client's file. Failures are isolated per client: every
client is attempted, and a single ``DistributionError`` listing all failures
is raised afterwards.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from mcpconfig.config.settings import Settings, get_settings
from mcpconfig.core.errors import ClientError, DistributionError
from mcpconfig.core.scope import Scope
from mcpconfig.distribution.clients import ClientAdapter
from mcpconfig.distribution.models import ClientInfo, ConfigSnapshot, DistributionOutcome
from mcpconfig.distribution.registry import ClientRegistry
from mcpconfig.identity import get_server_name
from mcpconfig.logging import bind_context
from mcpconfig.storage.secrets import SecretStore
from mcpconfig.storage.values import ValueStore

logger = structlog.get_logger()


class Distributor:
    """Fans the current configuration out to client config files."""

    def __init__(
        self,
        registry: ClientRegistry,
        values: ValueStore,
        secrets: SecretStore,
        server_name: str | None = None,
        project_root: Path | None = None,
        scope: Scope | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.values = values
        self.secrets = secrets
        self.server_name = server_name
        self.project_root = project_root or Path.cwd()
        self.scope = scope or self.settings.distribution_scope
        self._adapters: dict[str, ClientAdapter] | None = None

    async def _get_adapters(self) -> dict[str, ClientAdapter]:
        """One adapter per registered client, built on first use."""
        if self._adapters is None:
            adapters = {}
            for info in await self.registry.get_available_clients():
                descriptor = await self.registry.get_client_config(info.id)
                if descriptor is not None:
                    adapters[info.id] = ClientAdapter(descriptor, self.registry, self.scope)
            self._adapters = adapters
        return self._adapters

    async def gather_configuration(self) -> ConfigSnapshot:
        server_name = self.server_name or get_server_name(self.project_root)
        return ConfigSnapshot(
            server_name=server_name,
            settings=await self.values.get_all(Scope.LOCAL),
            secrets=await self.secrets.get_all(Scope.LOCAL),
        )

    async def _write_all(
        self,
        adapters: list[ClientAdapter],
        snapshot: ConfigSnapshot,
        check_installed: bool,
    ) -> list[DistributionOutcome]:
        outcomes = []
        for adapter in adapters:
            log = bind_context(client=adapter.client_id, server=snapshot.server_name)
            try:
                if check_installed and not await adapter.is_installed():
                    log.debug("client_skipped_not_installed")
                    continue
                path = await adapter.update_config(snapshot)
                outcomes.append(DistributionOutcome(client_id=adapter.client_id, path=path))
            except Exception as e:
                log.warning("client_distribution_failed", error=str(e), error_type=type(e).__name__)
                outcomes.append(DistributionOutcome(client_id=adapter.client_id, error=e))

        failures = [outcome for outcome in outcomes if not outcome.succeeded]
        if failures:
            raise DistributionError(failures)
        return outcomes

    async def distribute(self) -> list[DistributionOutcome]:
        """Write the snapshot into every installed client."""
        adapters = await self._get_adapters()
        snapshot = await self.gather_configuration()
        outcomes = await self._write_all(list(adapters.values()), snapshot, check_installed=True)
        logger.info("distributed", clients=[o.client_id for o in outcomes])
        return outcomes

    async def distribute_to_clients(self, client_ids: list[str]) -> list[DistributionOutcome]:
        """Write the snapshot into the given clients only.

        Unknown ids are rejected before anything is written.
        """
        adapters = await self._get_adapters()
        unknown = [cid for cid in client_ids if cid not in adapters]
        if unknown:
            raise ClientError(f"Unknown client(s): {', '.join(unknown)}", unknown)

        selected = [adapters[cid] for cid in dict.fromkeys(client_ids)]
        snapshot = await self.gather_configuration()
        outcomes = await self._write_all(selected, snapshot, check_installed=False)
        logger.info("distributed", clients=[o.client_id for o in outcomes])
        return outcomes

    async def get_available_clients(self) -> list[ClientInfo]:
        return await self.registry.get_available_clients()
