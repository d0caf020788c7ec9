"""
Configuration resolver.

Answers "what is the value of this key" across both stores and both scopes.
Priority, highest first:

1. local secret
2. local config
3. global secret
4. global config
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcpconfig.core.scope import Scope
from mcpconfig.storage.secrets import SecretStore
from mcpconfig.storage.values import ValueStore

_MISSING = object()


@dataclass(frozen=True)
class ResolvedValue:
    """A value together with where it was found."""

    key: str
    value: Any
    source: str
    path: Path


class ConfigResolver:
    """Merges the value and secret stores across scopes into one answer per key."""

    def __init__(self, values: ValueStore, secrets: SecretStore):
        self.values = values
        self.secrets = secrets

    def _probes(self) -> list[tuple[str, ValueStore | SecretStore, Scope]]:
        return [
            ("local secret", self.secrets, Scope.LOCAL),
            ("local config", self.values, Scope.LOCAL),
            ("global secret", self.secrets, Scope.GLOBAL),
            ("global config", self.values, Scope.GLOBAL),
        ]

    async def resolve(self, key: str) -> ResolvedValue | None:
        for source, store, scope in self._probes():
            if isinstance(store, ValueStore):
                value = await store.get(key, scope, default=_MISSING)
            else:
                value = await store.get(key, scope)
                if value is None:
                    value = _MISSING
            if value is not _MISSING:
                return ResolvedValue(key=key, value=value, source=source, path=store.path(scope))
        return None

    async def resolve_all(self) -> list[ResolvedValue]:
        """Every known key, once, with its highest-priority value."""
        keys: dict[str, None] = {}
        for _, store, scope in self._probes():
            for key in await store.get_all_keys(scope):
                keys.setdefault(key, None)

        results = []
        for key in keys:
            resolved = await self.resolve(key)
            if resolved is not None:
                results.append(resolved)
        return results
