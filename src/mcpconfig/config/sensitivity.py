"""Decides whether a configuration key holds a secret."""

from __future__ import annotations

import structlog

from mcpconfig.distribution.defaults import DEFAULT_SENSITIVE_PATTERNS
from mcpconfig.distribution.registry import ClientRegistry

logger = structlog.get_logger()


class SensitivityClassifier:
    """Case-insensitive substring match of a key against sensitive patterns.

    Patterns come from the registry; if the registry has none or cannot be
    loaded, the bundled defaults are used. Classification never raises.
    """

    def __init__(self, registry: ClientRegistry | None = None):
        self.registry = registry
        self._patterns: list[str] | None = None

    async def load_patterns(self) -> list[str]:
        if self._patterns is not None:
            return self._patterns

        patterns: list[str] = []
        if self.registry is not None:
            try:
                patterns = await self.registry.get_sensitive_patterns()
            except Exception as e:
                logger.debug("sensitive_patterns_unavailable", error=str(e))
        if not patterns:
            patterns = list(DEFAULT_SENSITIVE_PATTERNS)

        self._patterns = [p.lower() for p in patterns if p]
        return self._patterns

    async def is_sensitive(self, key: str | None) -> bool:
        if not key:
            return False
        lower_key = key.lower()
        return any(pattern in lower_key for pattern in await self.load_patterns())
