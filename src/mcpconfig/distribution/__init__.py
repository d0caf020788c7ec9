"""
Distribution of configuration into MCP client files.

- ClientRegistry: client descriptors and platform path templates
- ClientAdapter: per-client formatting and file merge
- Distributor: fan-out with per-client failure aggregation
"""

from mcpconfig.distribution.clients import ClientAdapter
from mcpconfig.distribution.distributor import Distributor
from mcpconfig.distribution.models import (
    ClientDescriptor,
    ClientInfo,
    ConfigFormat,
    ConfigSnapshot,
    DistributionOutcome,
    PathKind,
)
from mcpconfig.distribution.registry import ClientRegistry, upgrade_registry

__all__ = [
    "ClientAdapter",
    "ClientDescriptor",
    "ClientInfo",
    "ClientRegistry",
    "ConfigFormat",
    "ConfigSnapshot",
    "DistributionOutcome",
    "Distributor",
    "PathKind",
    "upgrade_registry",
]
