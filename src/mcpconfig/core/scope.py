"""Storage scopes shared by the stores, the registry and the resolver."""

from __future__ import annotations

from enum import StrEnum


class Scope(StrEnum):
    """Partition of configuration: project-relative or per-user."""

    LOCAL = "local"
    GLOBAL = "global"
