"""
Dot-path key handling.

Keys such as ``database.host`` address nested JSON objects in the value
store and upper-snake names such as ``DATABASE_HOST`` in the secrets store.

The secret-name mapping is lossy: ``from_secret_name(to_secret_name(k)) == k``
holds only for keys made of lowercase ASCII letters, digits and dots. Case in
mixed-case segments and underscores inside segments are not recoverable.
"""

from __future__ import annotations

from typing import Any

from mcpconfig.core.errors import ValidationError


def split_key(key: str) -> list[str]:
    """Split and validate a dot-path key."""
    if not key or not isinstance(key, str):
        raise ValidationError("Configuration key must be a non-empty string", "key", key)
    segments = key.split(".")
    if any(not segment.strip() for segment in segments):
        raise ValidationError(f"Invalid configuration key: {key!r}", "key", key)
    return segments


def get_nested(data: dict[str, Any], key: str, default: Any = None) -> Any:
    current: Any = data
    for segment in key.split("."):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current


def set_nested(data: dict[str, Any], key: str, value: Any) -> None:
    """Set ``value`` at ``key``, replacing non-object intermediates with ``{}``."""
    segments = split_key(key)
    current = data
    for segment in segments[:-1]:
        if not isinstance(current.get(segment), dict):
            current[segment] = {}
        current = current[segment]
    current[segments[-1]] = value


def delete_nested(data: dict[str, Any], key: str) -> bool:
    """Remove the leaf at ``key``. Empty parents are left in place."""
    segments = key.split(".")
    current: Any = data
    for segment in segments[:-1]:
        current = current.get(segment) if isinstance(current, dict) else None
        if not isinstance(current, dict):
            return False
    if segments[-1] not in current:
        return False
    del current[segments[-1]]
    return True


def flatten_keys(data: dict[str, Any], prefix: str = "") -> list[str]:
    """Depth-first leaf paths; lists and None are leaves, empty objects add nothing."""
    keys = []
    for k, v in data.items():
        path = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            keys.extend(flatten_keys(v, path))
        else:
            keys.append(path)
    return keys


def to_secret_name(key: str) -> str:
    """Convert a dot-path key to a secrets-file name: ``api.secret`` -> ``API_SECRET``."""
    return key.replace(".", "_").upper()


def from_secret_name(name: str) -> str:
    """Convert a secrets-file name to a dot-path key: ``API_SECRET`` -> ``api.secret``."""
    return name.lower().replace("_", ".")
