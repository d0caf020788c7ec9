"""
Secrets file store.

Values classified as sensitive are kept in a ``NAME=value`` file per scope,
next to the value document, readable by the owner only:

    # Generated by mcpconfig
    # DO NOT COMMIT THIS FILE TO VERSION CONTROL
    API_SECRET=abc
    GREETING="hello world"

Callers address entries by dot-path key (``api.secret``); the upper-snake
name is derived with ``to_secret_name``.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

import structlog

from mcpconfig.config.settings import APP_NAME, Settings, get_settings
from mcpconfig.core.errors import ValidationError
from mcpconfig.core.scope import Scope
from mcpconfig.paths import storage_dir
from mcpconfig.storage.files import read_text, write_text_atomic
from mcpconfig.storage.keys import from_secret_name, split_key, to_secret_name
from mcpconfig.storage.locking import file_lock

logger = structlog.get_logger()

SECRETS_FILE_MODE = 0o600

HEADER = (
    f"# Generated by {APP_NAME}",
    "# DO NOT COMMIT THIS FILE TO VERSION CONTROL",
)


_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"n": "\n", "r": "\r", "\\": "\\", '"': '"'}
_ESCAPE_RE = re.compile(r'\\([nr\\"])')


def _unescape(text: str) -> str:
    return _ESCAPE_RE.sub(lambda match: _UNESCAPES[match.group(1)], text)


def parse_secrets(content: str) -> dict[str, str]:
    """
    Parse secrets-file content into an ordered name -> value map.

    Double-quoted values understand ``\\n``, ``\\r``, ``\\\\`` and ``\\"``
    escapes; single-quoted values are taken literally.
    """
    entries: dict[str, str] = {}
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        name, _, value = stripped.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = _unescape(value[1:-1])
        elif len(value) >= 2 and value[0] == value[-1] == "'":
            value = value[1:-1]
        entries[name.strip()] = value
    return entries


def secret_text(value: Any) -> str:
    """Text stored for a value; booleans use JSON spelling."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _needs_quotes(text: str) -> bool:
    if any(ch.isspace() or ch in _ESCAPES for ch in text):
        return True
    return text[:1] in ("'", '"', "#") or text[-1:] in ("'", '"')


def format_secret_value(value: Any) -> str:
    """Render a value for one ``NAME=value`` line, quoting and escaping as needed."""
    text = secret_text(value)
    if not _needs_quotes(text):
        return text
    escaped = "".join(_ESCAPES.get(ch, ch) for ch in text)
    return f'"{escaped}"'


def serialize_secrets(entries: dict[str, Any]) -> str:
    lines = [*HEADER, ""]
    lines.extend(f"{name}={format_secret_value(value)}" for name, value in entries.items())
    return "\n".join(lines) + "\n"


class SecretStore:
    """Line-oriented ``NAME=value`` storage, one file per scope."""

    storage_type = "env"

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
        return directory / self.settings.secrets_filename

    async def _read(self, path: Path) -> dict[str, str]:
        content = await asyncio.to_thread(read_text, path)
        return parse_secrets(content) if content else {}

    async def _write(self, path: Path, entries: dict[str, str]) -> None:
        await asyncio.to_thread(
            write_text_atomic, path, serialize_secrets(entries), SECRETS_FILE_MODE
        )

    async def get(self, key: str, scope: Scope = Scope.LOCAL) -> str | None:
        if not key:
            return None
        entries = await self._read(self.path(scope))
        return entries.get(to_secret_name(key))

    async def set(self, key: str, value: Any, scope: Scope = Scope.LOCAL) -> None:
        split_key(key)
        if value is None:
            raise ValidationError("Secret value must not be None", "value", value)
        path = self.path(scope)
        name = to_secret_name(key)
        async with file_lock(path):
            entries = await self._read(path)
            entries[name] = secret_text(value)
            await self._write(path, entries)
        # Never log the value itself
        logger.debug("secret_set", name=name, scope=str(scope), path=str(path))

    async def delete(self, key: str, scope: Scope = Scope.LOCAL) -> bool:
        split_key(key)
        path = self.path(scope)
        name = to_secret_name(key)
        async with file_lock(path):
            entries = await self._read(path)
            if name not in entries:
                return False
            del entries[name]
            await self._write(path, entries)
        logger.debug("secret_deleted", name=name, scope=str(scope), path=str(path))
        return True

    async def get_all(self, scope: Scope = Scope.LOCAL) -> dict[str, str]:
        """All entries keyed by their upper-snake names."""
        return await self._read(self.path(scope))

    async def get_all_keys(self, scope: Scope = Scope.LOCAL) -> list[str]:
        """All entries as dot-path keys."""
        return [from_secret_name(name) for name in await self._read(self.path(scope))]

    async def load(self, scope: Scope = Scope.LOCAL) -> dict[str, str]:
        """Parse the secrets file for ``scope`` and return its entries.

        The process environment is left untouched; callers merge the
        returned map themselves if they need to.
        """
        entries = await self._read(self.path(scope))
        logger.debug("secrets_loaded", scope=str(scope), count=len(entries))
        return entries
