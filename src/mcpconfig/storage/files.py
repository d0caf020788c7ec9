"""
Blocking file primitives shared by the stores, the registry and the clients.

These run inside ``asyncio.to_thread``; OS failures are translated into
``FileSystemError`` and unparsable documents into ``StorageError``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from mcpconfig.core.errors import FileSystemError, StorageError
from mcpconfig.paths import WINDOWS, current_platform


def read_text(path: Path) -> str | None:
    """Read a UTF-8 file; a missing file reads as None."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise FileSystemError(f"Failed to read {path}: {exc}", str(path), "read") from exc


def write_text_atomic(path: Path, content: str, mode: int | None = None) -> None:
    """Write ``content`` through a temp file and rename it into place.

    ``mode`` is applied to the temp file before the rename, except on Windows.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(
            f"Failed to create directory {path.parent}: {exc}", str(path.parent), "mkdir"
        ) from exc

    temp_file = path.with_name(f".{path.name}.tmp")
    try:
        temp_file.write_text(content, encoding="utf-8")
        if mode is not None and current_platform() != WINDOWS:
            os.chmod(temp_file, mode)
        os.replace(temp_file, path)
    except OSError as exc:
        temp_file.unlink(missing_ok=True)
        raise FileSystemError(f"Failed to write {path}: {exc}", str(path), "write") from exc


def read_json_document(path: Path, storage_type: str) -> dict[str, Any] | None:
    """Read a JSON object from ``path``; None when the file does not exist."""
    content = read_text(path)
    if content is None:
        return None
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Malformed JSON in {path}: {exc}", str(path), storage_type) from exc
    if not isinstance(data, dict):
        raise StorageError(
            f"Expected a JSON object in {path}, got {type(data).__name__}",
            str(path),
            storage_type,
        )
    return data


def dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
