"""In-process serialization of read-modify-write cycles on one file."""

from __future__ import annotations

import asyncio
import weakref
from pathlib import Path

_locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Lock]] = (
    weakref.WeakKeyDictionary()
)


def file_lock(path: Path) -> asyncio.Lock:
    """Return the lock guarding ``path`` on the running event loop.

    Locks are kept per loop so a lock is never awaited from a loop other
    than the one it was created on.
    """
    loop = asyncio.get_running_loop()
    per_loop = _locks.setdefault(loop, {})
    key = str(path.resolve())
    lock = per_loop.get(key)
    if lock is None:
        lock = per_loop[key] = asyncio.Lock()
    return lock
