"""Local filesystem key-value store.

The fallback store: one plain file per key under a unified data root with an
optional namespace prefix::

    {data_root}/{prefix}/local/{key}

When prefix is None, the path collapses to::

    {data_root}/local/{key}

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.  Writes are
atomic: data goes to a temporary file in the same directory which is then
renamed over the target, so a crash mid-write never leaves a torn value.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from functools import partial
from pathlib import Path

from anyio import to_thread
from loguru import logger

from pulse_shell.workspace.store.base import validate_key


class LocalKeyValueStore:
    """Local filesystem implementation of the KeyValueStore protocol."""

    def __init__(self, data_root: str | Path, prefix: str | None = None) -> None:
        base = Path(data_root)
        if prefix:
            base = base / prefix
        self._base = base / "local"

    def path_for(self, key: str) -> Path:
        return self._base / validate_key(key)

    async def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return await to_thread.run_sync(partial(_read_file, path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Local store: failed to read '{}': {}", path, exc)
            return None

    async def save(self, key: str, value: str) -> bool:
        path = self.path_for(key)
        try:
            await to_thread.run_sync(partial(atomic_write, path, value))
        except OSError as exc:
            logger.warning("Local store: failed to write '{}': {}", path, exc)
            return False
        return True

    async def delete(self, key: str) -> None:
        """Delete the value for *key*.  No-op if not found."""
        path = self.path_for(key)
        await to_thread.run_sync(partial(path.unlink, missing_ok=True))


# -- Sync helpers (run in thread pool) -----------------------------------------


def atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def _read_file(path: Path) -> str | None:
    """Read file contents, or ``None`` if the file does not exist."""
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")
