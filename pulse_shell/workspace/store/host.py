"""Host-owned state store.

The privileged store kept by the native host process.  Each key is persisted
as a small rotation of files under the data root::

    {data_root}/{prefix}/state/{key}.json          primary
    {data_root}/{prefix}/state/{key}.backup.json   previous primary
    {data_root}/{prefix}/state/{key}.tmp.json      staging file

The stored value (already JSON) is wrapped in a host envelope::

    {"schema_version": 1, "updated_at_unix_ms": ..., "ui_state": <value>}

A save stages the envelope in the temp file (fsynced), rotates the primary to
the backup slot, then renames the temp file into place.  A load reads the
primary and falls back to the backup, restoring the primary from it.

Older files are accepted and rewritten in the current shape on load:

- a bare value, or an object without ``schema_version``, is the value itself;
- ``schema_version: 0`` keeps the value under ``state`` or ``ui_state``.
"""

from __future__ import annotations

import json
import os
import threading
import time
from functools import partial
from pathlib import Path
from typing import Any, NamedTuple

from anyio import to_thread
from loguru import logger
from pydantic import BaseModel

from pulse_shell.workspace.store.base import validate_key

STATE_SCHEMA_VERSION = 1


class StateFileError(ValueError):
    """Raised when a host state file exists but cannot be decoded."""


class HostStateEnvelope(BaseModel):
    schema_version: int = STATE_SCHEMA_VERSION
    updated_at_unix_ms: int
    ui_state: Any


class DecodedState(NamedTuple):
    ui_state: Any
    needs_rewrite: bool


class StatePaths(NamedTuple):
    dir: Path
    primary: Path
    backup: Path
    temp: Path


class HostStateStore:
    """File-rotation implementation of the KeyValueStore protocol."""

    def __init__(self, data_root: str | Path, prefix: str | None = None) -> None:
        base = Path(data_root)
        if prefix:
            base = base / prefix
        self._dir = base / "state"
        self._io_lock = threading.Lock()

    def paths_for(self, key: str) -> StatePaths:
        key = validate_key(key)
        return StatePaths(
            dir=self._dir,
            primary=self._dir / f"{key}.json",
            backup=self._dir / f"{key}.backup.json",
            temp=self._dir / f"{key}.tmp.json",
        )

    # -- Read ------------------------------------------------------------------

    async def load(self, key: str) -> str | None:
        paths = self.paths_for(key)
        try:
            ui_state = await to_thread.run_sync(partial(self._load_sync, paths))
        except OSError as exc:
            logger.warning("Host store: failed to prepare state directory '{}': {}", paths.dir, exc)
            return None
        if ui_state is None:
            return None
        return json.dumps(ui_state)

    def _load_sync(self, paths: StatePaths) -> Any | None:
        with self._io_lock:
            paths.dir.mkdir(parents=True, exist_ok=True)

            try:
                decoded = read_state_file(paths.primary)
            except StateFileError as exc:
                logger.warning("Host store: failed to read primary state '{}': {}", paths.primary, exc)
            else:
                if decoded is not None:
                    if decoded.needs_rewrite:
                        self._rewrite(paths, decoded.ui_state, rotate=True)
                    return decoded.ui_state

            try:
                decoded = read_state_file(paths.backup)
            except StateFileError as exc:
                logger.warning("Host store: failed to read backup state '{}': {}", paths.backup, exc)
                return None
            if decoded is None:
                return None

            logger.info("Host store: restoring primary state from backup '{}'", paths.backup)
            self._rewrite(paths, decoded.ui_state, rotate=False)
            return decoded.ui_state

    def _rewrite(self, paths: StatePaths, ui_state: Any, *, rotate: bool) -> None:
        try:
            commit_state(paths, ui_state, rotate=rotate)
        except OSError as exc:
            logger.warning("Host store: failed to rewrite primary state '{}': {}", paths.primary, exc)

    # -- Write -----------------------------------------------------------------

    async def save(self, key: str, value: str) -> bool:
        paths = self.paths_for(key)
        try:
            ui_state = json.loads(value)
        except ValueError as exc:
            logger.warning("Host store: refusing to save non-JSON value for '{}': {}", key, exc)
            return False

        try:
            await to_thread.run_sync(partial(self._save_sync, paths, ui_state))
        except OSError as exc:
            logger.warning("Host store: failed to save state '{}': {}", paths.primary, exc)
            return False
        return True

    def _save_sync(self, paths: StatePaths, ui_state: Any) -> None:
        with self._io_lock:
            paths.dir.mkdir(parents=True, exist_ok=True)
            commit_state(paths, ui_state, rotate=True)


# -- Envelope decoding ---------------------------------------------------------


def decode_persisted_value(raw: Any) -> DecodedState:
    """Unwrap a host envelope, accepting the legacy shapes."""
    if not isinstance(raw, dict):
        return DecodedState(raw, needs_rewrite=True)

    if "schema_version" not in raw:
        return DecodedState(raw, needs_rewrite=True)

    schema_version = raw["schema_version"]
    if isinstance(schema_version, bool) or not isinstance(schema_version, int) or schema_version < 0:
        msg = f"schema_version must be a non-negative integer, got {schema_version!r}"
        raise StateFileError(msg)

    match schema_version:
        case 1:
            if "ui_state" not in raw:
                msg = "schema v1 is missing required 'ui_state' field"
                raise StateFileError(msg)
            return DecodedState(raw["ui_state"], needs_rewrite=False)
        case 0:
            for field in ("state", "ui_state"):
                if field in raw:
                    return DecodedState(raw[field], needs_rewrite=True)
            msg = "legacy schema v0 must contain either 'state' or 'ui_state'"
            raise StateFileError(msg)
        case _:
            msg = f"unsupported schema_version={schema_version}, this build supports up to {STATE_SCHEMA_VERSION}"
            raise StateFileError(msg)


# -- Sync helpers (run in thread pool) -----------------------------------------


def read_state_file(path: Path) -> DecodedState | None:
    """Read and decode a state file.  ``None`` if the file does not exist."""
    if not path.exists():
        return None
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f"failed to read state file: {exc}"
        raise StateFileError(msg) from exc
    try:
        parsed = json.loads(data)
    except ValueError as exc:
        msg = f"state file is not valid JSON: {exc}"
        raise StateFileError(msg) from exc
    return decode_persisted_value(parsed)


def commit_state(paths: StatePaths, ui_state: Any, *, rotate: bool) -> None:
    """Stage the envelope in the temp file and move it into the primary slot.

    With *rotate*, the current primary becomes the backup; otherwise the
    backup is left alone (used when restoring the primary from it).
    """
    envelope = HostStateEnvelope(updated_at_unix_ms=_unix_time_ms(), ui_state=ui_state)
    _write_temp_file(paths.temp, (envelope.model_dump_json(indent=2) + "\n").encode("utf-8"))

    if rotate and paths.primary.exists():
        os.replace(paths.primary, paths.backup)
    os.replace(paths.temp, paths.primary)


def _write_temp_file(path: Path, data: bytes) -> None:
    path.unlink(missing_ok=True)
    with path.open("xb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())


def _unix_time_ms() -> int:
    return time.time_ns() // 1_000_000
