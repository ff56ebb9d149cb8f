"""Debounced session write-back.

After every mutation the host schedules a save; saves arriving within the
debounce window replace the pending one (last write wins), so a burst of
edits costs one write.  A write goes to the primary (host) store and then to
the fallback (local) store.  Each destination is attempted on its own and a
failure in one never stops the other or reaches the caller.

Loading happens once at startup: the primary store is tried first, then the
fallback, then the built-in seed session.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from pulse_shell.workspace.codec import default_session_state, deserialize_session, serialize_session
from pulse_shell.workspace.models.session import UiSessionState
from pulse_shell.workspace.store.base import KeyValueStore

DEFAULT_DEBOUNCE_SECONDS = 0.25


async def load_initial_session_state(
    primary: KeyValueStore | None,
    fallback: KeyValueStore | None,
    key: str,
) -> UiSessionState:
    """Restore the session from the first store that holds a usable one."""
    for name, store in (("primary", primary), ("fallback", fallback)):
        if store is None:
            continue
        try:
            serialized = await store.load(key)
        except Exception:
            logger.exception("Persistence: {} store failed to load '{}'", name, key)
            continue
        if not serialized:
            continue
        state = deserialize_session(serialized)
        if state is not None:
            logger.info("Persistence: restored session from {} store ({} items)", name, len(state.items))
            return state
        logger.warning("Persistence: {} store held an unusable session, ignoring it", name)

    logger.info("Persistence: no stored session, starting from the seed workspace")
    return default_session_state()


class SessionPersister:
    """Coalesces session saves behind a fixed debounce delay.

    Must be used from a running event loop.
    """

    def __init__(
        self,
        primary: KeyValueStore | None,
        fallback: KeyValueStore | None,
        key: str,
        *,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._key = key
        self._debounce = debounce
        self._pending: str | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """True while a write is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self, state: UiSessionState) -> None:
        """Arm (or re-arm) the debounced write with the latest state."""
        self._pending = serialize_session(state)
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._debounce, self._fire)

    async def flush(self) -> None:
        """Write the pending state now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        serialized, self._pending = self._pending, None
        if serialized is not None:
            await self.write(serialized)

    async def aclose(self) -> None:
        """Flush the pending write and wait for writes already in flight."""
        await self.flush()
        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def write(self, serialized: str) -> None:
        """Save to the primary store, then to the fallback store."""
        saved_primary = await self._save("primary", self._primary, serialized)
        saved_fallback = await self._save("fallback", self._fallback, serialized)
        if not saved_primary and not saved_fallback:
            logger.warning("Persistence: session could not be saved to any store")

    def _fire(self) -> None:
        self._handle = None
        serialized, self._pending = self._pending, None
        if serialized is None:
            return
        task = asyncio.get_running_loop().create_task(self.write(serialized))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save(self, name: str, store: KeyValueStore | None, serialized: str) -> bool:
        if store is None:
            return False
        try:
            saved = await store.save(self._key, serialized)
        except Exception:
            logger.exception("Persistence: {} store raised while saving '{}'", name, self._key)
            return False
        if not saved:
            logger.debug("Persistence: {} store declined to save '{}'", name, self._key)
        return saved
