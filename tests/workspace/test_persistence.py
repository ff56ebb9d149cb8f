"""Tests for debounced session write-back and startup loading."""

from __future__ import annotations

import asyncio

from pulse_shell.workspace.codec import default_session_state, deserialize_session, serialize_session
from pulse_shell.workspace.models.session import UiSessionState
from pulse_shell.workspace.persistence import SessionPersister, load_initial_session_state
from pulse_shell.workspace.store import LocalKeyValueStore

KEY = "session"


class MemoryStore:
    """In-memory KeyValueStore that records every save."""

    def __init__(self, value: str | None = None, *, accept: bool = True) -> None:
        self.values: dict[str, str] = {} if value is None else {KEY: value}
        self.saves: list[str] = []
        self._accept = accept

    async def load(self, key: str) -> str | None:
        return self.values.get(key)

    async def save(self, key: str, value: str) -> bool:
        self.saves.append(value)
        if self._accept:
            self.values[key] = value
        return self._accept


class BrokenStore:
    async def load(self, key: str) -> str | None:
        raise RuntimeError("load exploded")

    async def save(self, key: str, value: str) -> bool:
        raise RuntimeError("save exploded")


def _state(address: str) -> UiSessionState:
    return default_session_state().model_copy(update={"address": address})


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


async def test_load_prefers_primary() -> None:
    primary = MemoryStore(serialize_session(_state("primary")))
    fallback = MemoryStore(serialize_session(_state("fallback")))

    state = await load_initial_session_state(primary, fallback, KEY)
    assert state.address == "primary"


async def test_load_uses_fallback_when_primary_empty() -> None:
    state = await load_initial_session_state(MemoryStore(), MemoryStore(serialize_session(_state("fb"))), KEY)
    assert state.address == "fb"


async def test_load_uses_fallback_when_primary_unusable() -> None:
    primary = MemoryStore('{"version": 9, "items": []}')
    fallback = MemoryStore(serialize_session(_state("fb")))

    state = await load_initial_session_state(primary, fallback, KEY)
    assert state.address == "fb"


async def test_load_survives_raising_store() -> None:
    state = await load_initial_session_state(BrokenStore(), MemoryStore(serialize_session(_state("fb"))), KEY)
    assert state.address == "fb"


async def test_load_defaults_when_nothing_stored() -> None:
    assert await load_initial_session_state(None, MemoryStore("garbage"), KEY) == default_session_state()


# ---------------------------------------------------------------------------
# Debounced writes
# ---------------------------------------------------------------------------


async def test_burst_of_schedules_writes_once_with_last_state() -> None:
    primary, fallback = MemoryStore(), MemoryStore()
    persister = SessionPersister(primary, fallback, KEY, debounce=0.01)

    persister.schedule(_state("a"))
    persister.schedule(_state("b"))
    persister.schedule(_state("c"))
    assert persister.pending

    await asyncio.sleep(0.05)
    await persister.aclose()

    assert not persister.pending
    assert len(primary.saves) == 1
    assert len(fallback.saves) == 1
    assert deserialize_session(primary.saves[0]).address == "c"
    assert primary.saves == fallback.saves


async def test_nothing_written_before_debounce_elapses() -> None:
    primary = MemoryStore()
    persister = SessionPersister(primary, None, KEY, debounce=10)

    persister.schedule(_state("a"))
    await asyncio.sleep(0)

    assert primary.saves == []
    await persister.aclose()


async def test_flush_writes_pending_immediately() -> None:
    primary = MemoryStore()
    persister = SessionPersister(primary, None, KEY, debounce=10)

    persister.schedule(_state("a"))
    await persister.flush()

    assert not persister.pending
    assert deserialize_session(primary.values[KEY]).address == "a"

    # Nothing left to write.
    await persister.flush()
    assert len(primary.saves) == 1


async def test_fallback_written_when_primary_declines() -> None:
    primary, fallback = MemoryStore(accept=False), MemoryStore()
    persister = SessionPersister(primary, fallback, KEY)

    await persister.write("payload")

    assert primary.saves == ["payload"]
    assert fallback.values == {KEY: "payload"}


async def test_fallback_written_when_primary_raises() -> None:
    fallback = MemoryStore()
    persister = SessionPersister(BrokenStore(), fallback, KEY)

    await persister.write("payload")

    assert fallback.values == {KEY: "payload"}


async def test_write_with_every_store_failing_does_not_raise() -> None:
    persister = SessionPersister(BrokenStore(), MemoryStore(accept=False), KEY)
    await persister.write("payload")


async def test_persisted_session_reloads_from_disk(tmp_path) -> None:
    local = LocalKeyValueStore(tmp_path)
    persister = SessionPersister(None, local, KEY, debounce=0)
    state = _state("https://example.com/saved")

    persister.schedule(state)
    await persister.aclose()

    assert await load_initial_session_state(None, local, KEY) == state
