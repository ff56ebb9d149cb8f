"""Native host bridge.

The transport to the host process is not part of the core; it only needs
something that accepts positional command arguments and reports whether the
host took them.  Runtime notifications coming back from the host are parsed
into ``RuntimeEvent`` here before they touch the tree.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from loguru import logger

from pulse_shell.workspace.models.events import RuntimeEvent

HostArg = str | int | float | bool


@runtime_checkable
class HostBridge(Protocol):
    def send(self, *args: HostArg) -> bool:
        """Deliver a command to the host.  Returns ``False`` if it was not taken."""
        ...


class NullHostBridge:
    """Bridge used when no host is attached; every command is dropped."""

    def send(self, *args: HostArg) -> bool:
        return False


class RecordingHostBridge:
    """Bridge that keeps every command it was given."""

    def __init__(self, *, accept: bool = True) -> None:
        self.sent: list[tuple[HostArg, ...]] = []
        self._accept = accept

    def send(self, *args: HostArg) -> bool:
        self.sent.append(args)
        return self._accept


def send_host_command(bridge: HostBridge | None, *args: HostArg) -> bool:
    if bridge is None:
        return False
    try:
        return bool(bridge.send(*args))
    except Exception:
        logger.exception("Host bridge: command {} failed", args[0] if args else None)
        return False


def parse_runtime_event(value: object) -> RuntimeEvent | None:
    """Parse a ``{tabId, url?, title?}`` notification; ``None`` if malformed."""
    if not isinstance(value, Mapping):
        return None

    tab_id = value.get("tabId")
    if not isinstance(tab_id, str) or not tab_id.strip():
        return None

    return RuntimeEvent(tab_id=tab_id, url=_non_blank(value.get("url")), title=_non_blank(value.get("title")))


def _non_blank(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
