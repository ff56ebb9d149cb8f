"""Key-value store interface for session persistence.

The workspace session is persisted as one serialized string under a fixed
key.  Two stores take part: a privileged store owned by the native host
(``HostStateStore``) and a local fallback (``LocalKeyValueStore``).  Callers
write to both and read from whichever answers first.

The interface is async so file I/O can run in the thread pool, matching the
rest of the I/O layer.  Store failures are reported through the return value
(``None`` / ``False``) and logged; they are never raised to the caller.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class InvalidStoreKeyError(ValueError):
    """Raised when a key cannot be used as a file name."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Async protocol for loading and saving serialized session blobs."""

    async def load(self, key: str) -> str | None:
        """Return the stored value, or ``None`` if absent or unreadable."""
        ...

    async def save(self, key: str, value: str) -> bool:
        """Store *value* under *key*.  Returns ``False`` on failure."""
        ...


def validate_key(key: str) -> str:
    """Return *key* unchanged if it is a safe, flat file name."""
    if not _KEY_RE.match(key) or ".." in key:
        raise InvalidStoreKeyError(key)
    return key
