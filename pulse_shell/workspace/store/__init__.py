"""Key-value store implementations for session persistence."""

from pulse_shell.workspace.store.base import InvalidStoreKeyError, KeyValueStore
from pulse_shell.workspace.store.host import HostStateStore, StateFileError
from pulse_shell.workspace.store.local import LocalKeyValueStore

__all__ = ["HostStateStore", "InvalidStoreKeyError", "KeyValueStore", "LocalKeyValueStore", "StateFileError"]
