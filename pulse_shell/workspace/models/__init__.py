"""Data models for the workspace core."""

from pulse_shell.workspace.models.enums import (
    CommandCapability,
    CommandCategory,
    CommandId,
    HostCommand,
    ItemKind,
    MoveDirection,
)
from pulse_shell.workspace.models.events import RuntimeEvent, RuntimeUpdate
from pulse_shell.workspace.models.items import (
    ITEM_ADAPTER,
    SEED_WORKSPACE,
    BrowserTab,
    FileRef,
    WorkspaceGroup,
    WorkspaceItem,
    dump_item,
    seed_workspace,
)
from pulse_shell.workspace.models.session import (
    CURRENT_SESSION_VERSION,
    LEGACY_SESSION_VERSION,
    SessionEnvelope,
    UiSessionState,
)

__all__ = [
    "CURRENT_SESSION_VERSION",
    "ITEM_ADAPTER",
    "LEGACY_SESSION_VERSION",
    "SEED_WORKSPACE",
    # Items
    "BrowserTab",
    # Enums
    "CommandCapability",
    "CommandCategory",
    "CommandId",
    "FileRef",
    "HostCommand",
    "ItemKind",
    "MoveDirection",
    # Events
    "RuntimeEvent",
    "RuntimeUpdate",
    # Session
    "SessionEnvelope",
    "UiSessionState",
    "WorkspaceGroup",
    "WorkspaceItem",
    "dump_item",
    "seed_workspace",
]
