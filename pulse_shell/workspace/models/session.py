"""Session state data models.

``UiSessionState`` is the cursor state layered on top of the item tree: the
item list itself, the selected item and the omnibox address.  The address may
run ahead of the selected tab's committed URL while the user is typing.

``SessionEnvelope`` is the versioned wire wrapper written by the session
codec.  Version 0 is the legacy, envelope-less shape; version 1 is current.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pulse_shell.workspace.models.items import WorkspaceItem

CURRENT_SESSION_VERSION = 1
LEGACY_SESSION_VERSION = 0


class UiSessionState(BaseModel):
    """Items plus selection and address, as restored at startup."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    items: list[WorkspaceItem] = Field(default_factory=list)
    selected_item_id: str = ""
    address: str = ""


class SessionEnvelope(BaseModel):
    """Persisted session wrapper: ``{version, items, selectedItemId, address}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: int = CURRENT_SESSION_VERSION
    items: list[WorkspaceItem]
    selected_item_id: str
    address: str
