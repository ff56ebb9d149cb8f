"""Workspace item data models.

The workspace is a flat list of items.  Hierarchy is expressed only through
``parent_id`` pointers and the sibling ``order`` value -- there is no child
list on any item.  Three variants share the common fields and are told apart
by the ``kind`` tag:

- ``WorkspaceGroup``: collapsible container, the only valid parent.
- ``BrowserTab``: a browser tab with a normalised URL.
- ``FileRef``: a reference to a local file.

Items are frozen: operations build new items with ``model_copy`` and return
new lists.  Field validators carry the wire rules used when restoring a
persisted session (trimmed non-empty strings, integer order, normalised
URLs), so an item built in memory obeys the same rules as a restored one.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from pulse_shell.workspace.urls import normalize_url

# -- Field coercion ----------------------------------------------------------


def _non_empty_string(value: object) -> str:
    if not isinstance(value, str):
        msg = "expected a string"
        raise ValueError(msg)  # noqa: TRY004
    stripped = value.strip()
    if not stripped:
        msg = "must not be blank"
        raise ValueError(msg)
    return stripped


def _nullable_string(value: object) -> str | None:
    # Anything that is not a string means "root".
    return value if isinstance(value, str) else None


def _truncated_integer(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = "order must be a number"
        raise ValueError(msg)  # noqa: TRY004
    if not math.isfinite(value):
        msg = "order must be finite"
        raise ValueError(msg)
    return math.trunc(value)


def _truthy(value: object) -> bool:
    if value is None or value is False or value == "":
        return False
    if isinstance(value, int | float):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


NonEmptyStr = Annotated[str, BeforeValidator(_non_empty_string)]
ParentId = Annotated[str | None, BeforeValidator(_nullable_string)]
Order = Annotated[int, BeforeValidator(_truncated_integer)]
Flag = Annotated[bool, BeforeValidator(_truthy)]
TabUrl = Annotated[str, BeforeValidator(_non_empty_string), AfterValidator(normalize_url)]


# -- Item variants -----------------------------------------------------------


class _ItemBase(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: NonEmptyStr
    parent_id: ParentId = Field(default=None, description="Owning group id, None for a root item")
    order: Order = Field(description="Position among siblings, only relative magnitude matters")
    title: NonEmptyStr


class WorkspaceGroup(_ItemBase):
    kind: Literal["group"] = "group"
    collapsed: Flag = False


class BrowserTab(_ItemBase):
    kind: Literal["browser-tab"] = "browser-tab"
    url: TabUrl


class FileRef(_ItemBase):
    kind: Literal["file-ref"] = "file-ref"
    file_path: NonEmptyStr


WorkspaceItem = Annotated[WorkspaceGroup | BrowserTab | FileRef, Field(discriminator="kind")]
"""Tagged union of all item variants, discriminated on ``kind``."""

ITEM_ADAPTER: TypeAdapter[WorkspaceItem] = TypeAdapter(WorkspaceItem)


def dump_item(item: WorkspaceItem) -> dict:
    """Wire shape of an item (camelCase keys, ``parentId`` kept when null)."""
    return item.model_dump(mode="json", by_alias=True)


# -- Seed workspace ----------------------------------------------------------

SEED_WORKSPACE: tuple[WorkspaceItem, ...] = (
    WorkspaceGroup(id="group-research", order=0, title="Research"),
    BrowserTab(
        id="tab-edge",
        parent_id="group-research",
        order=0,
        title="Microsoft Edge",
        url="https://www.microsoft.com/edge",
    ),
    BrowserTab(
        id="tab-cef",
        parent_id="group-research",
        order=1,
        title="CEF-RS",
        url="https://github.com/tauri-apps/cef-rs",
    ),
    WorkspaceGroup(id="group-project", order=1, title="Project"),
    FileRef(id="file-readme", parent_id="group-project", order=0, title="README.md", file_path="README.md"),
    BrowserTab(
        id="tab-shadcn",
        parent_id="group-project",
        order=1,
        title="shadcn Registry",
        url="https://ui.shadcn.com/docs/registry/getting-started",
    ),
)
"""Built-in workspace used when no persisted session can be restored."""


def seed_workspace() -> list[WorkspaceItem]:
    return list(SEED_WORKSPACE)
