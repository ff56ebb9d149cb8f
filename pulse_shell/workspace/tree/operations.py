"""Tree operations.

Every function takes the current item list and returns a new one; the input
is never modified.  Requests that cannot apply (unknown id, wrong item kind,
nothing to swap with) are no-ops that return the input list itself, because
UI events can legitimately race with state changes -- closing an
already-closed tab is not an error.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from typing import NamedTuple

from loguru import logger

from pulse_shell.workspace.models.enums import MoveDirection
from pulse_shell.workspace.models.events import RuntimeUpdate
from pulse_shell.workspace.models.items import BrowserTab, WorkspaceGroup, WorkspaceItem
from pulse_shell.workspace.tree.query import children_of, find_item, next_order, reindex_all_parents
from pulse_shell.workspace.urls import normalize_url, title_from_url

DEFAULT_GROUP_TITLE = "New Group"


def new_item_id() -> str:
    """Default identifier generator for new items."""
    return str(uuid.uuid4())


class AddResult(NamedTuple):
    items: list[WorkspaceItem]
    new_id: str


# -- Updates -------------------------------------------------------------------


def toggle_group_collapsed(items: list[WorkspaceItem], group_id: str) -> list[WorkspaceItem]:
    target = find_item(items, group_id)
    if not isinstance(target, WorkspaceGroup):
        return items
    return _replace(items, target.model_copy(update={"collapsed": not target.collapsed}))


def update_tab_url(items: list[WorkspaceItem], item_id: str, url: str) -> list[WorkspaceItem]:
    """Point a browser tab at *url* (normalised) and retitle it from the host."""
    target = find_item(items, item_id)
    if not isinstance(target, BrowserTab):
        return items
    normalized = normalize_url(url)
    return _replace(items, target.model_copy(update={"url": normalized, "title": title_from_url(normalized)}))


def apply_runtime_update(items: list[WorkspaceItem], item_id: str, update: RuntimeUpdate) -> list[WorkspaceItem]:
    """Fold a content-load notification into a browser tab.

    Blank or whitespace-only fields keep the previous value.
    """
    target = find_item(items, item_id)
    if not isinstance(target, BrowserTab):
        return items

    next_url = (update.url or "").strip()
    next_title = (update.title or "").strip()
    changes: dict[str, str] = {}
    if next_url:
        changes["url"] = next_url
    if next_title:
        changes["title"] = next_title
    if not changes:
        return items
    return _replace(items, target.model_copy(update=changes))


# -- Creation ------------------------------------------------------------------


def add_group(
    items: list[WorkspaceItem],
    title: str = DEFAULT_GROUP_TITLE,
    *,
    id_factory: Callable[[], str] = new_item_id,
) -> list[WorkspaceItem]:
    """Append a new, expanded root group after the existing root items."""
    group = WorkspaceGroup(id=id_factory(), order=next_order(items, None), title=title.strip() or DEFAULT_GROUP_TITLE)
    logger.debug("Workspace: add group {} ({!r})", group.id, group.title)
    return [*items, group]


def add_browser_tab(
    items: list[WorkspaceItem],
    parent_id: str | None,
    url: str,
    *,
    id_factory: Callable[[], str] = new_item_id,
) -> AddResult:
    """Append a new tab as the last child of *parent_id*.

    Returns the new list together with the new tab's id, so callers can
    select and activate it straight away.
    """
    normalized = normalize_url(url)
    tab = BrowserTab(
        id=id_factory(),
        parent_id=parent_id,
        order=next_order(items, parent_id),
        title=title_from_url(normalized),
        url=normalized,
    )
    logger.debug("Workspace: add tab {} under {} -> {}", tab.id, parent_id, tab.url)
    return AddResult([*items, tab], tab.id)


# -- Structure -----------------------------------------------------------------


def remove_item(items: list[WorkspaceItem], item_id: str) -> list[WorkspaceItem]:
    """Remove an item and, for groups, every transitive descendant.

    Remaining sibling sets are reindexed to contiguous orders.
    """
    if find_item(items, item_id) is None:
        return items

    removed = {item_id}
    frontier = [item_id]
    while frontier:
        parent_id = frontier.pop(0)
        for item in items:
            if item.parent_id == parent_id and item.id not in removed:
                removed.add(item.id)
                frontier.append(item.id)

    logger.debug("Workspace: remove {} ({} item(s))", item_id, len(removed))
    return reindex_all_parents([item for item in items if item.id not in removed])


def move_item(items: list[WorkspaceItem], item_id: str, direction: MoveDirection | str) -> list[WorkspaceItem]:
    """Swap an item with its previous (``up``) or next (``down``) sibling."""
    target = find_item(items, item_id)
    if target is None:
        return items

    siblings = children_of(items, target.parent_id)
    index = next(i for i, item in enumerate(siblings) if item.id == item_id)
    swap_index = index - 1 if MoveDirection(direction) is MoveDirection.UP else index + 1
    if swap_index < 0 or swap_index >= len(siblings):
        return items

    current, other = siblings[index], siblings[swap_index]
    return _replace(
        items,
        current.model_copy(update={"order": other.order}),
        other.model_copy(update={"order": current.order}),
    )


# -- Helpers -------------------------------------------------------------------


def _replace(items: Sequence[WorkspaceItem], *replacements: WorkspaceItem) -> list[WorkspaceItem]:
    by_id = {item.id: item for item in replacements}
    return [by_id.get(item.id, item) for item in items]
