"""Drop reconciler.

Turns a resolved drag-and-drop gesture -- the id of the dragged (*active*)
item and the id of the item it was released over -- into new parent and
order assignments.  Gesture sensing happens elsewhere; this module only sees
the id pair.

A dragged group is placed among the root groups.  Tabs and file references are moved into the group under the
drop target and spliced in at the target's position.  Every sibling set the
move touches is reindexed to contiguous ``0..n-1`` orders so that
``next_order`` stays correct and visual position is unambiguous.
"""

from __future__ import annotations

from loguru import logger

from pulse_shell.workspace.models.items import WorkspaceGroup, WorkspaceItem
from pulse_shell.workspace.tree.query import apply_orders, children_of, find_item, is_descendant


def move_item_by_drop(items: list[WorkspaceItem], active_id: str, over_id: str) -> list[WorkspaceItem]:
    """Apply a drop of *active_id* onto *over_id*.

    No-op (returns *items*) when the ids are equal, either id is unknown, or
    the drop target does not resolve to a group.
    """
    if active_id == over_id:
        return items

    active = find_item(items, active_id)
    over = find_item(items, over_id)
    if active is None or over is None:
        return items

    if isinstance(active, WorkspaceGroup):
        return _move_group(items, active, over)
    return _move_child(items, active, over)


def _target_parent_id(over: WorkspaceItem) -> str | None:
    # Dropping onto a group targets that group; onto anything else, its group.
    return over.id if isinstance(over, WorkspaceGroup) else over.parent_id


def _move_group(items: list[WorkspaceItem], active: WorkspaceGroup, over: WorkspaceItem) -> list[WorkspaceItem]:
    target_group_id = _target_parent_id(over)
    if target_group_id is None or target_group_id == active.id:
        return items
    if is_descendant(items, target_group_id, active.id):
        logger.debug("Drop: refusing to move group {} relative to its descendant {}", active.id, target_group_id)
        return items

    root_groups = [item for item in children_of(items, None) if isinstance(item, WorkspaceGroup)]
    remaining = [group.id for group in root_groups if group.id != active.id]
    try:
        target_index = remaining.index(target_group_id)
    except ValueError:
        target_index = len(remaining)
    remaining.insert(target_index, active.id)

    # Root tabs and file refs keep their orders; only root groups move.
    orders = {group_id: index for index, group_id in enumerate(remaining)}
    result: list[WorkspaceItem] = []
    for item in items:
        order = orders.get(item.id)
        if not isinstance(item, WorkspaceGroup) or item.parent_id is not None or order in (None, item.order):
            result.append(item)
        else:
            result.append(item.model_copy(update={"order": order}))
    return result


def _move_child(items: list[WorkspaceItem], active: WorkspaceItem, over: WorkspaceItem) -> list[WorkspaceItem]:
    target_parent_id = _target_parent_id(over)
    if target_parent_id is None:
        return items

    source_parent_id = active.parent_id
    # Always reparent, even onto a sibling: the move normalises to the target's group.
    moved = [item.model_copy(update={"parent_id": target_parent_id}) if item.id == active.id else item for item in items]

    target_ids = _reorder_sibling_ids(moved, target_parent_id, active.id, over)
    result = apply_orders(moved, target_parent_id, target_ids)

    if source_parent_id != target_parent_id:
        source_ids = [item.id for item in children_of(result, source_parent_id) if item.id != active.id]
        result = apply_orders(result, source_parent_id, source_ids)
        logger.debug("Drop: moved {} from {} to {}", active.id, source_parent_id, target_parent_id)
    return result


def _reorder_sibling_ids(
    items: list[WorkspaceItem],
    parent_id: str,
    active_id: str,
    over: WorkspaceItem,
) -> list[str]:
    """Sibling ids of *parent_id* with *active_id* spliced in at the drop position.

    The active item lands at the drop target's index when the target is a
    non-group sibling in that set, otherwise at the end.
    """
    sibling_ids = [item.id for item in children_of(items, parent_id) if item.id != active_id]

    insert_index = len(sibling_ids)
    if not isinstance(over, WorkspaceGroup) and over.parent_id == parent_id and over.id in sibling_ids:
        insert_index = sibling_ids.index(over.id)

    sibling_ids.insert(insert_index, active_id)
    return sibling_ids
