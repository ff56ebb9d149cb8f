"""Hierarchy queries over the flat item list.

Children are never stored on an item; they are recomputed from ``parent_id``
on every query so there is no second structure to keep in sync.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pulse_shell.workspace.models.items import WorkspaceItem


def find_item(items: Iterable[WorkspaceItem], item_id: str) -> WorkspaceItem | None:
    return next((item for item in items if item.id == item_id), None)


def children_of(items: Iterable[WorkspaceItem], parent_id: str | None) -> list[WorkspaceItem]:
    """Direct children of *parent_id* (``None`` for root), sorted by ``order``.

    ``sorted`` is stable, so ties keep their position in *items*.
    """
    return sorted((item for item in items if item.parent_id == parent_id), key=lambda item: item.order)


def next_order(items: Iterable[WorkspaceItem], parent_id: str | None) -> int:
    """Order value for a new last child of *parent_id*."""
    orders = [item.order for item in items if item.parent_id == parent_id]
    if not orders:
        return 0
    return max(orders) + 1


def is_descendant(items: Sequence[WorkspaceItem], item_id: str, ancestor_id: str) -> bool:
    """True if *ancestor_id* appears on the parent chain of *item_id*."""
    parents = {item.id: item.parent_id for item in items}
    seen: set[str] = set()
    current = parents.get(item_id)
    while current is not None and current not in seen:
        if current == ancestor_id:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def apply_orders(items: Iterable[WorkspaceItem], parent_id: str | None, ids: Sequence[str]) -> list[WorkspaceItem]:
    """Assign ``order = index`` to the children of *parent_id* listed in *ids*.

    Items outside that sibling set, or already at their target order, are
    returned as the same objects.
    """
    orders = {item_id: index for index, item_id in enumerate(ids)}
    result: list[WorkspaceItem] = []
    for item in items:
        order = orders.get(item.id)
        if item.parent_id != parent_id or order is None or order == item.order:
            result.append(item)
        else:
            result.append(item.model_copy(update={"order": order}))
    return result


def reindex_all_parents(items: Sequence[WorkspaceItem]) -> list[WorkspaceItem]:
    """Normalise every sibling set to contiguous ``0..n-1`` orders."""
    parent_ids = list(dict.fromkeys(item.parent_id for item in items))
    result = list(items)
    for parent_id in parent_ids:
        siblings = children_of(result, parent_id)
        result = apply_orders(result, parent_id, [item.id for item in siblings])
    return result
