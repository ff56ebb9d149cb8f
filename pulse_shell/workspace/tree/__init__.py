"""Pure tree operations over the flat workspace item list.

Each function accepts the current list and returns a new list -- never an
in-place edit -- so the caller can diff-render and debounce persistence.
Structurally impossible requests are no-ops, never exceptions.
"""

from pulse_shell.workspace.tree.drop import move_item_by_drop
from pulse_shell.workspace.tree.operations import (
    DEFAULT_GROUP_TITLE,
    AddResult,
    add_browser_tab,
    add_group,
    apply_runtime_update,
    move_item,
    new_item_id,
    remove_item,
    toggle_group_collapsed,
    update_tab_url,
)
from pulse_shell.workspace.tree.query import (
    children_of,
    find_item,
    is_descendant,
    next_order,
    reindex_all_parents,
)

__all__ = [
    "DEFAULT_GROUP_TITLE",
    "AddResult",
    "add_browser_tab",
    "add_group",
    "apply_runtime_update",
    "children_of",
    "find_item",
    "is_descendant",
    "move_item",
    "move_item_by_drop",
    "new_item_id",
    "next_order",
    "reindex_all_parents",
    "remove_item",
    "toggle_group_collapsed",
    "update_tab_url",
]
