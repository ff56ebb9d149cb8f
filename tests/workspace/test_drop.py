"""Unit tests for the drag-and-drop reconciler."""

from __future__ import annotations

from pulse_shell.workspace.models.items import BrowserTab, WorkspaceGroup
from pulse_shell.workspace.tree import add_browser_tab, children_of, move_item_by_drop, remove_item

# ---------------------------------------------------------------------------
# No-ops
# ---------------------------------------------------------------------------


def test_drop_onto_self_is_noop(items) -> None:
    assert move_item_by_drop(items, "tab-edge", "tab-edge") is items


def test_drop_with_unknown_ids_is_noop(items) -> None:
    assert move_item_by_drop(items, "missing", "tab-edge") is items
    assert move_item_by_drop(items, "tab-edge", "missing") is items


def test_drop_onto_root_tab_is_noop(items, id_factory) -> None:
    # A root tab has no group to resolve to.
    root = add_browser_tab(items, None, "example.com", id_factory=id_factory)
    assert move_item_by_drop(root.items, "tab-edge", root.new_id) is root.items


# ---------------------------------------------------------------------------
# Tabs and file refs
# ---------------------------------------------------------------------------


def test_reorder_within_same_group(items, placement, assert_invariants) -> None:
    result = move_item_by_drop(items, "tab-cef", "tab-edge")

    assert placement(result)["tab-cef"] == ("group-research", 0)
    assert placement(result)["tab-edge"] == ("group-research", 1)
    assert_invariants(result)


def test_drop_onto_own_group_moves_to_end(items, placement) -> None:
    result = move_item_by_drop(items, "tab-edge", "group-research")

    assert placement(result)["tab-cef"] == ("group-research", 0)
    assert placement(result)["tab-edge"] == ("group-research", 1)


def test_drop_onto_other_group_appends(items, placement, assert_invariants) -> None:
    result = move_item_by_drop(items, "tab-edge", "group-project")

    assert placement(result)["tab-edge"] == ("group-project", 2)
    assert placement(result)["tab-cef"] == ("group-research", 0)
    assert_invariants(result)


def test_drop_onto_tab_in_other_group_inserts_before_it(items, placement, assert_invariants) -> None:
    result = move_item_by_drop(items, "tab-edge", "tab-shadcn")

    assert [item.id for item in children_of(result, "group-project")] == ["file-readme", "tab-edge", "tab-shadcn"]
    assert placement(result)["tab-cef"] == ("group-research", 0)
    assert_invariants(result)


def test_file_ref_moves_like_a_tab(items, assert_invariants) -> None:
    result = move_item_by_drop(items, "file-readme", "tab-edge")

    assert [item.id for item in children_of(result, "group-research")] == ["file-readme", "tab-edge", "tab-cef"]
    assert [item.id for item in children_of(result, "group-project")] == ["tab-shadcn"]
    assert_invariants(result)


def test_drop_always_reparents_to_target_group(items, id_factory, placement) -> None:
    # A root tab dropped onto a grouped tab joins that group.
    root = add_browser_tab(items, None, "example.com", id_factory=id_factory)
    result = move_item_by_drop(root.items, root.new_id, "tab-cef")

    assert placement(result)[root.new_id] == ("group-research", 1)
    assert placement(result)["tab-cef"] == ("group-research", 2)
    assert [item.id for item in children_of(result, None)] == ["group-research", "group-project"]


def test_drop_leaves_other_groups_untouched(nested_items) -> None:
    result = move_item_by_drop(nested_items, "deep-tab", "outer-file")

    other = [item for item in result if item.id in {"other", "other-tab"}]
    assert all(any(item is original for original in nested_items) for item in other)


def test_drop_does_not_mutate_input(items) -> None:
    before = list(items)
    move_item_by_drop(items, "tab-edge", "tab-shadcn")
    assert items == before


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


def test_group_drop_onto_group_swaps_position(items, placement, assert_invariants) -> None:
    result = move_item_by_drop(items, "group-project", "group-research")

    assert placement(result)["group-project"] == (None, 0)
    assert placement(result)["group-research"] == (None, 1)
    assert placement(result)["tab-edge"] == ("group-research", 0)
    assert_invariants(result)


def test_group_drop_onto_tab_targets_its_group(items, placement) -> None:
    result = move_item_by_drop(items, "group-project", "tab-cef")

    assert placement(result)["group-project"] == (None, 0)
    assert placement(result)["group-research"] == (None, 1)


def test_group_drop_onto_own_child_is_noop(items) -> None:
    assert move_item_by_drop(items, "group-research", "tab-edge") is items


def test_group_drop_reorders_three_groups(items, id_factory, assert_invariants) -> None:
    from pulse_shell.workspace.tree import add_group

    with_third = add_group(items, "Third", id_factory=id_factory)
    result = move_item_by_drop(with_third, "new-1", "group-research")

    assert [item.id for item in children_of(result, None)] == ["new-1", "group-research", "group-project"]
    assert_invariants(result)


def test_group_drop_onto_its_descendant_is_noop(nested_items) -> None:
    # "inner" lives inside "outer"; dropping outer onto deep-tab resolves to inner.
    assert move_item_by_drop(nested_items, "outer", "deep-tab") is nested_items


def test_group_drop_keeps_root_tabs(items, id_factory) -> None:
    root = add_browser_tab(items, None, "example.com", id_factory=id_factory)
    result = move_item_by_drop(root.items, "group-project", "group-research")

    tab = next(item for item in result if item.id == root.new_id)
    assert isinstance(tab, BrowserTab)
    assert tab.order == 2


# ---------------------------------------------------------------------------
# Invariants over a sequence of edits
# ---------------------------------------------------------------------------


def test_invariants_hold_across_mixed_edits(items, id_factory, assert_invariants) -> None:
    state = items
    for active_id, over_id in [
        ("tab-shadcn", "tab-edge"),
        ("file-readme", "group-research"),
        ("group-project", "group-research"),
        ("tab-cef", "group-project"),
        ("tab-edge", "tab-cef"),
    ]:
        state = move_item_by_drop(state, active_id, over_id)
        assert_invariants(state)

    state = remove_item(state, "group-research")
    assert_invariants(state)
    assert all(isinstance(item, WorkspaceGroup) or item.parent_id == "group-project" for item in state)
