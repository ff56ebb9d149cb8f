"""Fixtures for the workspace core tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from pulse_shell.workspace.models.items import (
    BrowserTab,
    FileRef,
    WorkspaceGroup,
    WorkspaceItem,
    seed_workspace,
)


@pytest.fixture
def items() -> list[WorkspaceItem]:
    """The seed workspace: Research (edge, cef) and Project (readme, shadcn)."""
    return seed_workspace()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"


@pytest.fixture
def nested_items() -> list[WorkspaceItem]:
    """A root group containing a nested group, for cascade and cycle checks."""
    return [
        WorkspaceGroup(id="outer", order=0, title="Outer"),
        WorkspaceGroup(id="inner", parent_id="outer", order=0, title="Inner"),
        BrowserTab(id="deep-tab", parent_id="inner", order=0, title="Deep", url="https://deep.example"),
        FileRef(id="outer-file", parent_id="outer", order=1, title="notes.md", file_path="notes.md"),
        WorkspaceGroup(id="other", order=1, title="Other"),
        BrowserTab(id="other-tab", parent_id="other", order=0, title="Other", url="https://other.example"),
    ]


def check_invariants(items: list[WorkspaceItem]) -> None:
    ids = [item.id for item in items]
    assert len(ids) == len(set(ids)), "duplicate ids"

    group_ids = {item.id for item in items if isinstance(item, WorkspaceGroup)}
    for item in items:
        assert item.parent_id is None or item.parent_id in group_ids, f"dangling parent on {item.id}"

    for parent_id in {item.parent_id for item in items}:
        orders = sorted(item.order for item in items if item.parent_id == parent_id)
        assert orders == list(range(len(orders))), f"non-contiguous orders under {parent_id}: {orders}"


@pytest.fixture
def assert_invariants() -> Callable[[list[WorkspaceItem]], None]:
    """Unique ids, no dangling parents, contiguous sibling orders."""
    return check_invariants


def orders_by_id(items: list[WorkspaceItem]) -> dict[str, tuple[str | None, int]]:
    return {item.id: (item.parent_id, item.order) for item in items}


@pytest.fixture
def placement() -> Callable[[list[WorkspaceItem]], dict[str, tuple[str | None, int]]]:
    """Map of id -> (parent_id, order) for compact assertions."""
    return orders_by_id
