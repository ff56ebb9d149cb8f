"""Workspace controller.

Owns the single in-process ``UiSessionState`` and routes every UI intent
through the pure tree operations.  After each change the new state replaces
the old one wholesale, the host process is told what to do with its native
tabs, and a debounced save is scheduled.

The controller never raises for ids that no longer exist: sidebar events can
arrive after the item they refer to is gone.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from pulse_shell.workspace.bridge import HostArg, HostBridge, parse_runtime_event, send_host_command
from pulse_shell.workspace.codec import pick_selected_item_id
from pulse_shell.workspace.commands import (
    COMMAND_MAP,
    GRANTED_CAPABILITIES,
    ShortcutMap,
    default_shortcut_map,
    resolve_command,
)
from pulse_shell.workspace.models.enums import CommandCapability, CommandId, HostCommand, MoveDirection
from pulse_shell.workspace.models.items import BrowserTab, WorkspaceItem
from pulse_shell.workspace.models.session import UiSessionState
from pulse_shell.workspace.persistence import SessionPersister
from pulse_shell.workspace.tree import (
    add_browser_tab,
    add_group,
    apply_runtime_update,
    children_of,
    find_item,
    move_item,
    move_item_by_drop,
    new_item_id,
    remove_item,
    toggle_group_collapsed,
    update_tab_url,
)
from pulse_shell.workspace.urls import SEARCH_ROOT, normalize_url

_BROWSER_CONTROLS = {
    CommandId.BROWSER_BACK: HostCommand.BROWSER_BACK,
    CommandId.BROWSER_FORWARD: HostCommand.BROWSER_FORWARD,
    CommandId.BROWSER_RELOAD: HostCommand.BROWSER_RELOAD,
    CommandId.BROWSER_STOP: HostCommand.BROWSER_STOP,
}


class WorkspaceController:
    def __init__(
        self,
        state: UiSessionState,
        *,
        bridge: HostBridge | None = None,
        persister: SessionPersister | None = None,
        id_factory: Callable[[], str] = new_item_id,
        granted: frozenset[CommandCapability] = GRANTED_CAPABILITIES,
        shortcuts: ShortcutMap | None = None,
    ) -> None:
        self._state = state
        self._bridge = bridge
        self._persister = persister
        self._id_factory = id_factory
        self._granted = granted
        self.shortcuts = dict(shortcuts) if shortcuts is not None else default_shortcut_map()
        self.dark_mode = True
        self.settings_open = False
        self.address_focus_requests = 0

    # -- Query -----------------------------------------------------------------

    @property
    def state(self) -> UiSessionState:
        return self._state

    @property
    def items(self) -> list[WorkspaceItem]:
        return self._state.items

    @property
    def selected_item(self) -> WorkspaceItem | None:
        return find_item(self._state.items, self._state.selected_item_id)

    @property
    def selected_tab(self) -> BrowserTab | None:
        item = self.selected_item
        return item if isinstance(item, BrowserTab) else None

    @property
    def default_parent_id(self) -> str | None:
        """Where new tabs go when no parent is given: the first root item."""
        roots = children_of(self._state.items, None)
        return roots[0].id if roots else None

    # -- Selection -------------------------------------------------------------

    def select(self, item_id: str) -> None:
        item = find_item(self._state.items, item_id)
        if item is None:
            return
        if isinstance(item, BrowserTab):
            self._commit(selected_item_id=item.id, address=item.url)
            self._send(HostCommand.ACTIVATE_TAB, item.id)
        else:
            self._commit(selected_item_id=item.id)
            self._send(HostCommand.SET_CONTENT_VISIBLE, False)

    def set_address(self, address: str) -> None:
        """Track the omnibox text as the user types."""
        self._commit(address=address)

    # -- Tree edits ------------------------------------------------------------

    def toggle_group(self, group_id: str) -> None:
        self._commit(items=toggle_group_collapsed(self._state.items, group_id))

    def add_group(self, title: str | None = None) -> str:
        items = add_group(self._state.items, title or "", id_factory=self._id_factory)
        self._commit(items=items)
        return items[-1].id

    def add_tab(self, parent_id: str | None = None, url: str = SEARCH_ROOT) -> str:
        """Open a new tab (under the first root item by default) and select it."""
        if parent_id is None:
            parent_id = self.default_parent_id
        target_url = normalize_url(url)
        result = add_browser_tab(self._state.items, parent_id, target_url, id_factory=self._id_factory)
        self._commit(items=result.items, selected_item_id=result.new_id, address=target_url)
        self._send(HostCommand.ENSURE_TAB, result.new_id, target_url)
        self._send(HostCommand.ACTIVATE_TAB, result.new_id)
        return result.new_id

    def close_tab(self, item_id: str) -> None:
        tab = find_item(self._state.items, item_id)
        if not isinstance(tab, BrowserTab):
            return

        items = remove_item(self._state.items, item_id)
        self._send(HostCommand.CLOSE_TAB, item_id)
        if self._state.selected_item_id != item_id:
            self._commit(items=items)
            return

        selection = _next_selection_after_close(items, tab)
        next_tab = find_item(items, selection)
        address = next_tab.url if isinstance(next_tab, BrowserTab) else ""
        self._commit(items=items, selected_item_id=selection, address=address)

    def remove(self, item_id: str) -> None:
        """Remove any item (cascading for groups) and repair the selection."""
        items = remove_item(self._state.items, item_id)
        if items is self._state.items:
            return

        for item in self._state.items:
            if isinstance(item, BrowserTab) and find_item(items, item.id) is None:
                self._send(HostCommand.CLOSE_TAB, item.id)

        if find_item(items, self._state.selected_item_id) is not None:
            self._commit(items=items)
            return
        selection = pick_selected_item_id(items, None)
        next_tab = find_item(items, selection)
        address = next_tab.url if isinstance(next_tab, BrowserTab) else ""
        self._commit(items=items, selected_item_id=selection, address=address)

    def move(self, item_id: str, direction: MoveDirection | str) -> None:
        self._commit(items=move_item(self._state.items, item_id, direction))

    def move_by_drop(self, active_id: str, over_id: str) -> None:
        self._commit(items=move_item_by_drop(self._state.items, active_id, over_id))

    # -- Navigation ------------------------------------------------------------

    def navigate(self, address: str | None = None) -> str:
        """Load the omnibox text in the selected tab, or in a new one.

        Returns the id of the tab that was navigated.
        """
        target_url = normalize_url(self._state.address if address is None else address)
        tab = self.selected_tab
        if tab is None:
            return self.add_tab(self.default_parent_id, target_url)

        self._commit(items=update_tab_url(self._state.items, tab.id, target_url), address=target_url)
        self._send(HostCommand.NAVIGATE_TAB, tab.id, target_url)
        return tab.id

    def handle_runtime_event(self, payload: object) -> None:
        """Fold a ``{tabId, url?, title?}`` notification from the host into the tree."""
        event = parse_runtime_event(payload)
        if event is None:
            logger.debug("Controller: ignoring malformed runtime event")
            return

        items = apply_runtime_update(self._state.items, event.tab_id, event)
        if event.url and self._state.selected_item_id == event.tab_id and self.selected_tab is not None:
            self._commit(items=items, address=event.url)
        else:
            self._commit(items=items)

    # -- Commands --------------------------------------------------------------

    def run_command(self, command_id: CommandId | str) -> bool:
        """Run a catalog command.  Returns ``False`` if unknown or not permitted."""
        try:
            command = COMMAND_MAP[CommandId(command_id)]
        except ValueError:
            logger.debug("Controller: unknown command {}", command_id)
            return False
        if command.capability not in self._granted:
            logger.debug("Controller: command {} needs {}", command.id, command.capability)
            return False

        match command.id:
            case CommandId.NEW_GROUP:
                self.add_group()
            case CommandId.NEW_TAB:
                self.add_tab()
            case CommandId.CLOSE_CURRENT_TAB:
                if self.selected_tab is not None:
                    self.close_tab(self.selected_tab.id)
            case CommandId.FOCUS_ADDRESS:
                self.address_focus_requests += 1
            case CommandId.TOGGLE_THEME:
                self.dark_mode = not self.dark_mode
            case CommandId.OPEN_SETTINGS:
                self.settings_open = True
            case _:
                tab = self.selected_tab
                if tab is not None:
                    self._send(_BROWSER_CONTROLS[command.id], tab.id)
        return True

    def handle_shortcut(self, shortcut: str) -> bool:
        """Run the command bound to *shortcut*.  Returns ``False`` if none ran."""
        command_id = resolve_command(shortcut, self.shortcuts)
        if command_id is None:
            logger.debug("Controller: no command bound to {!r}", shortcut)
            return False
        return self.run_command(command_id)

    # -- Internals -------------------------------------------------------------

    def _commit(self, **changes: object) -> None:
        changed = {key: value for key, value in changes.items() if getattr(self._state, key) != value}
        if not changed:
            return
        self._state = self._state.model_copy(update=changed)
        if self._persister is not None:
            self._persister.schedule(self._state)

    def _send(self, *args: HostArg) -> bool:
        return send_host_command(self._bridge, *args)


def _next_selection_after_close(items: list[WorkspaceItem], closed: BrowserTab) -> str:
    """First tab among the closed tab's siblings, else any tab, else its parent."""
    sibling_tab = next((item for item in children_of(items, closed.parent_id) if isinstance(item, BrowserTab)), None)
    if sibling_tab is not None:
        return sibling_tab.id

    any_tab = next((item for item in items if isinstance(item, BrowserTab)), None)
    if any_tab is not None:
        return any_tab.id

    if closed.parent_id is not None and find_item(items, closed.parent_id) is not None:
        return closed.parent_id

    return items[0].id if items else ""
