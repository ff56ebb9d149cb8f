"""Shared enumerations used across the workspace core."""

from __future__ import annotations

from enum import StrEnum

# -- Items -------------------------------------------------------------------


class ItemKind(StrEnum):
    """Wire tag of a workspace item."""

    GROUP = "group"
    BROWSER_TAB = "browser-tab"
    FILE_REF = "file-ref"


class MoveDirection(StrEnum):
    UP = "up"
    DOWN = "down"


# -- Commands ----------------------------------------------------------------


class CommandId(StrEnum):
    NEW_GROUP = "workspace.new-group"
    NEW_TAB = "workspace.new-tab"
    CLOSE_CURRENT_TAB = "workspace.close-current-tab"
    FOCUS_ADDRESS = "workspace.focus-address"
    BROWSER_BACK = "browser.back"
    BROWSER_FORWARD = "browser.forward"
    BROWSER_RELOAD = "browser.reload"
    BROWSER_STOP = "browser.stop"
    TOGGLE_THEME = "ui.toggle-theme"
    OPEN_SETTINGS = "ui.open-settings"


class CommandCapability(StrEnum):
    """Permission a command needs before the controller will run it."""

    WORKSPACE_MUTATE = "workspace.mutate"
    WORKSPACE_NAVIGATE = "workspace.navigate"
    BROWSER_NAVIGATE = "browser.navigate"
    UI_SETTINGS = "ui.settings"


class CommandCategory(StrEnum):
    WORKSPACE = "Workspace"
    BROWSER = "Browser"
    INTERFACE = "Interface"


# -- Host bridge -------------------------------------------------------------


class HostCommand(StrEnum):
    """Commands sent to the native host process."""

    ENSURE_TAB = "ensure-tab"
    ACTIVATE_TAB = "activate-tab"
    CLOSE_TAB = "close-tab"
    NAVIGATE_TAB = "navigate-tab"
    BROWSER_BACK = "browser-back"
    BROWSER_FORWARD = "browser-forward"
    BROWSER_RELOAD = "browser-reload"
    BROWSER_STOP = "browser-stop"
    SET_CONTENT_VISIBLE = "set-content-visible"
