"""Command catalog.

Every user-triggerable action has a definition with the capability it needs.
The controller refuses a command whose capability has not been granted.
Shortcuts are stored as strings such as ``"Ctrl+Shift+G"``; only string
normalisation lives here, not keyboard-event handling.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from pulse_shell.workspace.models.enums import CommandCapability, CommandCategory, CommandId


class CommandDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: CommandId
    label: str
    description: str
    category: CommandCategory
    capability: CommandCapability
    default_shortcuts: tuple[str, ...] = Field(default_factory=tuple)


COMMAND_DEFINITIONS: tuple[CommandDefinition, ...] = (
    CommandDefinition(
        id=CommandId.NEW_GROUP,
        label="New Group",
        description="Create a new root group in the sidebar tree.",
        category=CommandCategory.WORKSPACE,
        capability=CommandCapability.WORKSPACE_MUTATE,
        default_shortcuts=("Ctrl+Shift+G",),
    ),
    CommandDefinition(
        id=CommandId.NEW_TAB,
        label="New Tab",
        description="Create a browser tab in the active group context.",
        category=CommandCategory.WORKSPACE,
        capability=CommandCapability.WORKSPACE_MUTATE,
        default_shortcuts=("Ctrl+T",),
    ),
    CommandDefinition(
        id=CommandId.CLOSE_CURRENT_TAB,
        label="Close Current Tab",
        description="Close the currently selected browser tab.",
        category=CommandCategory.WORKSPACE,
        capability=CommandCapability.WORKSPACE_MUTATE,
        default_shortcuts=("Ctrl+W",),
    ),
    CommandDefinition(
        id=CommandId.FOCUS_ADDRESS,
        label="Focus Address Bar",
        description="Move focus to the omnibox and select its text.",
        category=CommandCategory.WORKSPACE,
        capability=CommandCapability.WORKSPACE_NAVIGATE,
        default_shortcuts=("Ctrl+L",),
    ),
    CommandDefinition(
        id=CommandId.BROWSER_BACK,
        label="Back",
        description="Navigate the current tab one page back.",
        category=CommandCategory.BROWSER,
        capability=CommandCapability.BROWSER_NAVIGATE,
        default_shortcuts=("Alt+Left",),
    ),
    CommandDefinition(
        id=CommandId.BROWSER_FORWARD,
        label="Forward",
        description="Navigate the current tab one page forward.",
        category=CommandCategory.BROWSER,
        capability=CommandCapability.BROWSER_NAVIGATE,
        default_shortcuts=("Alt+Right",),
    ),
    CommandDefinition(
        id=CommandId.BROWSER_RELOAD,
        label="Reload",
        description="Reload the current tab.",
        category=CommandCategory.BROWSER,
        capability=CommandCapability.BROWSER_NAVIGATE,
        default_shortcuts=("Ctrl+R", "F5"),
    ),
    CommandDefinition(
        id=CommandId.BROWSER_STOP,
        label="Stop Loading",
        description="Stop loading the current tab.",
        category=CommandCategory.BROWSER,
        capability=CommandCapability.BROWSER_NAVIGATE,
        default_shortcuts=("Escape",),
    ),
    CommandDefinition(
        id=CommandId.TOGGLE_THEME,
        label="Toggle Theme",
        description="Switch between dark and light appearance.",
        category=CommandCategory.INTERFACE,
        capability=CommandCapability.UI_SETTINGS,
        default_shortcuts=("Ctrl+Shift+L",),
    ),
    CommandDefinition(
        id=CommandId.OPEN_SETTINGS,
        label="Open Settings",
        description="Open the Pulse settings dialog.",
        category=CommandCategory.INTERFACE,
        capability=CommandCapability.UI_SETTINGS,
        default_shortcuts=("Ctrl+Comma",),
    ),
)

COMMAND_MAP: dict[CommandId, CommandDefinition] = {definition.id: definition for definition in COMMAND_DEFINITIONS}

GRANTED_CAPABILITIES: frozenset[CommandCapability] = frozenset(CommandCapability)

ShortcutMap = Mapping[CommandId, list[str]]

_MODIFIER_ALIASES = {
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "meta": "Meta",
    "cmd": "Meta",
    "command": "Meta",
    "alt": "Alt",
    "option": "Alt",
    "shift": "Shift",
}
_MODIFIER_ORDER = ("Ctrl", "Meta", "Alt", "Shift")
_KEY_ALIASES = {
    "arrowleft": "Left",
    "arrowright": "Right",
    "arrowup": "Up",
    "arrowdown": "Down",
    "esc": "Escape",
    "space": "Space",
    ",": "Comma",
}


def default_shortcut_map() -> dict[CommandId, list[str]]:
    return {definition.id: list(definition.default_shortcuts) for definition in COMMAND_DEFINITIONS}


def normalize_shortcut(shortcut: str) -> str:
    """Canonical form of a shortcut string: ``Ctrl+Meta+Alt+Shift+Key``.

    Returns ``""`` when the string names no non-modifier key.
    """
    modifiers: set[str] = set()
    key: str | None = None
    for part in (raw.strip() for raw in shortcut.split("+")):
        if not part:
            continue
        modifier = _MODIFIER_ALIASES.get(part.lower())
        if modifier is not None:
            modifiers.add(modifier)
        else:
            key = _normalize_key(part)

    if not key:
        return ""
    return "+".join([*(m for m in _MODIFIER_ORDER if m in modifiers), key])


def resolve_command(shortcut: str, shortcut_map: ShortcutMap | None = None) -> CommandId | None:
    """Find the command bound to *shortcut*, falling back to default bindings."""
    wanted = normalize_shortcut(shortcut)
    if not wanted:
        return None

    shortcut_map = shortcut_map or {}
    for definition in COMMAND_DEFINITIONS:
        bindings = shortcut_map.get(definition.id, definition.default_shortcuts)
        if any(normalize_shortcut(binding) == wanted for binding in bindings):
            return definition.id
    return None


def _normalize_key(raw: str) -> str | None:
    key = raw.strip()
    if not key:
        return None
    alias = _KEY_ALIASES.get(key.lower())
    if alias is not None:
        return alias
    if len(key) == 1 or (key[0] in "fF" and key[1:].isdigit() and len(key) <= 3):
        return key.upper()
    return key[0].upper() + key[1:]
