from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

import click

from pulse_shell.workspace.codec import default_session_state, serialize_session
from pulse_shell.workspace.controller import WorkspaceController
from pulse_shell.workspace.log import setup_logging
from pulse_shell.workspace.models.enums import CommandId, MoveDirection
from pulse_shell.workspace.models.items import BrowserTab, FileRef, WorkspaceGroup, WorkspaceItem
from pulse_shell.workspace.persistence import SessionPersister, load_initial_session_state
from pulse_shell.workspace.settings import PulseSettings, get_settings
from pulse_shell.workspace.store import HostStateStore, LocalKeyValueStore
from pulse_shell.workspace.tree import children_of, find_item

T = TypeVar("T")


class UnknownItemError(LookupError):
    """Raised when a command names an item id that does not exist."""


@dataclass
class CliContext:
    settings: PulseSettings
    data_root: str
    prefix: str | None

    def stores(self) -> tuple[HostStateStore | None, LocalKeyValueStore]:
        host = HostStateStore(self.data_root, self.prefix) if self.settings.host_store_enabled else None
        return host, LocalKeyValueStore(self.data_root, self.prefix)


@click.group()
@click.option("--data-root", default=None, help="Data directory (default: from PULSE_DATA_ROOT or ./data).")
@click.option("--prefix", default=None, help="Namespace prefix inside the data directory.")
@click.option("--log-level", default=None, help="Log level (default: from PULSE_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, data_root: str | None, prefix: str | None, log_level: str | None) -> None:
    """Pulse Shell - inspect and edit the persisted browser workspace."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    ctx.obj = CliContext(
        settings=settings,
        data_root=data_root or settings.data_root,
        prefix=prefix if prefix is not None else settings.data_prefix,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(ctx: CliContext, action: Callable[[WorkspaceController], T]) -> T:
    """Load the session, apply *action* through a controller, save right away."""

    async def _go() -> T:
        host, local = ctx.stores()
        key = ctx.settings.session_key
        state = await load_initial_session_state(host, local, key)
        persister = SessionPersister(host, local, key, debounce=ctx.settings.save_debounce_seconds)
        controller = WorkspaceController(state, persister=persister)
        try:
            return action(controller)
        finally:
            await persister.aclose()

    try:
        return asyncio.run(_go())
    except UnknownItemError as exc:
        msg = f"No workspace item with id {exc.args[0]!r}"
        raise click.ClickException(msg) from None


def _require(controller: WorkspaceController, item_id: str) -> WorkspaceItem:
    item = find_item(controller.items, item_id)
    if item is None:
        raise UnknownItemError(item_id)
    return item


def _render_tree(
    items: list[WorkspaceItem], selected_item_id: str, parent_id: str | None = None, depth: int = 0
) -> Iterator[str]:
    for item in children_of(items, parent_id):
        marker = "*" if item.id == selected_item_id else " "
        indent = "    " * depth
        match item:
            case WorkspaceGroup():
                sign = "+" if item.collapsed else "-"
                yield f"{marker} {indent}[{sign}] {item.title}  ({item.id})"
                yield from _render_tree(items, selected_item_id, item.id, depth + 1)
            case BrowserTab():
                yield f"{marker} {indent}{item.title} <{item.url}>  ({item.id})"
            case FileRef():
                yield f"{marker} {indent}{item.title} [{item.file_path}]  ({item.id})"


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


@main.command()
@click.pass_obj
def show(ctx: CliContext) -> None:
    """Print the workspace tree; '*' marks the selected item."""
    state = _run(ctx, lambda controller: controller.state)
    for line in _render_tree(state.items, state.selected_item_id):
        click.echo(line)
    click.echo(f"address: {state.address}")


@main.command()
@click.pass_obj
def export(ctx: CliContext) -> None:
    """Print the serialized session envelope."""
    state = _run(ctx, lambda controller: controller.state)
    click.echo(serialize_session(state))


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


@main.command("add-group")
@click.argument("title", required=False)
@click.pass_obj
def add_group(ctx: CliContext, title: str | None) -> None:
    """Append a new root group."""
    click.echo(_run(ctx, lambda controller: controller.add_group(title)))


@main.command("add-tab")
@click.argument("url")
@click.option("--parent", "parent_id", default=None, help="Group to add the tab to (default: first root group).")
@click.pass_obj
def add_tab(ctx: CliContext, url: str, parent_id: str | None) -> None:
    """Open a new browser tab and select it."""

    def action(controller: WorkspaceController) -> str:
        if parent_id is not None and not isinstance(_require(controller, parent_id), WorkspaceGroup):
            msg = f"{parent_id!r} is not a group"
            raise click.BadParameter(msg, param_hint="--parent")
        return controller.add_tab(parent_id, url)

    click.echo(_run(ctx, action))


@main.command()
@click.argument("item_id")
@click.pass_obj
def remove(ctx: CliContext, item_id: str) -> None:
    """Remove an item; groups take their contents with them."""

    def action(controller: WorkspaceController) -> None:
        _require(controller, item_id)
        controller.remove(item_id)

    _run(ctx, action)


@main.command()
@click.argument("group_id")
@click.pass_obj
def toggle(ctx: CliContext, group_id: str) -> None:
    """Collapse or expand a group."""

    def action(controller: WorkspaceController) -> None:
        _require(controller, group_id)
        controller.toggle_group(group_id)

    _run(ctx, action)


@main.command()
@click.argument("active_id")
@click.argument("over_id")
@click.pass_obj
def move(ctx: CliContext, active_id: str, over_id: str) -> None:
    """Drop ACTIVE_ID onto OVER_ID, as a sidebar drag would."""

    def action(controller: WorkspaceController) -> None:
        _require(controller, active_id)
        _require(controller, over_id)
        controller.move_by_drop(active_id, over_id)

    _run(ctx, action)


@main.command()
@click.argument("item_id")
@click.argument("direction", type=click.Choice([d.value for d in MoveDirection]))
@click.pass_obj
def nudge(ctx: CliContext, item_id: str, direction: str) -> None:
    """Swap an item with its previous or next sibling."""

    def action(controller: WorkspaceController) -> None:
        _require(controller, item_id)
        controller.move(item_id, direction)

    _run(ctx, action)


@main.command()
@click.argument("item_id")
@click.pass_obj
def select(ctx: CliContext, item_id: str) -> None:
    """Select an item (tabs also set the address)."""

    def action(controller: WorkspaceController) -> None:
        _require(controller, item_id)
        controller.select(item_id)

    _run(ctx, action)


@main.command()
@click.argument("address")
@click.pass_obj
def navigate(ctx: CliContext, address: str) -> None:
    """Load ADDRESS in the selected tab, or in a new tab if none is selected."""
    click.echo(_run(ctx, lambda controller: controller.navigate(address)))


@main.command("run-command")
@click.argument("command_id", required=False, type=click.Choice([c.value for c in CommandId]))
@click.option("--shortcut", default=None, help="Run the command bound to a shortcut, e.g. 'Ctrl+Shift+G'.")
@click.pass_obj
def run_command(ctx: CliContext, command_id: str | None, shortcut: str | None) -> None:
    """Run a catalog command by id or by keyboard shortcut."""
    if (command_id is None) == (shortcut is None):
        msg = "Give either COMMAND_ID or --shortcut."
        raise click.UsageError(msg)

    def action(controller: WorkspaceController) -> bool:
        if shortcut is not None:
            return controller.handle_shortcut(shortcut)
        return controller.run_command(command_id)

    if not _run(ctx, action):
        msg = f"No command ran for {shortcut or command_id!r}"
        raise click.ClickException(msg)


@main.command()
@click.confirmation_option(prompt="Replace the stored workspace with the built-in one?")
@click.pass_obj
def reset(ctx: CliContext) -> None:
    """Replace the stored session with the seed workspace."""

    async def _go() -> None:
        host, local = ctx.stores()
        persister = SessionPersister(host, local, ctx.settings.session_key)
        await persister.write(serialize_session(default_session_state()))

    asyncio.run(_go())
    click.echo("Workspace reset.")


if __name__ == "__main__":
    main()
