"""Session codec.

Serialises the workspace tree plus selection and address into a versioned
JSON envelope, and restores it leniently.  Restoring never raises: input
that is merely damaged is repaired (bad items dropped, stale selection and
blank address replaced), and input with nothing usable left yields ``None``
so the caller can start from ``default_session_state()``.

Envelope versions:

- ``0`` (legacy): no ``version`` key; ``selectedItemId`` / ``address`` may be
  missing.
- ``1`` (current): ``{version: 1, items, selectedItemId, address}``.

Any other version is rejected outright rather than guessed at.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from loguru import logger
from pydantic import ValidationError

from pulse_shell.workspace.models.items import ITEM_ADAPTER, BrowserTab, WorkspaceItem, seed_workspace
from pulse_shell.workspace.models.session import (
    CURRENT_SESSION_VERSION,
    LEGACY_SESSION_VERSION,
    SessionEnvelope,
    UiSessionState,
)

DEFAULT_ADDRESS = "https://www.microsoft.com/edge"

SUPPORTED_VERSIONS = frozenset({LEGACY_SESSION_VERSION, CURRENT_SESSION_VERSION})


def default_session_state() -> UiSessionState:
    """Fresh session built from the seed workspace."""
    items = seed_workspace()
    selected_item_id = pick_selected_item_id(items, None)
    return UiSessionState(
        items=items,
        selected_item_id=selected_item_id,
        address=pick_address(items, selected_item_id, None),
    )


def serialize_session(state: UiSessionState) -> str:
    envelope = SessionEnvelope(
        version=CURRENT_SESSION_VERSION,
        items=state.items,
        selected_item_id=state.selected_item_id,
        address=state.address,
    )
    return envelope.model_dump_json(by_alias=True)


def deserialize_session(raw: str | bytes) -> UiSessionState | None:
    """Restore a session, or ``None`` when nothing usable can be recovered."""
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logger.debug("Session codec: payload is not valid JSON")
        return None
    return sanitize_session(payload)


def sanitize_session(payload: Any) -> UiSessionState | None:
    """Validate and repair an already-decoded envelope."""
    if not isinstance(payload, dict):
        return None

    version = _read_version(payload.get("version"))
    if version not in SUPPORTED_VERSIONS:
        logger.warning("Session codec: unsupported session version {}", version)
        return None

    items = parse_items(payload.get("items"))
    if not items:
        return None

    selected_item_id = pick_selected_item_id(items, payload.get("selectedItemId"))
    address = pick_address(items, selected_item_id, payload.get("address"))
    return UiSessionState(items=items, selected_item_id=selected_item_id, address=address)


def parse_items(value: Any) -> list[WorkspaceItem]:
    """Validate each element on its own; drop invalid ones and repeated ids."""
    if not isinstance(value, list):
        return []

    parsed: list[WorkspaceItem] = []
    seen_ids: set[str] = set()
    dropped = 0
    for candidate in value:
        try:
            item = ITEM_ADAPTER.validate_python(_trim_kind(candidate))
        except ValidationError:
            dropped += 1
            continue
        if item.id in seen_ids:
            dropped += 1
            continue
        seen_ids.add(item.id)
        parsed.append(item)

    if dropped:
        logger.debug("Session codec: dropped {} invalid or duplicate item(s)", dropped)
    return parsed


def pick_selected_item_id(items: Sequence[WorkspaceItem], candidate: object) -> str:
    """Keep *candidate* if it names an item; else the first tab; else the first item."""
    if isinstance(candidate, str) and any(item.id == candidate for item in items):
        return candidate

    first_tab = _first_tab(items)
    if first_tab is not None:
        return first_tab.id
    return items[0].id if items else ""


def pick_address(items: Sequence[WorkspaceItem], selected_item_id: str, candidate: object) -> str:
    """Keep a non-blank *candidate*; else the selected tab's URL; else the first tab's."""
    if isinstance(candidate, str) and candidate.strip():
        return candidate

    selected = next(
        (item for item in items if item.id == selected_item_id and isinstance(item, BrowserTab)),
        None,
    )
    if selected is not None:
        return selected.url

    first_tab = _first_tab(items)
    if first_tab is not None:
        return first_tab.url
    return DEFAULT_ADDRESS


def _read_version(value: object) -> int | float:
    # A missing or non-numeric version is the legacy, envelope-less shape.
    if isinstance(value, bool) or not isinstance(value, int | float):
        return LEGACY_SESSION_VERSION
    return value


def _first_tab(items: Sequence[WorkspaceItem]) -> BrowserTab | None:
    return next((item for item in items if isinstance(item, BrowserTab)), None)


def _trim_kind(candidate: Any) -> Any:
    # The tag is matched after trimming, like the other string fields.
    if isinstance(candidate, dict) and isinstance(candidate.get("kind"), str):
        return {**candidate, "kind": candidate["kind"].strip()}
    return candidate
