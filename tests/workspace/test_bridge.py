"""Tests for host bridge helpers and runtime event parsing."""

from __future__ import annotations

import pytest

from pulse_shell.workspace.bridge import (
    HostBridge,
    NullHostBridge,
    RecordingHostBridge,
    parse_runtime_event,
    send_host_command,
)


class _ExplodingBridge:
    def send(self, *args) -> bool:
        raise ConnectionError("host went away")


def test_bridges_satisfy_protocol() -> None:
    assert isinstance(NullHostBridge(), HostBridge)
    assert isinstance(RecordingHostBridge(), HostBridge)


def test_send_without_bridge() -> None:
    assert send_host_command(None, "activate-tab", "t") is False


def test_null_bridge_drops_commands() -> None:
    assert send_host_command(NullHostBridge(), "activate-tab", "t") is False


def test_recording_bridge_keeps_commands() -> None:
    bridge = RecordingHostBridge()

    assert send_host_command(bridge, "navigate-tab", "t", "https://example.com") is True
    assert send_host_command(bridge, "set-content-visible", False) is True
    assert bridge.sent == [("navigate-tab", "t", "https://example.com"), ("set-content-visible", False)]


def test_rejecting_bridge_reports_false() -> None:
    bridge = RecordingHostBridge(accept=False)

    assert send_host_command(bridge, "close-tab", "t") is False
    assert bridge.sent == [("close-tab", "t")]


def test_bridge_errors_are_contained() -> None:
    assert send_host_command(_ExplodingBridge(), "close-tab", "t") is False


def test_parse_full_event() -> None:
    event = parse_runtime_event({"tabId": "t", "url": "https://example.com", "title": "Example"})

    assert event.tab_id == "t"
    assert event.url == "https://example.com"
    assert event.title == "Example"


def test_parse_drops_blank_and_non_string_fields() -> None:
    event = parse_runtime_event({"tabId": "t", "url": "   ", "title": 42})

    assert event.tab_id == "t"
    assert event.url is None
    assert event.title is None


@pytest.mark.parametrize("value", [None, [], "t", {"tabId": ""}, {"tabId": 7}, {"url": "https://example.com"}])
def test_parse_rejects_malformed_events(value: object) -> None:
    assert parse_runtime_event(value) is None
