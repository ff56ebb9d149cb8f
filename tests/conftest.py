"""Shared test fixtures.

Everything here runs without external services: stores write under
``tmp_path`` and settings are re-read from a clean environment per test.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest
from loguru import logger

from pulse_shell.workspace.settings import _get_settings_cached


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Point settings at a per-test data root and drop the cached instance."""
    monkeypatch.setenv("PULSE_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.delenv("PULSE_DATA_PREFIX", raising=False)
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    """Restore loguru's default sink after tests that reconfigure logging."""
    yield
    logger.remove()
    logger.add(sys.stderr)
