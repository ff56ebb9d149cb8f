"""Shell configuration loaded from PULSE_* environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class PulseSettings(BaseSettings):
    """Pulse Shell settings.

    All fields are read from environment variables with the ``PULSE_`` prefix.
    For example, ``PULSE_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PULSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Data storage ----------------------------------------------------------
    data_root: str = "./data"
    """Root directory for the host state files and the local fallback store."""

    data_prefix: str | None = None
    """Optional namespace prefix inserted into all data paths.

    When set, all paths become ``{data_root}/{data_prefix}/...``.
    """

    session_key: str = "pulse.ui.session.v1"
    """Key the workspace session is stored under in both stores."""

    host_store_enabled: bool = True
    """Write to the host-owned state files before the local fallback."""

    # -- Persistence -----------------------------------------------------------
    save_debounce_ms: int = 250
    """Quiet period after the last mutation before the session is written."""

    @property
    def save_debounce_seconds(self) -> float:
        return self.save_debounce_ms / 1000


def get_settings() -> PulseSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to
    force a re-read after overriding env vars.
    """
    return _get_settings_cached()


@lru_cache(maxsize=1)
def _get_settings_cached() -> PulseSettings:
    return PulseSettings()
