"""Centralised application configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.

User-editable values (endpoint, action ids, trigger prefix, colours) are
layered on top by ``freeshow_triggers.preferences.PreferenceStore``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from freeshow_triggers.triggers.models import TriggerKind

logger = logging.getLogger(__name__)

# src/freeshow_triggers/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_ENDPOINT = "http://localhost:5505/"
DEFAULT_SHOW_ACTION = "name_select_show"
DEFAULT_SLIDE_ACTION = "name_select_slide"
DEFAULT_TRIGGER_PREFIX = ">>"


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class FreeshowConfig(BaseModel):
    """FreeShow HTTP API target and action identifiers.

    Empty strings are kept as given; the dispatcher applies the documented
    fallbacks at request time so a blank settings field still works.
    """

    endpoint: str = DEFAULT_ENDPOINT
    show_action: str = DEFAULT_SHOW_ACTION
    slide_action: str = DEFAULT_SLIDE_ACTION

    def action_for(self, kind: TriggerKind) -> str:
        """Return the configured action id for *kind*, falling back to defaults."""
        if kind is TriggerKind.SHOW:
            return self.show_action.strip() or DEFAULT_SHOW_ACTION
        return self.slide_action.strip() or DEFAULT_SLIDE_ACTION


class TriggerConfig(BaseModel):
    """Inline trigger syntax options."""

    prefix: str = DEFAULT_TRIGGER_PREFIX
    allow_empty_label: bool = True

    @property
    def effective_prefix(self) -> str:
        """Trimmed prefix, or the default when blank."""
        return self.prefix.strip() or DEFAULT_TRIGGER_PREFIX


class DisplayConfig(BaseModel):
    """Per-kind control colours. Empty means the theme default."""

    show_color: str = ""
    slide_color: str = ""

    @field_validator("show_color", "slide_color")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    def color_for(self, kind: TriggerKind) -> str:
        if kind is TriggerKind.SHOW:
            return self.show_color
        return self.slide_color


class AppConfig(BaseModel):
    """Application runtime configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    storage_secret: SecretStr = SecretStr("dev-secret-change-me")
    log_dir: Path = Path("logs")
    preferences_path: Path = Path("data/preferences.json")
    document_path: Path | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Application settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``FREESHOW__ENDPOINT``, ``TRIGGERS__PREFIX``, ``DISPLAY__SLIDE_COLOR``,
    ``APP__PORT``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    freeshow: FreeshowConfig = FreeshowConfig()
    triggers: TriggerConfig = TriggerConfig()
    display: DisplayConfig = DisplayConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
