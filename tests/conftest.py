"""Shared pytest fixtures for FreeShow Triggers tests."""

from __future__ import annotations

import os

import pytest

from freeshow_triggers.config import Settings, get_settings
from freeshow_triggers.preferences import get_preference_store

_ENV_PREFIXES = ("FREESHOW__", "TRIGGERS__", "DISPLAY__", "APP__")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Strip configuration env vars and reset cached singletons per test."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    get_preference_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_preference_store.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any developer .env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]
