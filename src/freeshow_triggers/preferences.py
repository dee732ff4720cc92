"""Persisted user preferences layered over environment settings.

The settings page edits a flat key-value record (endpoint, action ids,
trigger prefix, colours).  ``PreferenceStore`` keeps that record in a JSON
file, merges it over the environment ``Settings`` on load, and writes the
whole record through to disk on every change.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from freeshow_triggers.config import get_settings

if TYPE_CHECKING:
    from pathlib import Path

    from freeshow_triggers.config import Settings

logger = logging.getLogger(__name__)

# Flat preference key -> (Settings section, field)
PREFERENCE_KEYS: dict[str, tuple[str, str]] = {
    "endpoint": ("freeshow", "endpoint"),
    "show_action": ("freeshow", "show_action"),
    "slide_action": ("freeshow", "slide_action"),
    "trigger_prefix": ("triggers", "prefix"),
    "show_color": ("display", "show_color"),
    "slide_color": ("display", "slide_color"),
}


def _merge(base: Settings, overrides: dict[str, str]) -> Settings:
    """Return a copy of *base* with flat *overrides* applied and validated."""
    sections: dict[str, dict[str, Any]] = {}
    for key, value in overrides.items():
        section, field = PREFERENCE_KEYS[key]
        sections.setdefault(section, {})[field] = value

    update: dict[str, Any] = {}
    for section, fields in sections.items():
        current = getattr(base, section)
        update[section] = type(current).model_validate(
            {**current.model_dump(), **fields}
        )
    return base.model_copy(update=update)


class PreferenceStore:
    """JSON-backed preference record with write-through updates."""

    def __init__(self, path: Path, base: Settings) -> None:
        self._path = path
        self._base = base
        self._values: dict[str, str] = {}
        self._settings = base

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> Settings:
        """Current merged settings (call ``load()`` first)."""
        return self._settings

    def values(self) -> dict[str, str]:
        """Effective flat record: stored overrides over environment values."""
        merged: dict[str, str] = {}
        for key, (section, field) in PREFERENCE_KEYS.items():
            merged[key] = str(getattr(getattr(self._settings, section), field))
        return merged

    def _read(self) -> dict[str, str]:
        if not self._path.is_file():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning(
                "Ignoring unreadable preferences file", extra={"path": str(self._path)}
            )
            return {}
        if not isinstance(raw, dict):
            logger.warning(
                "Ignoring malformed preferences file", extra={"path": str(self._path)}
            )
            return {}
        return {
            key: str(value)
            for key, value in raw.items()
            if key in PREFERENCE_KEYS and value is not None
        }

    def load(self) -> Settings:
        """Read stored preferences and merge them over the base settings."""
        self._values = self._read()
        self._settings = _merge(self._base, self._values)
        logger.debug("Loaded %d preference override(s)", len(self._values))
        return self._settings

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8"
        )

    def update(self, key: str, value: str) -> Settings:
        """Set one preference, persist the record, and return merged settings.

        Raises:
            KeyError: If *key* is not a known preference.
        """
        if key not in PREFERENCE_KEYS:
            raise KeyError(key)
        self._values[key] = value.strip()
        self._settings = _merge(self._base, self._values)
        self._write()
        logger.info("Preference %s updated", key)
        return self._settings

    def reset(self, key: str) -> Settings:
        """Drop a stored preference so the environment value applies again."""
        if key not in PREFERENCE_KEYS:
            raise KeyError(key)
        self._values.pop(key, None)
        self._settings = _merge(self._base, self._values)
        self._write()
        logger.info("Preference %s reset", key)
        return self._settings


@lru_cache(maxsize=1)
def get_preference_store() -> PreferenceStore:
    """Return the application's loaded preference store.

    Call ``get_preference_store.cache_clear()`` in tests to reset.
    """
    settings = get_settings()
    store = PreferenceStore(settings.app.preferences_path, settings)
    store.load()
    return store
