"""Settings page: edits the persisted preference record.

Every change is written through ``PreferenceStore`` immediately.  Colour
changes also restyle the controls on every open document page.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from nicegui import ui

from freeshow_triggers.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_SHOW_ACTION,
    DEFAULT_SLIDE_ACTION,
    DEFAULT_TRIGGER_PREFIX,
)
from freeshow_triggers.pages.document import broadcast_js
from freeshow_triggers.pages.layout import page_layout
from freeshow_triggers.pages.registry import page_route
from freeshow_triggers.preferences import PREFERENCE_KEYS, get_preference_store
from freeshow_triggers.triggers import TriggerKind

if TYPE_CHECKING:
    from freeshow_triggers.preferences import PreferenceStore

# key -> (label, description, placeholder)
_TEXT_FIELDS: dict[str, tuple[str, str, str]] = {
    "endpoint": (
        "API endpoint",
        "Base URL of FreeShow's HTTP API.",
        DEFAULT_ENDPOINT,
    ),
    "show_action": (
        "Show action ID",
        "Action run by show triggers (=> |name|).",
        DEFAULT_SHOW_ACTION,
    ),
    "slide_action": (
        "Slide action ID",
        "Action run by slide triggers (>> [name] or => [name]).",
        DEFAULT_SLIDE_ACTION,
    ),
    "trigger_prefix": (
        "Trigger prefix",
        "Text that precedes [slide name].",
        DEFAULT_TRIGGER_PREFIX,
    ),
}

_COLOR_FIELDS: dict[str, TriggerKind] = {
    "show_color": TriggerKind.SHOW,
    "slide_color": TriggerKind.SLIDE,
}


def restyle_js(kind: TriggerKind, color: str) -> str:
    """JS call that applies *color* to every rendered control of *kind*."""
    return f"window.freeshowRestyle({json.dumps(kind.value)}, {json.dumps(color)})"


def _text_field(store: PreferenceStore, key: str) -> None:
    label, description, placeholder = _TEXT_FIELDS[key]

    def _save(e) -> None:
        store.update(key, e.value or "")

    with ui.column().classes("gap-0 w-full"):
        ui.input(
            label,
            value=store.values()[key],
            placeholder=placeholder,
            on_change=_save,
        ).classes("w-full")
        ui.label(description).classes("text-caption text-grey-7")


def apply_color(store: PreferenceStore, key: str, color: str) -> None:
    """Persist a colour preference and restyle controls on open document pages."""
    kind = _COLOR_FIELDS[key]
    store.update(key, color)
    broadcast_js(restyle_js(kind, store.settings.display.color_for(kind)))


def reset_all(store: PreferenceStore) -> None:
    """Drop every stored preference and restyle open document pages."""
    for key in PREFERENCE_KEYS:
        store.reset(key)
    for kind in _COLOR_FIELDS.values():
        broadcast_js(restyle_js(kind, store.settings.display.color_for(kind)))


def _color_field(store: PreferenceStore, key: str, kind: TriggerKind) -> None:
    with ui.row().classes("items-center gap-2"):
        picker = ui.color_input(
            f"{kind.display_name} button colour",
            value=store.values()[key],
            on_change=lambda e: apply_color(store, key, e.value or ""),
        )

        # Setting the value fires on_change, which persists and restyles.
        ui.button(icon="close", on_click=lambda: picker.set_value("")).props(
            "flat dense"
        ).tooltip("Reset to theme default")


@page_route("/settings", title="Settings", icon="settings", category="settings")
async def settings_page() -> None:
    """Edit endpoint, action ids, trigger prefix, and colours."""
    store = get_preference_store()

    with page_layout("Settings"):
        with ui.card().classes("p-4 max-w-xl w-full gap-4"):
            ui.label("FreeShow").classes("text-lg font-semibold")
            for key in _TEXT_FIELDS:
                _text_field(store, key)

            ui.separator()
            ui.label("Appearance").classes("text-lg font-semibold")
            for key, kind in _COLOR_FIELDS.items():
                _color_field(store, key, kind)

            def _reset_all() -> None:
                reset_all(store)
                ui.notify("Settings reset to defaults", type="positive")
                ui.navigate.reload()

            ui.button("Reset all", on_click=_reset_all).props("outline")
