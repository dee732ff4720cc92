"""Document page: markdown editor, live preview, and trigger click wiring.

Every edit re-runs the render pass, so controls are recreated per render and
never reused.  Clicks travel browser -> server as ``freeshow_trigger`` events
(see ``static/freeshow-triggers.js``); each click starts an independent
dispatch, with no ordering between concurrent clicks.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from nicegui import ui

from freeshow_triggers.dispatch import describe_outcome, dispatch
from freeshow_triggers.document import load_document, render_document
from freeshow_triggers.pages.layout import page_layout
from freeshow_triggers.pages.registry import page_route
from freeshow_triggers.preferences import get_preference_store
from freeshow_triggers.triggers import TriggerKind, format_trigger

if TYPE_CHECKING:
    from nicegui import Client

logger = logging.getLogger(__name__)

TRIGGER_EVENT = "freeshow_trigger"

# Maps NiceGUI client id -> connected document page client.
_document_clients: dict[str, Client] = {}


def broadcast_js(js: str) -> None:
    """Run *js* in every open document page."""
    for client in list(_document_clients.values()):
        client.run_javascript(js)
    logger.debug("BROADCAST to %d document client(s)", len(_document_clients))


def append_trigger(source: str, trigger: str) -> str:
    """Append *trigger* to the end of *source* on the current line."""
    if not source:
        return trigger
    if source.endswith(("\n", " ")):
        return source + trigger
    return f"{source} {trigger}"


async def handle_trigger_event(args: dict[str, Any]) -> None:
    """Dispatch a clicked control and report the outcome to the user."""
    try:
        kind = TriggerKind(args.get("kind"))
    except ValueError:
        logger.warning("Ignoring trigger event with unknown kind: %r", args)
        return
    label = str(args.get("label") or "")
    control_id = str(args.get("id") or "")

    # Read at click time so settings changes apply without a re-render.
    settings = get_preference_store().settings
    outcome = await dispatch(kind, label, settings.freeshow)

    note = describe_outcome(outcome)
    ui.notify(note.message, type=note.type, timeout=note.timeout)
    state = "success" if outcome.success else "error"
    ui.run_javascript(
        f"window.freeshowTriggerDone({json.dumps(control_id)}, {json.dumps(state)})"
    )


@page_route("/", title="Document", icon="slideshow", order=10)
async def document_page() -> None:
    """Editor with live trigger preview."""
    store = get_preference_store()

    client: Client = ui.context.client
    _document_clients[client.id] = client

    def on_disconnect(_disconnect_client: Client | None = None) -> None:
        _document_clients.pop(client.id, None)

    client.on_disconnect(on_disconnect)

    async def on_trigger(e: Any) -> None:
        await handle_trigger_event(e.args or {})

    ui.on(TRIGGER_EVENT, on_trigger)

    with page_layout("FreeShow Triggers"):
        with ui.row().classes("w-full no-wrap items-start gap-6"):
            with ui.column().classes("w-1/2"):
                editor = (
                    ui.textarea(
                        label="Markdown",
                        value=load_document(store.settings.app.document_path),
                    )
                    .props("outlined autogrow")
                    .classes("w-full font-mono")
                )
                with ui.row().classes("items-center gap-2"):
                    name_input = ui.input("Slide or show name").props("dense")

                    def _insert(kind: TriggerKind) -> None:
                        name = (name_input.value or "").strip()
                        if not name:
                            ui.notify("Name is required", type="warning")
                            return
                        prefix = store.settings.triggers.effective_prefix
                        editor.value = append_trigger(
                            editor.value or "", format_trigger(kind, name, prefix)
                        )
                        name_input.value = ""

                    ui.button(
                        "Insert slide trigger",
                        on_click=lambda: _insert(TriggerKind.SLIDE),
                    ).props("dense")
                    ui.button(
                        "Insert show trigger",
                        on_click=lambda: _insert(TriggerKind.SHOW),
                    ).props("dense outline")

            with ui.column().classes("w-1/2"):
                preview = ui.html("", sanitize=False).classes("w-full")

        def _render() -> None:
            preview.content = render_document(editor.value or "", store.settings)

        editor.on_value_change(lambda _e: _render())
        _render()
