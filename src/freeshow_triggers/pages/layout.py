"""Shared layout components.

Provides consistent header, navigation drawer, and page structure.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from nicegui import ui

from freeshow_triggers.pages.registry import get_pages_by_category

if TYPE_CHECKING:
    from collections.abc import Iterator

STYLESHEET_URL = "/static/freeshow-triggers.css"
SCRIPT_URL = "/static/freeshow-triggers.js"


def _nav_item(label: str, route: str, icon: str | None = None) -> None:
    """Create a navigation item in the drawer."""
    with ui.item(on_click=lambda: ui.navigate.to(route)).classes("w-full"):
        if icon:
            with ui.item_section().props("avatar"):
                ui.icon(icon)
        with ui.item_section():
            ui.item_label(label)


@contextmanager
def page_layout(title: str = "FreeShow Triggers") -> Iterator[None]:
    """Context manager for consistent page layout with header and nav drawer.

    Usage:
        @page_route("/my-page", title="My Page", icon="description")
        async def my_page():
            with page_layout("My Page"):
                ui.label("Page content here")

    Args:
        title: Page title shown in header.

    Yields:
        Context for page content.
    """
    ui.add_head_html(f'<link rel="stylesheet" href="{STYLESHEET_URL}">')
    ui.add_head_html(f'<script src="{SCRIPT_URL}"></script>')

    with ui.header().classes("bg-primary items-center q-py-xs"):
        menu_btn = ui.button(icon="menu").props("flat color=white")
        ui.label(title).classes("text-h6 text-white q-ml-sm")

    with ui.left_drawer(value=False).classes("bg-grey-2") as drawer:
        ui.label("Navigation").classes("text-h6 q-pa-md")
        ui.separator()

        with ui.list().props("padding"):
            pages_by_cat = get_pages_by_category()
            for category in ("main", "settings"):
                pages = pages_by_cat.get(category, [])
                if not pages:
                    continue
                if category != "main":
                    ui.separator().classes("q-my-md")
                for page in pages:
                    _nav_item(page.title, page.route, page.icon)

    menu_btn.on("click", drawer.toggle)

    with ui.element("div").classes("q-pa-md w-full"):
        yield
