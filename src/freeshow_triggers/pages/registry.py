"""Page registration system for data-driven navigation.

Provides a decorator for registering pages with metadata, so the navigation
drawer is generated from the registered routes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from nicegui import ui

if TYPE_CHECKING:
    from collections.abc import Callable

Category = Literal["main", "settings", "hidden"]


@dataclass
class PageMeta:
    """Metadata for a registered page."""

    route: str
    title: str
    icon: str
    category: Category = "main"
    order: int = field(default=100)


# Global registry of all pages
_page_registry: dict[str, PageMeta] = {}


def page_route(
    route: str,
    *,
    title: str,
    icon: str,
    category: Category = "main",
    order: int = 100,
) -> Callable:
    """Decorator to register a page with navigation metadata.

    Usage:
        @page_route("/settings", title="Settings", icon="settings", order=90)
        async def settings_page():
            ...

    Args:
        route: URL path for the page.
        title: Display title in navigation.
        icon: Material icon name.
        category: Navigation section (main, settings, hidden).
        order: Sort order within category (lower = higher).

    Returns:
        Decorated function registered with NiceGUI and the page registry.
    """

    def decorator(func: Callable) -> Callable:
        _page_registry[route] = PageMeta(
            route=route,
            title=title,
            icon=icon,
            category=category,
            order=order,
        )
        return ui.page(route)(func)

    return decorator


def get_visible_pages() -> list[PageMeta]:
    """Get navigable pages, sorted by category and order."""
    category_order = {"main": 0, "settings": 1}
    visible = [p for p in _page_registry.values() if p.category != "hidden"]
    visible.sort(key=lambda p: (category_order.get(p.category, 99), p.order))
    return visible


def get_pages_by_category() -> dict[str, list[PageMeta]]:
    """Get navigable pages grouped by category."""
    by_category: dict[str, list[PageMeta]] = {}
    for page in get_visible_pages():
        by_category.setdefault(page.category, []).append(page)
    return by_category
