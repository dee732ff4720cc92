"""Inline trigger recognition and HTML rewriting.

Usage:
    from freeshow_triggers.triggers import scan_html

    html = scan_html(rendered_html, settings.triggers, settings.display)
"""

from __future__ import annotations

from freeshow_triggers.triggers.models import TriggerKind, TriggerMatch
from freeshow_triggers.triggers.patterns import (
    SIGIL,
    build_trigger_pattern,
    find_triggers,
    format_trigger,
    split_triggers,
)
from freeshow_triggers.triggers.scanner import (
    CONTROL_CLASS,
    RenderedControl,
    extract_controls,
    render_control,
    scan_html,
)

__all__ = [
    "CONTROL_CLASS",
    "SIGIL",
    "RenderedControl",
    "TriggerKind",
    "TriggerMatch",
    "build_trigger_pattern",
    "extract_controls",
    "find_triggers",
    "format_trigger",
    "render_control",
    "scan_html",
    "split_triggers",
]
