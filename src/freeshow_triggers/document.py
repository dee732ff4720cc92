"""Render pass: markdown source -> HTML -> trigger controls.

Raw HTML in the source is escaped (markdown2 ``safe_mode="escape"``) so only
the scanner adds markup beyond what markdown produces.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import markdown2

from freeshow_triggers.triggers import scan_html

if TYPE_CHECKING:
    from pathlib import Path

    from freeshow_triggers.config import Settings

logger = logging.getLogger(__name__)

_MARKDOWN_EXTRAS = ("fenced-code-blocks", "tables", "strike", "cuddled-lists")

_FENCE_RE = re.compile(r"^ {0,3}(```|~~~)")


def _protect_prefix_lines(source: str, prefix: str) -> str:
    """Keep line-leading ``>`` prefix triggers out of markdown blockquotes.

    A line such as ``>> [Intro]`` would otherwise render as a nested
    blockquote containing ``[Intro]``.  The leading ``>`` is written as an
    entity so the rendered text still reads ``>> [Intro]``.  Fenced and
    indented code is left alone.
    """
    if not prefix.startswith(">"):
        return source
    line_re = re.compile(rf"^( {{0,3}}){re.escape(prefix)}(\s*\[)")
    lines = source.split("\n")
    in_fence = False
    for i, line in enumerate(lines):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        lines[i] = line_re.sub(
            lambda m: f"{m.group(1)}&gt;{prefix[1:]}{m.group(2)}", line, count=1
        )
    return "\n".join(lines)


def render_markdown(source: str, prefix: str = ">>") -> str:
    """Convert markdown *source* to HTML without trigger processing."""
    if not source.strip():
        return ""
    return str(
        markdown2.markdown(
            _protect_prefix_lines(source, prefix),
            safe_mode="escape",
            extras=list(_MARKDOWN_EXTRAS),
        )
    )


def render_document(source: str, settings: Settings) -> str:
    """Render markdown *source* and convert its triggers into controls."""
    html = render_markdown(source, settings.triggers.effective_prefix)
    return scan_html(html, settings.triggers, settings.display)


def load_document(path: Path | None) -> str:
    """Read the initial document, or return an empty string if unset/missing."""
    if path is None:
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("Document not found: %s", path)
        return ""
