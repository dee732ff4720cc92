"""Trigger scanner: rewrites rendered HTML so inline triggers become buttons.

Architecture:
    Two passes, mirroring the marker approach used for highlight export.
    Pass 1 walks the DOM (selectolax child/next iteration, which exposes text
    nodes) and collects every text node that contains a trigger, skipping
    literal regions and existing controls.  Pass 2 replaces each collected
    text node with its plain text plus a unique marker per trigger, then
    swaps the markers for button HTML after serialisation.  String-level
    insertion is needed because selectolax escapes HTML passed to
    ``replace_with`` on text nodes.
"""

from __future__ import annotations

import html as html_module
import logging
import re
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from selectolax.lexbor import LexborHTMLParser

from freeshow_triggers.triggers.models import TriggerKind, TriggerMatch
from freeshow_triggers.triggers.patterns import build_trigger_pattern, split_triggers

if TYPE_CHECKING:
    from freeshow_triggers.config import DisplayConfig, TriggerConfig

logger = logging.getLogger(__name__)

CONTROL_CLASS = "freeshow-trigger"

# Elements whose text is literal: code, preformatted text, keyboard/sample
# output, math, and non-content containers.
_LITERAL_TAGS = frozenset(
    (
        "code",
        "pre",
        "samp",
        "kbd",
        "math",
        "mjx-container",
        "script",
        "style",
        "noscript",
        "template",
        "textarea",
    )
)

# Class names used by math renderers (Obsidian, KaTeX, MathJax, arithmatex).
_MATH_CLASSES = frozenset(
    (
        "math",
        "math-inline",
        "math-block",
        "katex",
        "katex-display",
        "MathJax",
        "arithmatex",
    )
)

_FULL_DOCUMENT_RE = re.compile(r"^\s*<(!doctype|html)\b", re.IGNORECASE)


@dataclass(frozen=True)
class RenderedControl:
    """A control found in scanned HTML."""

    kind: TriggerKind
    label: str
    control_id: str


def _classes(node: Any) -> set[str]:
    raw = node.attributes.get("class")
    if not raw:
        return set()
    return set(raw.split())


def _is_excluded(node: Any) -> bool:
    """True if nothing under *node* may be converted."""
    if node.tag in _LITERAL_TAGS:
        return True
    classes = _classes(node)
    return CONTROL_CLASS in classes or bool(classes & _MATH_CLASSES)


def _collect_text_nodes(
    root: Any,
    pattern: re.Pattern[str],
    allow_empty_label: bool,
) -> list[tuple[Any, list[str | TriggerMatch]]]:
    """Pass 1: find text nodes containing triggers, in document order."""
    found: list[tuple[Any, list[str | TriggerMatch]]] = []

    def _walk(node: Any) -> None:
        tag = node.tag

        # Text node: selectolax uses "-text" as the tag
        if tag == "-text":
            text = node.text_content
            if not text:
                return
            segments = split_triggers(
                text, pattern, allow_empty_label=allow_empty_label
            )
            if any(isinstance(seg, TriggerMatch) for seg in segments):
                found.append((node, segments))
            return

        if tag == "-comment" or _is_excluded(node):
            return

        child = node.child
        while child is not None:
            _walk(child)
            child = child.next

    child = root.child
    while child is not None:
        _walk(child)
        child = child.next

    return found


def render_control(match: TriggerMatch, control_id: str, color: str = "") -> str:
    """Return the button HTML for a single trigger."""
    label = html_module.escape(match.label, quote=True)
    style = ""
    if color:
        style = (
            f' style="background: {html_module.escape(color, quote=True)};'
            f' border-color: transparent"'
        )
    return (
        f'<button type="button" class="{CONTROL_CLASS}"'
        f' data-trigger-kind="{match.kind.value}"'
        f' data-trigger-label="{label}"'
        f' data-trigger-id="{control_id}"'
        f' title="{match.kind.display_name}: {label}"{style}>{label}</button>'
    )


def scan_html(
    html: str,
    triggers: TriggerConfig,
    display: DisplayConfig | None = None,
) -> str:
    """Replace trigger text in *html* with FreeShow control buttons.

    Args:
        html: Rendered HTML fragment or full document.
        triggers: Trigger syntax options (prefix, empty-label policy).
        display: Optional per-kind colours applied to the buttons.

    Returns:
        The rewritten HTML.  When nothing matches, *html* is returned
        unchanged (no re-serialisation).
    """
    if not html:
        return html

    pattern = build_trigger_pattern(triggers.effective_prefix)
    is_document = bool(_FULL_DOCUMENT_RE.match(html))
    # Fragments are parsed in body context so leading <style>, <link>,
    # <script> and comments stay in place instead of moving to <head>.
    tree = LexborHTMLParser(html if is_document else f"<body>{html}")
    body = tree.body
    root = body if body else tree.root
    if root is None:
        return html

    found = _collect_text_nodes(root, pattern, triggers.allow_empty_label)
    if not found:
        return html

    # Per-scan nonce keeps markers distinct from anything in the source.
    nonce = uuid.uuid4().hex
    while nonce in html:
        nonce = uuid.uuid4().hex
    marker_re = re.compile(rf"FSTRIGGER{nonce}X(\d+)END")

    controls: list[str] = []
    for node, segments in found:
        parts: list[str] = []
        for seg in segments:
            if isinstance(seg, str):
                parts.append(seg)
                continue
            index = len(controls)
            color = display.color_for(seg.kind) if display is not None else ""
            controls.append(render_control(seg, f"fst-{nonce[:8]}-{index}", color))
            parts.append(f"FSTRIGGER{nonce}X{index}END")
        node.replace_with("".join(parts))

    serialised = tree.html if is_document else root.inner_html
    if serialised is None:
        return html

    logger.debug("Converted %d trigger(s) in %d text node(s)", len(controls), len(found))
    return marker_re.sub(lambda m: controls[int(m.group(1))], serialised)


def extract_controls(html: str) -> list[RenderedControl]:
    """List the controls present in scanned HTML, in document order."""
    if not html:
        return []
    tree = LexborHTMLParser(html)
    controls: list[RenderedControl] = []
    for node in tree.css(f"button.{CONTROL_CLASS}"):
        attrs = node.attributes
        controls.append(
            RenderedControl(
                kind=TriggerKind(attrs.get("data-trigger-kind") or "slide"),
                label=attrs.get("data-trigger-label") or "",
                control_id=attrs.get("data-trigger-id") or "",
            )
        )
    return controls
