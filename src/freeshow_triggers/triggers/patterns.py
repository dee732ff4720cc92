"""Inline trigger syntax: regex construction and text-unit segmentation.

Two syntaxes are recognised side by side:

- Prefix form: ``<prefix> [Slide name]`` (prefix configurable, default ``>>``)
  selects a slide.
- Sigil form: ``=> |Show name|`` selects a show, ``=> [Slide name]`` selects
  a slide.

Whitespace between the prefix/sigil and the opening delimiter is optional.
Labels stop at the first closing delimiter, so a label cannot itself contain
``]`` (bracket form) or ``|`` (pipe form).
"""

# Pattern: Functional Core (pure functions, no DOM access)

from __future__ import annotations

import re
from functools import lru_cache

from freeshow_triggers.triggers.models import TriggerKind, TriggerMatch

SIGIL = "=>"

# Group names; exactly one label group participates in any match.
_SIGIL_SHOW = "sigil_show"
_SIGIL_SLIDE = "sigil_slide"
_PREFIX_SLIDE = "prefix_slide"

_GROUP_KINDS: dict[str, TriggerKind] = {
    _SIGIL_SHOW: TriggerKind.SHOW,
    _SIGIL_SLIDE: TriggerKind.SLIDE,
    _PREFIX_SLIDE: TriggerKind.SLIDE,
}


@lru_cache(maxsize=16)
def build_trigger_pattern(prefix: str) -> re.Pattern[str]:
    """Compile the combined trigger regex for *prefix*.

    The sigil alternative is tried first, so a prefix configured as ``=>``
    still yields the same kinds.
    """
    sigil = re.escape(SIGIL)
    escaped = re.escape(prefix)
    return re.compile(
        rf"{sigil}\s*(?:\|(?P<{_SIGIL_SHOW}>[^|]*?)\|"
        rf"|\[(?P<{_SIGIL_SLIDE}>[^\]]*?)\])"
        rf"|{escaped}\s*\[(?P<{_PREFIX_SLIDE}>[^\]]*?)\]"
    )


def _to_match(m: re.Match[str]) -> TriggerMatch:
    for group, kind in _GROUP_KINDS.items():
        raw = m.group(group)
        if raw is not None:
            return TriggerMatch(kind=kind, raw_label=raw, start=m.start(), end=m.end())
    msg = f"Trigger regex matched without a label group: {m.group(0)!r}"
    raise AssertionError(msg)


def find_triggers(
    text: str,
    pattern: re.Pattern[str],
    *,
    allow_empty_label: bool = True,
) -> list[TriggerMatch]:
    """Return every trigger in *text*, in order of appearance.

    With ``allow_empty_label=False``, triggers whose label trims to the empty
    string are skipped and remain plain text.
    """
    matches = [_to_match(m) for m in pattern.finditer(text)]
    if allow_empty_label:
        return matches
    return [m for m in matches if m.label]


def split_triggers(
    text: str,
    pattern: re.Pattern[str],
    *,
    allow_empty_label: bool = True,
) -> list[str | TriggerMatch]:
    """Split *text* into plain-text segments and trigger matches.

    Plain segments are returned verbatim; empty segments are omitted.
    Joining the plain segments with each match's original source text
    reproduces *text* exactly.
    """
    segments: list[str | TriggerMatch] = []
    last = 0
    for match in find_triggers(text, pattern, allow_empty_label=allow_empty_label):
        if match.start > last:
            segments.append(text[last : match.start])
        segments.append(match)
        last = match.end
    if last < len(text):
        segments.append(text[last:])
    return segments


def format_trigger(kind: TriggerKind, label: str, prefix: str) -> str:
    """Build trigger source text for inserting into a document."""
    label = label.strip()
    if kind is TriggerKind.SHOW:
        return f"{SIGIL} |{label}|"
    return f"{prefix} [{label}]"
