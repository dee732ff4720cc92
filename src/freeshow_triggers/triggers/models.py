"""Data models for inline triggers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TriggerKind(StrEnum):
    """What a trigger selects in FreeShow."""

    SHOW = "show"
    SLIDE = "slide"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class TriggerMatch:
    """A trigger found in one text unit.

    Attributes:
        kind: Show or Slide.
        raw_label: Label text exactly as written between the delimiters.
        start: Offset of the first trigger character in the text unit.
        end: Offset one past the last trigger character.
    """

    kind: TriggerKind
    raw_label: str
    start: int
    end: int

    @property
    def label(self) -> str:
        """The label with surrounding whitespace trimmed."""
        return self.raw_label.strip()
