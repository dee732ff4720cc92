"""Result types for FreeShow dispatches.

These dataclasses give the page and CLI a single shape to report, whatever
happened on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from freeshow_triggers.dispatch.errors import DispatchError
    from freeshow_triggers.triggers.models import TriggerKind


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one dispatch.

    Attributes:
        kind: Show or Slide.
        label: Trimmed label that was sent.
        success: True for a 2xx response.
        url: Request target, or None when the endpoint was rejected.
        status_code: HTTP status when a response was received.
        error: The failure, when ``success`` is False.
    """

    kind: TriggerKind
    label: str
    success: bool
    url: str | None = None
    status_code: int | None = None
    error: DispatchError | None = None


@dataclass(frozen=True)
class Notification:
    """A transient user-visible message (maps onto ``ui.notify``)."""

    message: str
    type: Literal["positive", "negative"]
    timeout: int  # milliseconds
