"""Notification text for dispatch outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from freeshow_triggers.dispatch.models import Notification

if TYPE_CHECKING:
    from freeshow_triggers.dispatch.models import DispatchOutcome

SUCCESS_TIMEOUT_MS = 1800
FAILURE_TIMEOUT_MS = 4000


def describe_outcome(outcome: DispatchOutcome) -> Notification:
    """Build the notification shown after a dispatch completes."""
    if outcome.success:
        return Notification(
            message=f"FreeShow: selected {outcome.kind.value} “{outcome.label}”",
            type="positive",
            timeout=SUCCESS_TIMEOUT_MS,
        )
    reason = outcome.error.describe() if outcome.error is not None else "unknown error"
    return Notification(
        message=f"FreeShow error ({outcome.kind.value} “{outcome.label}”): {reason}",
        type="negative",
        timeout=FAILURE_TIMEOUT_MS,
    )
