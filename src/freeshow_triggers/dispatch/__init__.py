"""FreeShow action dispatch.

Usage:
    from freeshow_triggers.dispatch import describe_outcome, dispatch

    outcome = await dispatch(TriggerKind.SLIDE, "Intro", settings.freeshow)
    note = describe_outcome(outcome)
    ui.notify(note.message, type=note.type, timeout=note.timeout)
"""

from __future__ import annotations

from freeshow_triggers.dispatch.client import (
    build_target_url,
    dispatch,
    encode_payload,
    normalise_endpoint,
)
from freeshow_triggers.dispatch.errors import (
    ConfigurationError,
    DispatchError,
    HttpStatusError,
    NetworkError,
)
from freeshow_triggers.dispatch.messages import describe_outcome
from freeshow_triggers.dispatch.models import DispatchOutcome, Notification

__all__ = [
    "ConfigurationError",
    "DispatchError",
    "DispatchOutcome",
    "HttpStatusError",
    "NetworkError",
    "Notification",
    "build_target_url",
    "describe_outcome",
    "dispatch",
    "encode_payload",
    "normalise_endpoint",
]
