"""Dispatch failure taxonomy.

Every failure is terminal for the dispatch that produced it; none are retried.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for dispatch failures."""

    reason = "dispatch failed"

    def describe(self) -> str:
        """Short human-readable reason for notifications."""
        detail = str(self)
        return f"{self.reason}: {detail}" if detail else self.reason


class ConfigurationError(DispatchError):
    """The endpoint is malformed after normalisation. No request was sent."""

    reason = "invalid endpoint"


class HttpStatusError(DispatchError):
    """FreeShow answered with a non-2xx status."""

    reason = "HTTP error"

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code

    def describe(self) -> str:
        text = f"HTTP {self.status_code}"
        detail = str(self)
        return f"{text} {detail}" if detail else text


class NetworkError(DispatchError):
    """Transport-level failure: DNS, refused connection, timeout."""

    reason = "network error"
