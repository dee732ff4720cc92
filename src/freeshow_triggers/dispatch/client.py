"""FreeShow HTTP API client.

FreeShow's remote API takes the action id and a JSON payload in the query
string of a POST request:

    POST {endpoint}?action={id}&data={urlencoded JSON {"value": "<label>"}}
    Content-Type: application/json
    (empty body)

Only the status code is inspected.  ``dispatch`` never raises: every failure
is converted into a ``DispatchOutcome`` carrying a ``DispatchError``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from freeshow_triggers.config import DEFAULT_ENDPOINT
from freeshow_triggers.dispatch.errors import (
    ConfigurationError,
    DispatchError,
    HttpStatusError,
    NetworkError,
)
from freeshow_triggers.dispatch.models import DispatchOutcome

if TYPE_CHECKING:
    from freeshow_triggers.config import FreeshowConfig
    from freeshow_triggers.triggers.models import TriggerKind

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_ALLOWED_SCHEMES = frozenset(("http", "https"))
_QUERY_KEYS = ("action", "data")


def normalise_endpoint(raw: str, fallback: str = DEFAULT_ENDPOINT) -> str:
    """Apply the empty-value fallback and default ``http://`` scheme.

    >>> normalise_endpoint("example.com:5505")
    'http://example.com:5505'
    """
    value = (raw or "").strip() or fallback.strip()
    if not _SCHEME_RE.match(value):
        value = f"http://{value}"
    return value


def encode_payload(label: str) -> str:
    """JSON payload for the ``data`` parameter, compact like ``JSON.stringify``."""
    return json.dumps({"value": label}, ensure_ascii=False, separators=(",", ":"))


def build_target_url(base: str, action: str, label: str) -> str:
    """Set ``action`` and ``data`` on *base* and return the request target.

    Other query parameters on *base* are kept; an empty path becomes ``/``.

    Raises:
        ConfigurationError: If *base* is not a usable http(s) URL.
    """
    if any(ch.isspace() for ch in base):
        raise ConfigurationError(f"endpoint contains whitespace: {base!r}")

    try:
        parts = urlsplit(base)
        hostname = parts.hostname
        parts.port  # noqa: B018 - property validates the port
    except ValueError as exc:
        # Unbalanced IPv6 brackets, non-numeric or out-of-range ports.
        raise ConfigurationError(f"malformed endpoint {base!r}: {exc}") from exc

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise ConfigurationError(f"unsupported scheme in {base!r}")
    if not hostname:
        raise ConfigurationError(f"no host in {base!r}")

    params = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in _QUERY_KEYS
    ]
    params.append(("action", action))
    params.append(("data", encode_payload(label)))

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path or "/", urlencode(params), "")
    )


async def _post(client: httpx.AsyncClient, url: str) -> httpx.Response:
    return await client.post(url, headers={"Content-Type": "application/json"})


async def dispatch(
    kind: TriggerKind,
    label: str,
    freeshow: FreeshowConfig,
    *,
    client: httpx.AsyncClient | None = None,
) -> DispatchOutcome:
    """Send one select-show / select-slide command to FreeShow.

    Args:
        kind: Show or Slide; picks the configured action id.
        label: Show or slide name (trimmed before sending).
        freeshow: Endpoint and action configuration.
        client: Optional shared client (tests pass one with a mock transport).
            When omitted a client is created for this request only.

    Returns:
        DispatchOutcome; ``success`` is True only for a 2xx response.
    """
    label = label.strip()

    try:
        base = normalise_endpoint(freeshow.endpoint)
        url = build_target_url(base, freeshow.action_for(kind), label)
    except ConfigurationError as exc:
        logger.warning(
            "FreeShow endpoint rejected",
            extra={"endpoint": freeshow.endpoint, "error": str(exc)},
        )
        return DispatchOutcome(kind=kind, label=label, success=False, error=exc)

    logger.debug("POST %s", url)

    error: DispatchError
    try:
        if client is None:
            async with httpx.AsyncClient() as owned:
                response = await _post(owned, url)
        else:
            response = await _post(client, url)
    except httpx.InvalidURL as exc:
        error = ConfigurationError(str(exc))
    except httpx.HTTPError as exc:
        error = NetworkError(str(exc) or type(exc).__name__)
    else:
        if response.is_success:
            logger.info("FreeShow %s selected: %s", kind.value, label)
            return DispatchOutcome(
                kind=kind,
                label=label,
                success=True,
                url=url,
                status_code=response.status_code,
            )
        error = HttpStatusError(response.status_code, response.reason_phrase)
        logger.warning(
            "FreeShow rejected action",
            extra={"url": url, "status_code": response.status_code},
        )
        return DispatchOutcome(
            kind=kind,
            label=label,
            success=False,
            url=url,
            status_code=response.status_code,
            error=error,
        )

    logger.warning(
        "FreeShow request failed",
        extra={"url": url, "error_type": type(error).__name__, "error": str(error)},
    )
    return DispatchOutcome(kind=kind, label=label, success=False, url=url, error=error)
