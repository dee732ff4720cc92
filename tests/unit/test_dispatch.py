"""Tests for the FreeShow action dispatcher.

HTTP goes through ``httpx.MockTransport``; no test touches the network.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from freeshow_triggers.config import FreeshowConfig
from freeshow_triggers.dispatch import (
    ConfigurationError,
    HttpStatusError,
    NetworkError,
    build_target_url,
    dispatch,
    encode_payload,
    normalise_endpoint,
)
from freeshow_triggers.triggers import TriggerKind

if TYPE_CHECKING:
    from collections.abc import Callable

EXPECTED_INTRO_URL = (
    "http://localhost:5505/?action=name_select_slide"
    "&data=%7B%22value%22%3A%22Intro%22%7D"
)


class _Recorder:
    """Mock transport handler that records requests."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _ok(_request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="ok")


class TestNormaliseEndpoint:
    """Endpoint fallback and scheme defaulting."""

    def test_adds_missing_scheme(self) -> None:
        assert normalise_endpoint("example.com:5505") == "http://example.com:5505"

    def test_keeps_existing_scheme(self) -> None:
        assert normalise_endpoint("https://fs.local/") == "https://fs.local/"

    def test_empty_uses_default(self) -> None:
        assert normalise_endpoint("") == "http://localhost:5505/"

    def test_whitespace_only_uses_default(self) -> None:
        assert normalise_endpoint("   ") == "http://localhost:5505/"

    def test_trims_surrounding_whitespace(self) -> None:
        assert normalise_endpoint("  localhost:5505 ") == "http://localhost:5505"


class TestBuildTargetUrl:
    """Request target construction."""

    def test_default_slide_target_matches_freeshow_format(self) -> None:
        url = build_target_url("http://localhost:5505/", "name_select_slide", "Intro")
        assert url == EXPECTED_INTRO_URL

    def test_empty_path_becomes_root(self) -> None:
        url = build_target_url("http://localhost:5505", "name_select_slide", "Intro")
        assert url == EXPECTED_INTRO_URL

    def test_payload_is_compact_json(self) -> None:
        assert encode_payload("Intro") == '{"value":"Intro"}'

    def test_reserved_characters_are_escaped(self) -> None:
        url = build_target_url("http://h/", "a", "R&B = 100% #1?")
        params = httpx.URL(url).params
        assert json.loads(params["data"]) == {"value": "R&B = 100% #1?"}
        assert "#" not in url
        assert "&B" not in url

    def test_non_ascii_label_round_trips(self) -> None:
        url = build_target_url("http://h/", "a", "Größe ✝")
        assert json.loads(httpx.URL(url).params["data"]) == {"value": "Größe ✝"}

    def test_existing_query_parameters_kept(self) -> None:
        url = build_target_url("http://h:1/api?token=abc&action=old", "new", "X")
        params = httpx.URL(url).params
        assert params["token"] == "abc"
        assert params.get_list("action") == ["new"]

    @pytest.mark.parametrize(
        "base",
        [
            "http://",
            "http://:5505",
            "http://exa mple.com",
            "http://example.com:notaport",
            "http://[::1",
            "http://example.com:99999",
            "ftp://example.com",
        ],
    )
    def test_unusable_base_raises(self, base: str) -> None:
        with pytest.raises(ConfigurationError):
            build_target_url(base, "a", "X")


class TestDispatchSuccess:
    """2xx responses."""

    @pytest.mark.asyncio
    async def test_default_slide_request(self) -> None:
        recorder = _Recorder(_ok)
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "Intro", FreeshowConfig(), client=client
            )

        assert outcome.success
        assert outcome.error is None
        assert outcome.status_code == 200
        assert outcome.url == EXPECTED_INTRO_URL

        (request,) = recorder.requests
        assert request.method == "POST"
        assert request.url.host == "localhost"
        assert request.url.port == 5505
        assert request.url.path == "/"
        assert request.url.params["action"] == "name_select_slide"
        assert request.url.params["data"] == '{"value":"Intro"}'
        assert request.headers["content-type"] == "application/json"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_show_uses_show_action(self) -> None:
        recorder = _Recorder(_ok)
        async with recorder.client() as client:
            await dispatch(TriggerKind.SHOW, "Sunday", FreeshowConfig(), client=client)

        assert recorder.requests[0].url.params["action"] == "name_select_show"

    @pytest.mark.asyncio
    async def test_custom_and_blank_action_ids(self) -> None:
        recorder = _Recorder(_ok)
        config = FreeshowConfig(show_action="id_select_show", slide_action="  ")
        async with recorder.client() as client:
            await dispatch(TriggerKind.SHOW, "S", config, client=client)
            await dispatch(TriggerKind.SLIDE, "L", config, client=client)

        actions = [r.url.params["action"] for r in recorder.requests]
        assert actions == ["id_select_show", "name_select_slide"]

    @pytest.mark.asyncio
    async def test_label_is_trimmed(self) -> None:
        recorder = _Recorder(_ok)
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "  Intro  ", FreeshowConfig(), client=client
            )

        assert outcome.label == "Intro"
        assert recorder.requests[0].url.params["data"] == '{"value":"Intro"}'

    @pytest.mark.asyncio
    async def test_schemeless_endpoint_is_normalised(self) -> None:
        recorder = _Recorder(_ok)
        config = FreeshowConfig(endpoint="example.com:5505")
        async with recorder.client() as client:
            outcome = await dispatch(TriggerKind.SLIDE, "A", config, client=client)

        assert outcome.success
        request = recorder.requests[0]
        assert request.url.scheme == "http"
        assert request.url.host == "example.com"
        assert request.url.port == 5505

    @pytest.mark.asyncio
    async def test_any_2xx_is_success(self) -> None:
        recorder = _Recorder(lambda _r: httpx.Response(204))
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )
        assert outcome.success
        assert outcome.status_code == 204


class TestDispatchFailure:
    """Failures resolve to outcomes; nothing is raised."""

    @pytest.mark.asyncio
    async def test_server_error_is_http_status(self) -> None:
        recorder = _Recorder(lambda _r: httpx.Response(500))
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )

        assert not outcome.success
        assert isinstance(outcome.error, HttpStatusError)
        assert outcome.error.status_code == 500
        assert outcome.status_code == 500

    @pytest.mark.asyncio
    async def test_redirect_is_not_success(self) -> None:
        recorder = _Recorder(
            lambda _r: httpx.Response(302, headers={"Location": "http://elsewhere/"})
        )
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )
        assert isinstance(outcome.error, HttpStatusError)
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_connection_refused_is_network_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        recorder = _Recorder(refuse)
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )

        assert not outcome.success
        assert isinstance(outcome.error, NetworkError)
        assert "Connection refused" in str(outcome.error)
        assert outcome.status_code is None
        assert outcome.url == build_target_url(
            "http://localhost:5505/", "name_select_slide", "A"
        )

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self) -> None:
        def stall(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        recorder = _Recorder(stall)
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SHOW, "A", FreeshowConfig(), client=client
            )
        assert isinstance(outcome.error, NetworkError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "endpoint", ["http://", "exa mple.com", "ftp://x", "http://[::1", "[::1:5505"]
    )
    async def test_bad_endpoint_never_touches_network(self, endpoint: str) -> None:
        recorder = _Recorder(_ok)
        async with recorder.client() as client:
            outcome = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(endpoint=endpoint), client=client
            )

        assert not outcome.success
        assert isinstance(outcome.error, ConfigurationError)
        assert outcome.url is None
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_failure_does_not_poison_later_dispatches(self) -> None:
        responses = iter([httpx.Response(503), httpx.Response(200)])
        recorder = _Recorder(lambda _r: next(responses))
        async with recorder.client() as client:
            first = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )
            second = await dispatch(
                TriggerKind.SLIDE, "A", FreeshowConfig(), client=client
            )

        assert not first.success
        assert second.success
        assert len(recorder.requests) == 2
