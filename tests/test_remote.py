"""Tests for voxnav.remote — best-effort HTTP fallback."""

from __future__ import annotations

import asyncio
import json
import time

import httpx
import pytest

from voxnav.remote import RemoteInterpreter


def _remote(handler) -> RemoteInterpreter:
    return RemoteInterpreter(
        api_base="http://interp.test/api/",
        timeout_ms=50,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
class TestRemoteInterpreter:
    async def test_posts_transcript_and_builds_intent(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"intent": {"type": "filter", "tag": "Puzzle", "utterance": "show puzzle games"}},
            )

        intent = await _remote(handler).interpret("hey platform maybe show puzzle games")

        assert intent is not None
        assert intent.to_dict() == {"type": "filter", "tag": "Puzzle", "utterance": "show puzzle games"}
        assert str(seen[0].url) == "http://interp.test/api/voice/interpret"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"transcript": "hey platform maybe show puzzle games"}

    async def test_null_intent(self) -> None:
        intent = await _remote(lambda request: httpx.Response(200, json={"intent": None})).interpret("x")
        assert intent is None

    async def test_server_error(self) -> None:
        intent = await _remote(lambda request: httpx.Response(500, json={"error": "boom"})).interpret("x")
        assert intent is None

    async def test_bad_request(self) -> None:
        response = httpx.Response(400, json={"error": "transcript is required"})
        assert await _remote(lambda request: response).interpret("") is None

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        assert await _remote(handler).interpret("x") is None

    async def test_deadline_bounds_slow_server(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={"intent": None})

        started = time.monotonic()
        assert await _remote(handler).interpret("x") is None
        assert time.monotonic() - started < 1.0

    async def test_deadline_bounds_trickled_body(self) -> None:
        async def trickle():
            for chunk in (b"{\"intent\": ", b"{\"type\": ", b"\"reset-filters\"", b"}}"):
                await asyncio.sleep(0.1)
                yield chunk

        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-type": "application/json"}, content=trickle())

        started = time.monotonic()
        assert await _remote(handler).interpret("x") is None
        assert time.monotonic() - started < 0.3

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await _remote(handler).interpret("x") is None

    async def test_non_json_body(self) -> None:
        intent = await _remote(lambda request: httpx.Response(200, text="<html>oops</html>")).interpret("x")
        assert intent is None

    @pytest.mark.parametrize(
        "body",
        [
            {"intent": {"type": "teleport"}},
            {"intent": {"type": "filter", "tags": []}},
            {"intent": "navigate"},
            ["not", "an", "object"],
            {},
        ],
    )
    async def test_malformed_payload(self, body) -> None:
        intent = await _remote(lambda request: httpx.Response(200, json=body)).interpret("x")
        assert intent is None


def test_timeout_is_seconds() -> None:
    remote = RemoteInterpreter(api_base="http://localhost:5000/api", timeout_ms=1200)
    assert remote.timeout == 1.2
    assert remote.url == "http://localhost:5000/api/voice/interpret"
