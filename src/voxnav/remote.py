"""Best-effort client for the server-side heuristic interpreter.

Used only when the local cascade fails inside the wake window. Any
failure (timeout, transport error, non-2xx status, malformed payload)
is reported as "no intent" and never raised.
"""

from __future__ import annotations

import asyncio

import httpx

from voxnav.core.constants import DEFAULT_API_BASE, DEFAULT_REMOTE_TIMEOUT_MS, INTERPRET_PATH
from voxnav.core.env import LOGGER
from voxnav.core.types import Intent


class RemoteInterpreter:
    """POSTs transcripts to ``{api_base}/voice/interpret`` with a hard timeout."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout_ms: int = DEFAULT_REMOTE_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = api_base.rstrip("/") + INTERPRET_PATH
        self.timeout = timeout_ms / 1000
        self._transport = transport

    async def interpret(self, text: str) -> Intent | None:
        try:
            # httpx bounds each network step; the deadline bounds the whole call.
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.post(self.url, json={"transcript": text})
                    response.raise_for_status()
            body = response.json()
        except (httpx.TimeoutException, TimeoutError):
            LOGGER.debug("Remote interpret timed out after %.0f ms", self.timeout * 1000)
            return None
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.debug("Remote interpret failed: %s", exc)
            return None

        payload = body.get("intent") if isinstance(body, dict) else None
        if payload is None:
            return None
        try:
            intent = Intent.from_dict(payload)
        except ValueError as exc:
            LOGGER.debug("Remote interpret returned a malformed intent: %s", exc)
            return None
        LOGGER.debug("Remote interpret: %r -> %s", text, intent.type)
        return intent
