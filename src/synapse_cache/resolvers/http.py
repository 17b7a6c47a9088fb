"""Resolver that forwards requests to an HTTP backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from synapse_cache.types import Result, Verb

logger = logging.getLogger(__name__)


class HttpResolver:
    """Async HTTP resolver.

    Each verb becomes the matching HTTP method on ``base_url + path``.
    The response status is the Result status; a JSON body becomes the
    payload, any other body is passed through as text, an empty body is
    None. Transport failures are reported as 502 results.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=timeout,
        )

    async def execute(self, verb: Verb, path: str, data: Any = None) -> Result:
        try:
            if data is None or verb in ("get", "delete"):
                response = await self._client.request(verb.upper(), path)
            else:
                response = await self._client.request(verb.upper(), path, json=data)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", verb.upper(), path, e)
            return Result.error(502, str(e) or type(e).__name__)
        return Result(response.status_code, _decode_body(response))

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _decode_body(response: httpx.Response) -> Any:
    """Decode a response body to a payload."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            pass  # Mislabelled body, fall back to text
    return response.text
