"""
Transport protocol for Horizon REST calls.

Defines the seam where the concrete HTTP implementation plugs in. The
Horizon client depends on this protocol, not on httpx directly, so tests
can hand it canned responses without touching the network.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)

Status codes are returned, not raised: Horizon uses 404 for a missing
account and 400 with a problem document for a rejected transaction, and
both are expected outcomes the client interprets. Only transport-level
failures (timeout, connection refused, non-JSON body) raise NetworkError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from alfred_please.errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HorizonResponse:
    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class HorizonTransport(Protocol):
    """Async transport for Horizon requests."""

    async def get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> HorizonResponse:
        """GET ``url`` and return status plus parsed JSON body.

        Raises:
            NetworkError: On transport-level failures.
        """
        ...

    async def post_form(self, url: str, data: dict[str, str]) -> HorizonResponse:
        """POST form-encoded ``data`` and return status plus parsed JSON body.

        Raises:
            NetworkError: On transport-level failures.
        """
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient.

    Args:
        timeout: Request timeout in seconds. Submission can block until
            the ledger closes, so keep this above a ledger close time.
        headers: Extra headers sent with every request.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = {"Accept": "application/json", **(headers or {})}

    async def get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> HorizonResponse:
        return await self._request("GET", url, params=params)

    async def post_form(self, url: str, data: dict[str, str]) -> HorizonResponse:
        return await self._request("POST", url, data=data)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> HorizonResponse:
        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, params=params, data=data, headers=self._headers
                )
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"request to {url} timed out after {self._timeout}s",
                details={"url": url, "timeout_s": self._timeout},
            ) from e
        except httpx.ConnectError as e:
            raise NetworkError(
                f"failed to connect to {url}", details={"url": url}
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                f"HTTP error: {e}", details={"url": url, "error": str(e)}
            ) from e

        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise NetworkError(
                f"HTTP {response.status_code}: response was not valid JSON",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "body_preview": response.text[:200] if response.text else "",
                },
            ) from e

        if not isinstance(body, dict):
            raise NetworkError(
                "response JSON was not an object",
                details={"url": url, "type": type(body).__name__},
            )

        return HorizonResponse(status_code=response.status_code, body=body)
