"""HTTP client helper."""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from ..core.exceptions import TransportError


@dataclass(frozen=True)
class HTTPResponse:
    """Response as received, before any interpretation."""

    status: int
    reason: Optional[str]
    text: str

    @property
    def ok(self) -> bool:
        return self.status < 400


class HTTPClient:
    """Async HTTP client wrapper.

    Error statuses are returned, not raised: deciding what a 4xx/5xx means is
    left to the caller. Only a request that produced no response at all
    raises ``TransportError``.
    """

    def __init__(self, timeout: Optional[float] = 30.0) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def post_json(
        self,
        url: str,
        payload: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        """POST a JSON payload."""
        try:
            async with self.session.post(url, json=payload, headers=headers) as response:
                text = await response.text(errors="replace")
                return HTTPResponse(status=response.status, reason=response.reason, text=text)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout.total}s", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}", url=url) from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
