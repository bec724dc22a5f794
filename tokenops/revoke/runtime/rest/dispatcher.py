"""Request dispatcher: one paced POST per chunk."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ...core.enums import FailureReason, ResponseMode
from ...core.exceptions import ProtocolError, TransportError
from ...models import FailureDetail, TokenOutcome
from ...utils.http import HTTPClient
from ..chunking.definitions import Chunk, Outcome
from ..chunking.telemetry import log_chunk_dispatch, log_chunk_error, log_token_failure
from .adapters import adapter_for

DEFAULT_ENDPOINT_URL = "https://api.nexiopay.com/pay/v3/deleteToken"


class RequestDispatcher:
    """Sends one deletion request per chunk and classifies the response.

    Every call sleeps ``delay_ms`` before sending, whether or not the previous
    chunk succeeded, so consecutive dispatches start at least ``delay_ms``
    apart. Transport and protocol errors are folded into the returned
    Outcome; a chunk is attempted exactly once.
    """

    def __init__(
        self,
        client: HTTPClient,
        *,
        auth_token: str,
        endpoint_url: str = DEFAULT_ENDPOINT_URL,
        mode: ResponseMode = ResponseMode.PER_TOKEN,
        delay_ms: int = 0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize dispatcher.

        Args:
            client: HTTP client used for every request
            auth_token: Static credential sent as ``Basic <auth_token>``
            endpoint_url: Deletion endpoint
            mode: How responses are interpreted
            delay_ms: Pause before each request, in milliseconds
            sleep: Awaitable sleep, replaceable in tests
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        self._client = client
        self._auth_token = auth_token
        self._endpoint_url = endpoint_url
        self._mode = ResponseMode(mode)
        self._adapter = adapter_for(self._mode)
        self._delay_ms = delay_ms
        self._sleep = sleep

    @property
    def mode(self) -> ResponseMode:
        return self._mode

    def build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._auth_token}",
        }

    def build_body(self, chunk: Chunk) -> dict[str, list[str]]:
        return {"tokens": list(chunk.tokens)}

    async def dispatch(self, chunk: Chunk) -> Outcome:
        """Pace, send and classify one chunk.

        Args:
            chunk: Chunk to dispatch

        Returns:
            Outcome classifying every token of the chunk
        """
        await self._sleep(self._delay_ms / 1000.0)
        log_chunk_dispatch(
            chunk_index=chunk.chunk_index, token_count=len(chunk), url=self._endpoint_url
        )

        try:
            response = await self._client.post_json(
                self._endpoint_url, self.build_body(chunk), headers=self.build_headers()
            )
            results = self._adapter.parse(response, chunk)
        except TransportError as e:
            detail = FailureDetail(reason=FailureReason.TRANSPORT, body=str(e))
            results = self._fail_all(chunk, detail)
        except ProtocolError as e:
            detail = FailureDetail(
                reason=e.reason,
                status_code=e.status_code,
                status_text=e.status_text,
                body=e.body,
            )
            results = self._fail_all(chunk, detail)
        else:
            for result in results:
                if result.detail is not None:
                    log_token_failure(
                        chunk_index=chunk.chunk_index, token=result.token, detail=result.detail
                    )

        return Outcome(chunk=chunk, results=results)

    def _fail_all(self, chunk: Chunk, detail: FailureDetail) -> tuple[TokenOutcome, ...]:
        log_chunk_error(chunk_index=chunk.chunk_index, detail=detail, token_count=len(chunk))
        return tuple(TokenOutcome.failure(token, detail) for token in chunk.tokens)
