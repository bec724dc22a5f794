"""Response adapters: turn a raw response into per-token outcomes.

One adapter per supported response shape. Both share the same error-status
handling; they differ only in how a successful response is read.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from ...core.enums import FailureReason, ResponseMode
from ...core.exceptions import ProtocolError
from ...models import FailureDetail, RemoteTokenResult, TokenOutcome
from ...utils.http import HTTPResponse
from ..chunking.definitions import Chunk

logger = logging.getLogger(__name__)

_RESULT_LIST = TypeAdapter(list[RemoteTokenResult])


class ResponseAdapter:
    """Base adapter: rejects error statuses, accepts everything else."""

    def parse(self, response: HTTPResponse, chunk: Chunk) -> tuple[TokenOutcome, ...]:
        """Classify every token of ``chunk``.

        Raises:
            ProtocolError: If the response status is an error or the body
                cannot be interpreted
        """
        if not response.ok:
            raise ProtocolError(
                f"Remote service returned HTTP {response.status}",
                status_code=response.status,
                status_text=response.reason,
                body=response.text,
            )
        return self.parse_success(response, chunk)

    def parse_success(self, response: HTTPResponse, chunk: Chunk) -> tuple[TokenOutcome, ...]:
        return tuple(TokenOutcome.success(token) for token in chunk.tokens)


class WholeChunkAdapter(ResponseAdapter):
    """A non-error response means every token in the chunk was deleted."""

    pass


class PerTokenAdapter(ResponseAdapter):
    """Reads an array of ``{status, key, message}`` records.

    Only tokens reported as ``success`` complete. Tokens reported as
    ``failure`` and tokens missing from the array both fail. Keys that were
    not part of the chunk are ignored; the first record for a key wins.
    """

    def parse_success(self, response: HTTPResponse, chunk: Chunk) -> tuple[TokenOutcome, ...]:
        try:
            records = _RESULT_LIST.validate_json(response.text)
        except ValidationError as e:
            raise ProtocolError(
                f"Expected an array of per-token results: {e.error_count()} validation error(s)",
                status_code=response.status,
                status_text=response.reason,
                body=response.text,
                reason=FailureReason.MALFORMED_RESPONSE,
            ) from e

        wanted = set(chunk.tokens)
        by_key: dict[str, RemoteTokenResult] = {}
        for record in records:
            if record.key not in wanted:
                logger.warning(
                    "unexpected_token: chunk %d response reported a token that was not sent",
                    chunk.chunk_index,
                    extra={"chunk_index": chunk.chunk_index, "token": record.key},
                )
                continue
            by_key.setdefault(record.key, record)

        results: list[TokenOutcome] = []
        for token in chunk.tokens:
            record = by_key.get(token)
            if record is None:
                detail = FailureDetail(
                    reason=FailureReason.OMITTED,
                    status_code=response.status,
                    status_text=response.reason,
                    body="token missing from response",
                )
                results.append(TokenOutcome.failure(token, detail))
            elif record.succeeded:
                results.append(TokenOutcome.success(token))
            else:
                detail = FailureDetail(
                    reason=FailureReason.REJECTED,
                    status_code=response.status,
                    status_text=response.reason,
                    body=record.message,
                )
                results.append(TokenOutcome.failure(token, detail))
        return tuple(results)


_ADAPTERS: dict[ResponseMode, type[ResponseAdapter]] = {
    ResponseMode.WHOLE_CHUNK: WholeChunkAdapter,
    ResponseMode.PER_TOKEN: PerTokenAdapter,
}


def adapter_for(mode: ResponseMode) -> ResponseAdapter:
    """Return the adapter for a response mode."""
    return _ADAPTERS[ResponseMode(mode)]()
