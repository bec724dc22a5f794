"""Structured logging for chunk dispatch.

This module provides telemetry hooks for the dispatch loop, emitting
structured logs. Each record carries an event name as the message prefix and
the event fields in ``extra`` so log handlers can pick them up.
"""

from __future__ import annotations

import logging

from ...core.enums import RunState
from ...models import FailureDetail
from .definitions import RunSummary

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    total_tokens: int,
    total_chunks: int,
    chunk_size: int,
    truncated: bool = False,
) -> None:
    """Log chunk plan creation.

    Args:
        total_tokens: Number of input tokens
        total_chunks: Number of chunks planned
        chunk_size: Maximum tokens per chunk
        truncated: Whether max_chunks cut the plan short
    """
    logger.info(
        "chunk_plan_created: %d tokens in %d chunks of up to %d",
        total_tokens,
        total_chunks,
        chunk_size,
        extra={
            "total_tokens": total_tokens,
            "total_chunks": total_chunks,
            "chunk_size": chunk_size,
            "truncated": truncated,
        },
    )


def log_chunk_dispatch(*, chunk_index: int, token_count: int, url: str) -> None:
    """Log the start of a request for one chunk."""
    logger.info(
        "chunk_dispatch: chunk %d (%d tokens) -> %s",
        chunk_index,
        token_count,
        url,
        extra={"chunk_index": chunk_index, "token_count": token_count, "url": url},
    )


def log_chunk_completed(
    *,
    chunk_index: int,
    completed: int,
    failed: int,
    latency_ms: float | None = None,
) -> None:
    """Log the recorded outcome of a single chunk.

    Args:
        chunk_index: Zero-based index of the chunk
        completed: Tokens marked completed
        failed: Tokens marked failed
        latency_ms: Dispatch latency in milliseconds (optional)
    """
    logger.info(
        "chunk_completed: chunk %d completed=%d failed=%d",
        chunk_index,
        completed,
        failed,
        extra={
            "chunk_index": chunk_index,
            "completed": completed,
            "failed": failed,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_error(*, chunk_index: int, detail: FailureDetail, token_count: int) -> None:
    """Log a chunk-level failure with the diagnostic detail kept for audit."""
    logger.error(
        "chunk_error: chunk %d (%d tokens) reason=%s status=%s status_text=%s body=%s",
        chunk_index,
        token_count,
        detail.reason.value,
        detail.status_code,
        detail.status_text,
        detail.body,
        extra={
            "chunk_index": chunk_index,
            "token_count": token_count,
            "reason": detail.reason.value,
            "status_code": detail.status_code,
            "status_text": detail.status_text,
            "body": detail.body,
        },
    )


def log_run_complete(*, summary: RunSummary) -> None:
    """Log completion of the dispatch loop."""
    logger.info(
        "run_complete: %d/%d chunks, completed=%d failed=%d duplicates=%d",
        summary.chunks_dispatched,
        summary.chunks_planned,
        summary.tokens_completed,
        summary.tokens_failed,
        len(summary.duplicates),
        extra={
            "chunks_planned": summary.chunks_planned,
            "chunks_dispatched": summary.chunks_dispatched,
            "tokens_completed": summary.tokens_completed,
            "tokens_failed": summary.tokens_failed,
            "duplicates": len(summary.duplicates),
            "elapsed_ms": summary.elapsed_ms,
        },
    )


def log_flush(*, state: RunState, completed: int, failed: int, paths: list[str]) -> None:
    """Log that results were written to disk."""
    logger.info(
        "results_flushed: state=%s completed=%d failed=%d -> %s",
        state.value,
        completed,
        failed,
        ", ".join(paths),
        extra={"state": state.value, "completed": completed, "failed": failed, "paths": paths},
    )


def log_token_failure(*, chunk_index: int, token: str, detail: FailureDetail) -> None:
    """Log a single token the service did not delete."""
    logger.warning(
        "token_failed: chunk %d reason=%s message=%s",
        chunk_index,
        detail.reason.value,
        detail.body,
        extra={
            "chunk_index": chunk_index,
            "token": token,
            "reason": detail.reason.value,
            "status_code": detail.status_code,
            "body": detail.body,
        },
    )
