"""Chunk execution logic: the dispatch loop.

This module provides the ChunkExecutor class that dispatches planned chunks
one at a time and records each outcome before the next dispatch starts.
"""

from __future__ import annotations

from collections.abc import Sequence
from time import perf_counter
from typing import TYPE_CHECKING, Protocol

from .definitions import Chunk, Outcome, RunSummary
from .telemetry import log_chunk_completed, log_run_complete

if TYPE_CHECKING:
    from ..results import ResultAggregator


class ChunkDispatcher(Protocol):
    async def dispatch(self, chunk: Chunk) -> Outcome: ...


class ChunkExecutor:
    """Executes chunk plans strictly sequentially.

    Dispatch is never concurrent: the remote service enforces rate limits,
    and a single in-flight request gives a total order over outcomes that
    matches chunk order. Dispatcher failures are already folded into
    outcomes, so anything raised here is a process-level fault.
    """

    def __init__(self, dispatcher: ChunkDispatcher, aggregator: ResultAggregator) -> None:
        """Initialize chunk executor.

        Args:
            dispatcher: Sends one chunk and returns its outcome
            aggregator: Receives every outcome in dispatch order
        """
        self._dispatcher = dispatcher
        self._aggregator = aggregator

    async def execute(self, chunks: Sequence[Chunk]) -> RunSummary:
        """Dispatch every chunk and record its outcome.

        Args:
            chunks: Chunks in dispatch order

        Returns:
            RunSummary with counters for the loop
        """
        summary = RunSummary(chunks_planned=len(chunks))
        loop_start = perf_counter()

        for chunk in chunks:
            chunk_start = perf_counter()
            outcome = await self._dispatcher.dispatch(chunk)
            latency_ms = (perf_counter() - chunk_start) * 1000.0

            completed_before = self._aggregator.completed_count
            failed_before = self._aggregator.failed_count
            duplicates = self._aggregator.record(outcome)
            summary.chunks_dispatched += 1
            summary.duplicates.extend(duplicates)

            completed = self._aggregator.completed_count - completed_before
            failed = self._aggregator.failed_count - failed_before
            summary.tokens_completed += completed
            summary.tokens_failed += failed

            log_chunk_completed(
                chunk_index=chunk.chunk_index,
                completed=completed,
                failed=failed,
                latency_ms=latency_ms,
            )

        summary.elapsed_ms = (perf_counter() - loop_start) * 1000.0
        log_run_complete(summary=summary)
        return summary
