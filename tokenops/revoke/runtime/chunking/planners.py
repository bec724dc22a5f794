"""Chunk planning logic.

This module splits an ordered token sequence into fixed-size, gap-free,
non-overlapping chunks.
"""

from __future__ import annotations

from collections.abc import Sequence

from .definitions import Chunk, ChunkPolicy
from .telemetry import log_chunk_plan


def partition(tokens: Sequence[str], chunk_size: int) -> list[Chunk]:
    """Split tokens into ``ceil(len(tokens) / chunk_size)`` chunks.

    Concatenating the returned chunks in order reproduces ``tokens``. Only the
    last chunk may be shorter than ``chunk_size``.

    Args:
        tokens: Ordered tokens
        chunk_size: Maximum tokens per chunk, must be positive

    Returns:
        List of chunks (empty for empty input)

    Raises:
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [
        Chunk(tokens=tuple(tokens[begin : begin + chunk_size]), chunk_index=index)
        for index, begin in enumerate(range(0, len(tokens), chunk_size))
    ]


class ChunkPlanner:
    """Plans the chunks of a run.

    The planner applies the policy's chunk size and, when set, truncates the
    plan to ``max_chunks`` chunks.
    """

    def __init__(self, policy: ChunkPolicy) -> None:
        """Initialize chunk planner.

        Args:
            policy: Chunking policy for the run
        """
        self._policy = policy

    @property
    def policy(self) -> ChunkPolicy:
        return self._policy

    def plan(self, tokens: Sequence[str]) -> list[Chunk]:
        """Plan chunks for a token list.

        Args:
            tokens: Ordered tokens to dispatch

        Returns:
            List of chunks in dispatch order
        """
        chunks = partition(tokens, self._policy.chunk_size)
        truncated = False
        if self._policy.max_chunks is not None and len(chunks) > self._policy.max_chunks:
            chunks = chunks[: self._policy.max_chunks]
            truncated = True

        log_chunk_plan(
            total_tokens=len(tokens),
            total_chunks=len(chunks),
            chunk_size=self._policy.chunk_size,
            truncated=truncated,
        )
        return chunks
