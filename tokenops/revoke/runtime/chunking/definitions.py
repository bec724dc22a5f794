"""Chunk definitions and policy structures.

This module defines the data structures that describe how a token list is
split into chunks and what dispatching one chunk produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...core.exceptions import ConfigurationError
from ...models import TokenOutcome


@dataclass(frozen=True)
class ChunkPolicy:
    """Chunking policy for a run.

    Attributes:
        chunk_size: Maximum number of tokens per request
        max_chunks: Maximum number of chunks to dispatch (None = unlimited)
    """

    chunk_size: int = 10
    max_chunks: int | None = None

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_chunks is not None and self.max_chunks <= 0:
            raise ConfigurationError(f"max_chunks must be positive, got {self.max_chunks}")


@dataclass(frozen=True)
class Chunk:
    """An ordered, non-empty group of tokens dispatched in one request.

    Attributes:
        tokens: Tokens in input order
        chunk_index: Zero-based index of this chunk in the plan
    """

    tokens: tuple[str, ...]
    chunk_index: int = 0

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError("Chunk must contain at least one token")

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class Outcome:
    """Result of dispatching one chunk.

    Attributes:
        chunk: The dispatched chunk
        results: One outcome per chunk token, in chunk order
    """

    chunk: Chunk
    results: tuple[TokenOutcome, ...]

    def __post_init__(self) -> None:
        if tuple(r.token for r in self.results) != self.chunk.tokens:
            raise ValueError(
                f"Outcome for chunk {self.chunk.chunk_index} must classify every token exactly once"
            )

    @property
    def completed(self) -> list[TokenOutcome]:
        return [r for r in self.results if r.succeeded]

    @property
    def failed(self) -> list[TokenOutcome]:
        return [r for r in self.results if not r.succeeded]


@dataclass
class RunSummary:
    """Counters for a dispatch loop.

    Attributes:
        chunks_planned: Number of chunks handed to the executor
        chunks_dispatched: Number of chunks whose outcome was recorded
        tokens_completed: Tokens recorded as completed
        tokens_failed: Tokens recorded as failed
        duplicates: Tokens skipped because they were already recorded
        elapsed_ms: Wall-clock duration of the loop
    """

    chunks_planned: int
    chunks_dispatched: int = 0
    tokens_completed: int = 0
    tokens_failed: int = 0
    duplicates: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
