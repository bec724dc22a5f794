"""Chunking layer: partitioning and sequential dispatch.

Architecture:
    The chunking layer consists of:
    - definitions.py: Chunk structures (ChunkPolicy, Chunk, Outcome, RunSummary)
    - planners.py: Partitioning of the token list into chunks
    - executors.py: The sequential dispatch loop
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import Chunk, ChunkPolicy, Outcome, RunSummary
from .executors import ChunkDispatcher, ChunkExecutor
from .planners import ChunkPlanner, partition

__all__ = [
    "Chunk",
    "ChunkPolicy",
    "Outcome",
    "RunSummary",
    "ChunkPlanner",
    "ChunkExecutor",
    "ChunkDispatcher",
    "partition",
]
