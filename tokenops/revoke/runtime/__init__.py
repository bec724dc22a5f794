"""Runtime orchestration components."""

from .chunking import (
    Chunk,
    ChunkExecutor,
    ChunkPlanner,
    ChunkPolicy,
    Outcome,
    RunSummary,
    partition,
)
from .rest import DEFAULT_ENDPOINT_URL, RequestDispatcher
from .results import ResultAggregator, ResultSnapshot
from .shutdown import ShutdownPersister

__all__ = [
    "Chunk",
    "ChunkPolicy",
    "ChunkPlanner",
    "ChunkExecutor",
    "Outcome",
    "RunSummary",
    "partition",
    "RequestDispatcher",
    "DEFAULT_ENDPOINT_URL",
    "ResultAggregator",
    "ResultSnapshot",
    "ShutdownPersister",
]
