"""tokenops-revoke - chunked payment token deletion with crash-safe result files."""

from .config import RunConfig
from .core import (
    ConfigurationError,
    DuplicateTokenError,
    FailureReason,
    InputFormatError,
    ProtocolError,
    ResponseMode,
    RevokeError,
    RunState,
    TokenStatus,
    TransportError,
)
from .io import ResultWriter, output_paths, read_tokens
from .models import FailureDetail, RemoteTokenResult, TokenOutcome, TokenRow
from .runtime import (
    Chunk,
    ChunkExecutor,
    ChunkPlanner,
    ChunkPolicy,
    Outcome,
    RequestDispatcher,
    ResultAggregator,
    ResultSnapshot,
    RunSummary,
    ShutdownPersister,
    partition,
)
from .utils import HTTPClient

__version__ = "0.1.0"

__all__ = [
    "RunConfig",
    # Core
    "ResponseMode",
    "TokenStatus",
    "FailureReason",
    "RunState",
    "RevokeError",
    "ConfigurationError",
    "InputFormatError",
    "TransportError",
    "ProtocolError",
    "DuplicateTokenError",
    # Models
    "TokenRow",
    "RemoteTokenResult",
    "TokenOutcome",
    "FailureDetail",
    # Runtime
    "Chunk",
    "ChunkPolicy",
    "ChunkPlanner",
    "ChunkExecutor",
    "Outcome",
    "RunSummary",
    "partition",
    "RequestDispatcher",
    "ResultAggregator",
    "ResultSnapshot",
    "ShutdownPersister",
    # I/O
    "read_tokens",
    "output_paths",
    "ResultWriter",
    "HTTPClient",
]
