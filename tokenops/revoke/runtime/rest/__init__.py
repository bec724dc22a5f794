"""REST dispatch: request building and response classification."""

from .adapters import PerTokenAdapter, ResponseAdapter, WholeChunkAdapter, adapter_for
from .dispatcher import DEFAULT_ENDPOINT_URL, RequestDispatcher

__all__ = [
    "RequestDispatcher",
    "DEFAULT_ENDPOINT_URL",
    "ResponseAdapter",
    "WholeChunkAdapter",
    "PerTokenAdapter",
    "adapter_for",
]
