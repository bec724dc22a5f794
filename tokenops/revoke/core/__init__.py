"""Core components."""

from .enums import FailureReason, ResponseMode, RunState, TokenStatus
from .exceptions import (
    ConfigurationError,
    DuplicateTokenError,
    InputFormatError,
    ProtocolError,
    RevokeError,
    TransportError,
)

__all__ = [
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
]
