"""Data models for tokens and their outcomes.

Architecture:
    Pydantic v2 models validated at the parse boundary: CSV rows and remote
    response records are rejected here instead of producing undefined fields
    further down. All models are frozen.

Model Categories:
    - Input: TokenRow
    - Remote: RemoteTokenResult
    - Outcomes: TokenOutcome, FailureDetail
"""

from .outcome import FailureDetail, TokenOutcome
from .token import RemoteTokenResult, TokenRow

__all__ = [
    "TokenRow",
    "RemoteTokenResult",
    "TokenOutcome",
    "FailureDetail",
]
