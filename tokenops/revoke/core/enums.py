"""Core enumerations shared by the dispatch runtime.

Architecture:
    String enums so values can be passed on the command line and written
    to the failures file without extra conversion.

Key Types:
    - ResponseMode: How a remote response is turned into per-token outcomes
    - TokenStatus: Success/failure of a single token
    - FailureReason: Where a failure originated
    - RunState: Lifecycle of a single run, from dispatch to flush
"""

from enum import Enum


class ResponseMode(str, Enum):
    """How the dispatcher interprets a response.

    WHOLE_CHUNK trusts the HTTP status alone: every token in the chunk shares
    the chunk's fate. PER_TOKEN expects an array of per-token records and
    only marks tokens the service reported as ``success`` as completed.
    """

    WHOLE_CHUNK = "whole_chunk"
    PER_TOKEN = "per_token"


class TokenStatus(str, Enum):
    """Outcome of a single token."""

    SUCCESS = "success"
    FAILURE = "failure"


class FailureReason(str, Enum):
    """Origin of a token failure, written to the failures file."""

    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    REJECTED = "rejected"
    OMITTED = "omitted"
    MALFORMED_RESPONSE = "malformed_response"


class RunState(str, Enum):
    """Lifecycle of a run.

    RUNNING moves to one of COMPLETED, INTERRUPTED or FAULTED, all of which
    converge on FLUSHED once results are persisted, then TERMINATED.
    """

    RUNNING = "running"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    FAULTED = "faulted"
    FLUSHED = "flushed"
    TERMINATED = "terminated"
