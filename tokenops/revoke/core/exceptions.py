"""Custom exception hierarchy."""

from __future__ import annotations

from .enums import FailureReason


class RevokeError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(RevokeError):
    """Invalid or missing configuration.

    Always raised before any request is sent; the CLI exits non-zero and
    writes no output files.
    """

    pass


class InputFormatError(ConfigurationError):
    """Input file is not a usable token list."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class TransportError(RevokeError):
    """No response was obtained from the remote service."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ProtocolError(RevokeError):
    """Remote service answered with an error status or an unusable body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        body: str | None = None,
        reason: FailureReason = FailureReason.HTTP_STATUS,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        self.reason = reason


class DuplicateTokenError(RevokeError):
    """Token was recorded twice in the same run."""

    def __init__(self, message: str, token: str) -> None:
        super().__init__(message)
        self.token = token
