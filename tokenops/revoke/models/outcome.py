"""Per-token outcome models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import FailureReason, TokenStatus


class FailureDetail(BaseModel):
    """Diagnostic detail attached to a failed token."""

    reason: FailureReason
    status_code: int | None = None
    status_text: str | None = None
    body: str | None = None

    model_config = ConfigDict(frozen=True)


class TokenOutcome(BaseModel):
    """Classification of a single token after its chunk was dispatched."""

    token: str = Field(..., min_length=1)
    status: TokenStatus
    detail: FailureDetail | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_detail(self) -> TokenOutcome:
        """Failures carry a detail, successes never do."""
        if self.status is TokenStatus.FAILURE and self.detail is None:
            raise ValueError("failed token requires a failure detail")
        if self.status is TokenStatus.SUCCESS and self.detail is not None:
            raise ValueError("successful token cannot carry a failure detail")
        return self

    @property
    def succeeded(self) -> bool:
        return self.status is TokenStatus.SUCCESS

    @classmethod
    def success(cls, token: str) -> TokenOutcome:
        return cls(token=token, status=TokenStatus.SUCCESS)

    @classmethod
    def failure(cls, token: str, detail: FailureDetail) -> TokenOutcome:
        return cls(token=token, status=TokenStatus.FAILURE, detail=detail)
