"""Token data models."""

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import TokenStatus


class TokenRow(BaseModel):
    """One row of the input token file."""

    payment_token: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")


class RemoteTokenResult(BaseModel):
    """One element of a per-token response array.

    The service reports ``{"status": ..., "key": <token>, "message": <text>}``
    for each token it handled. Only ``"success"`` means the token was deleted;
    any other status is a rejection.
    """

    status: str
    key: str = Field(..., min_length=1)
    message: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def succeeded(self) -> bool:
        return self.status == TokenStatus.SUCCESS.value
