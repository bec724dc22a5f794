"""Run configuration validated at the command-line boundary."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core.enums import ResponseMode
from .core.exceptions import ConfigurationError
from .runtime.rest.dispatcher import DEFAULT_ENDPOINT_URL


class RunConfig(BaseModel):
    """Everything a run needs, checked before any request is sent."""

    csv_path: Path
    auth_token: str = Field(..., min_length=1)
    chunk_size: int = Field(default=10, gt=0)
    time_ms_between_requests: int = Field(default=0, ge=0)
    endpoint_url: str = Field(default=DEFAULT_ENDPOINT_URL, min_length=1)
    response_mode: ResponseMode = ResponseMode.PER_TOKEN
    request_timeout_seconds: float | None = Field(default=30.0, gt=0)
    include_diagnostics: bool = True
    max_chunks: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @classmethod
    def from_args(cls, args: Namespace) -> RunConfig:
        """Build a config from parsed arguments.

        Raises:
            ConfigurationError: If a required option is missing or a value is
                out of range
        """
        values = {
            "csv_path": args.csv_path,
            "auth_token": args.auth_token,
            "chunk_size": args.chunk_size,
            "time_ms_between_requests": args.time_ms_between_requests,
            "endpoint_url": args.endpoint_url,
            "response_mode": args.response_mode,
            "request_timeout_seconds": args.request_timeout,
            "include_diagnostics": args.include_diagnostics,
            "max_chunks": args.max_chunks,
        }
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e
