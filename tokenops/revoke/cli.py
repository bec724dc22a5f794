"""Command-line entry point.

Usage:
    tokenops-revoke --csvPath tokens.csv --authToken <credential> [--chunkSize 10]
        [--timeMsBetweenRequests 0] [--response-mode per_token|whole_chunk]

Writes ``tokens.csv.completions`` and ``tokens.csv.failures`` when the run
ends, whether it finished, was interrupted or crashed. Feed the failures file
back in as ``--csvPath`` to resubmit the failed tokens.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from .config import RunConfig
from .core.enums import ResponseMode
from .core.exceptions import ConfigurationError
from .io import ResultWriter, read_tokens
from .runtime.chunking import Chunk, ChunkExecutor, ChunkPlanner, ChunkPolicy, RunSummary
from .runtime.rest import DEFAULT_ENDPOINT_URL, RequestDispatcher
from .runtime.results import ResultAggregator
from .runtime.shutdown import ShutdownPersister
from .utils.http import HTTPClient

logger = logging.getLogger(__name__)

AUTH_TOKEN_ENV = "TOKENOPS_AUTH_TOKEN"

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="tokenops-revoke",
        description="API Call Runner: delete payment tokens in chunks and record the outcome",
    )
    p.add_argument(
        "--csvPath", "--csv-path", dest="csv_path", help="CSV file listing payment_token values"
    )
    p.add_argument(
        "--authToken",
        "--auth-token",
        dest="auth_token",
        default=os.environ.get(AUTH_TOKEN_ENV),
        help=f"Credential sent as 'Basic <token>' (default: ${AUTH_TOKEN_ENV})",
    )
    p.add_argument(
        "--chunkSize", "--chunk-size", dest="chunk_size", type=int, default=10,
        help="Tokens per request",
    )
    p.add_argument(
        "--timeMsBetweenRequests",
        "--time-ms-between-requests",
        dest="time_ms_between_requests",
        type=int,
        default=0,
        help="Delay before each request, in milliseconds",
    )
    p.add_argument("--endpoint-url", dest="endpoint_url", default=DEFAULT_ENDPOINT_URL)
    p.add_argument(
        "--response-mode",
        dest="response_mode",
        choices=[m.value for m in ResponseMode],
        default=ResponseMode.PER_TOKEN.value,
        help="per_token: read per-token results; whole_chunk: HTTP status decides for the chunk",
    )
    p.add_argument(
        "--request-timeout",
        dest="request_timeout",
        type=float,
        default=30.0,
        help="Per-request timeout in seconds",
    )
    p.add_argument(
        "--max-chunks", dest="max_chunks", type=int, default=None, help="Stop after N chunks"
    )
    p.add_argument(
        "--no-diagnostics",
        dest="include_diagnostics",
        action="store_false",
        help="Write only payment_token in the failures file",
    )
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load(args: argparse.Namespace) -> tuple[RunConfig, list[Chunk]]:
    """Validate configuration, read the input and plan chunks.

    Nothing is sent and no file is written before this succeeds.

    Raises:
        ConfigurationError: On any invalid option or unusable input file
    """
    if not args.csv_path:
        raise ConfigurationError("--csvPath is required")
    if not args.auth_token:
        raise ConfigurationError(f"--authToken is required (or set {AUTH_TOKEN_ENV})")
    config = RunConfig.from_args(args)
    tokens = read_tokens(config.csv_path)
    policy = ChunkPolicy(chunk_size=config.chunk_size, max_chunks=config.max_chunks)
    return config, ChunkPlanner(policy).plan(tokens)


async def run(
    config: RunConfig, chunks: Sequence[Chunk], aggregator: ResultAggregator
) -> RunSummary:
    """Dispatch every chunk over one HTTP session."""
    async with HTTPClient(timeout=config.request_timeout_seconds) as client:
        dispatcher = RequestDispatcher(
            client,
            auth_token=config.auth_token,
            endpoint_url=config.endpoint_url,
            mode=config.response_mode,
            delay_ms=config.time_ms_between_requests,
        )
        return await ChunkExecutor(dispatcher, aggregator).execute(chunks)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config, chunks = load(args)
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_CONFIG

    aggregator = ResultAggregator()
    writer = ResultWriter(config.csv_path, include_diagnostics=config.include_diagnostics)
    persister = ShutdownPersister(aggregator, writer)
    persister.install()
    try:
        summary = asyncio.run(run(config, chunks, aggregator))
        persister.complete()
    except Exception as e:
        persister.fault(e)
        raise
    finally:
        persister.uninstall()

    return EXIT_FAILURES if summary.tokens_failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
