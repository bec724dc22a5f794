"""End-to-end runs against a local deletion endpoint."""

from __future__ import annotations

import time

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from tests.helpers import write_token_csv
from tokenops.revoke import cli
from tokenops.revoke.io import ResultWriter, read_tokens
from tokenops.revoke.runtime.results import ResultAggregator
from tokenops.revoke.runtime.shutdown import ShutdownPersister

pytestmark = pytest.mark.integration


class DeletionEndpoint:
    """Scripted endpoint: one handler per request, in order."""

    def __init__(self) -> None:
        self.url = ""
        self.replies: list = []
        self.requests: list[dict] = []

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(
            {
                "tokens": body["tokens"],
                "auth": request.headers.get("Authorization"),
                "at": time.monotonic(),
            }
        )
        reply = self.replies.pop(0)
        return reply(body["tokens"])


@pytest_asyncio.fixture
async def endpoint():
    deletion = DeletionEndpoint()
    app = web.Application()
    app.router.add_post("/pay/v3/deleteToken", deletion.handle)
    server = test_utils.TestServer(app)
    await server.start_server()
    deletion.url = str(server.make_url("/pay/v3/deleteToken"))
    yield deletion
    await server.close()


def ok(tokens):
    return web.json_response({"deleted": len(tokens)})


def unavailable(tokens):
    return web.Response(status=503, reason="Service Unavailable", text="maintenance")


def per_token(failing):
    def reply(tokens):
        return web.json_response(
            [
                {
                    "status": "failure" if t in failing else "success",
                    "key": t,
                    "message": "not found" if t in failing else "deleted",
                }
                for t in tokens
            ]
        )

    return reply


async def run_to_files(csv_path, endpoint, *extra):
    args = cli.parse_args(
        ["--csvPath", str(csv_path), "--authToken", "secret", "--endpoint-url", endpoint.url]
        + list(extra)
    )
    config, chunks = cli.load(args)
    aggregator = ResultAggregator()
    writer = ResultWriter(config.csv_path, include_diagnostics=config.include_diagnostics)
    summary = await cli.run(config, chunks, aggregator)
    ShutdownPersister(aggregator, writer, exit_on_flush=False).complete()
    return summary, writer.paths


class TestScenarios:
    """Concrete runs covering both response modes."""

    @pytest.mark.asyncio
    async def test_whole_chunk_failed_chunk_lands_in_failures(self, tmp_path, endpoint):
        tokens = [f"t{i}" for i in range(1, 26)]
        csv_path = tmp_path / "tokens.csv"
        write_token_csv(csv_path, tokens)
        endpoint.replies = [ok, unavailable, ok]

        summary, paths = await run_to_files(
            csv_path, endpoint, "--chunkSize", "10", "--response-mode", "whole_chunk"
        )

        assert [len(r["tokens"]) for r in endpoint.requests] == [10, 10, 5]
        assert {r["auth"] for r in endpoint.requests} == {"Basic secret"}
        assert read_tokens(paths.completions) == tokens[:10] + tokens[20:]
        assert read_tokens(paths.failures) == tokens[10:20]
        assert paths.failures.read_text().splitlines()[1] == (
            "t11,http_status,503,Service Unavailable,maintenance"
        )
        assert summary.tokens_completed == 15
        assert summary.tokens_failed == 10

    @pytest.mark.asyncio
    async def test_per_token_partial_chunk(self, tmp_path, endpoint):
        tokens = [f"t{i}" for i in range(1, 16)]
        csv_path = tmp_path / "tokens.csv"
        write_token_csv(csv_path, tokens)
        endpoint.replies = [per_token(set()), per_token(set()), per_token({"t12", "t14"})]

        _, paths = await run_to_files(csv_path, endpoint, "--chunkSize", "5")

        assert [len(r["tokens"]) for r in endpoint.requests] == [5, 5, 5]
        assert read_tokens(paths.completions) == [t for t in tokens if t not in ("t12", "t14")]
        assert read_tokens(paths.failures) == ["t12", "t14"]

    @pytest.mark.asyncio
    async def test_failures_file_resubmits_failed_tokens(self, tmp_path, endpoint):
        csv_path = tmp_path / "tokens.csv"
        write_token_csv(csv_path, ["a", "b", "c"])
        endpoint.replies = [per_token({"b"}), per_token(set())]

        await run_to_files(csv_path, endpoint)
        retry_summary, retry_paths = await run_to_files(tmp_path / "tokens.csv.failures", endpoint)

        assert endpoint.requests[1]["tokens"] == ["b"]
        assert retry_summary.tokens_failed == 0
        assert read_tokens(retry_paths.completions) == ["b"]

    @pytest.mark.asyncio
    async def test_requests_are_paced(self, tmp_path, endpoint):
        csv_path = tmp_path / "tokens.csv"
        write_token_csv(csv_path, ["a", "b", "c"])
        endpoint.replies = [ok, ok, ok]

        await run_to_files(
            csv_path,
            endpoint,
            "--chunkSize",
            "1",
            "--timeMsBetweenRequests",
            "50",
            "--response-mode",
            "whole_chunk",
        )

        arrivals = [r["at"] for r in endpoint.requests]
        gaps = [later - earlier for earlier, later in zip(arrivals, arrivals[1:])]
        assert all(gap >= 0.05 - 1e-3 for gap in gaps)

    @pytest.mark.asyncio
    async def test_unreachable_endpoint_fails_every_token(self, tmp_path, unused_tcp_port):
        csv_path = tmp_path / "tokens.csv"
        write_token_csv(csv_path, ["a", "b"])
        args = cli.parse_args(
            [
                "--csvPath",
                str(csv_path),
                "--authToken",
                "secret",
                "--endpoint-url",
                f"http://127.0.0.1:{unused_tcp_port}/pay/v3/deleteToken",
                "--request-timeout",
                "2",
            ]
        )
        config, chunks = cli.load(args)
        aggregator = ResultAggregator()

        summary = await cli.run(config, chunks, aggregator)

        assert summary.tokens_failed == 2
        assert [detail.reason.value for _, detail in aggregator.snapshot().failed] == [
            "transport",
            "transport",
        ]
