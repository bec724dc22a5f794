"""Test helpers shared across test modules."""

from __future__ import annotations

import json
from typing import Any

from tokenops.revoke.utils.http import HTTPResponse


class FakeClient:
    """Stands in for HTTPClient: replays one scripted reply per request."""

    def __init__(self, replies: list[HTTPResponse | Exception] | None = None) -> None:
        self.replies = list(replies or [])
        self.requests: list[dict[str, Any]] = []

    async def post_json(
        self, url: str, payload: Any, headers: dict[str, str] | None = None
    ) -> HTTPResponse:
        self.requests.append({"url": url, "payload": payload, "headers": headers})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def json_response(body: Any, status: int = 200, reason: str = "OK") -> HTTPResponse:
    return HTTPResponse(status=status, reason=reason, text=json.dumps(body))


def per_token_body(successes: list[str], failures: list[str]) -> list[dict[str, str]]:
    records = [{"status": "success", "key": t, "message": "deleted"} for t in successes]
    records += [{"status": "failure", "key": t, "message": "not found"} for t in failures]
    return records


def write_token_csv(path, tokens: list[str], extra_column: bool = False) -> None:
    lines = ["payment_token,customer" if extra_column else "payment_token"]
    for i, token in enumerate(tokens):
        lines.append(f"{token},cust-{i}" if extra_column else token)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
