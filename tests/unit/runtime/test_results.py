"""Unit tests for ResultAggregator."""

from __future__ import annotations

import pytest

from tokenops.revoke.core import DuplicateTokenError, FailureReason
from tokenops.revoke.models import FailureDetail, TokenOutcome
from tokenops.revoke.runtime.chunking import Chunk, Outcome
from tokenops.revoke.runtime.results import ResultAggregator, ResultSnapshot

REJECTED = FailureDetail(reason=FailureReason.REJECTED, status_code=200, body="not found")


def _outcome(index: int, successes: list[str], failures: list[str]) -> Outcome:
    results = [TokenOutcome.success(t) for t in successes]
    results += [TokenOutcome.failure(t, REJECTED) for t in failures]
    return Outcome(
        chunk=Chunk(tokens=tuple(r.token for r in results), chunk_index=index),
        results=tuple(results),
    )


class TestResultAggregator:
    """Test recording and snapshots."""

    def test_record_splits_completed_and_failed(self):
        aggregator = ResultAggregator()

        duplicates = aggregator.record(_outcome(0, ["a", "b", "c"], ["d", "e"]))

        snapshot = aggregator.snapshot()
        assert duplicates == []
        assert snapshot.completed == ("a", "b", "c")
        assert snapshot.failed == (("d", REJECTED), ("e", REJECTED))
        assert aggregator.completed_count == 3
        assert aggregator.failed_count == 2
        assert "a" in aggregator and "d" in aggregator and "z" not in aggregator

    def test_order_follows_recording_order(self):
        aggregator = ResultAggregator()
        aggregator.record(_outcome(0, ["b"], ["y"]))
        aggregator.record(_outcome(1, ["a"], ["x"]))

        snapshot = aggregator.snapshot()
        assert snapshot.completed == ("b", "a")
        assert snapshot.failed_tokens == ("y", "x")

    def test_duplicate_does_not_overwrite(self):
        """A token recorded twice keeps its first outcome."""
        aggregator = ResultAggregator()
        aggregator.record(_outcome(0, ["a"], []))

        duplicates = aggregator.record(_outcome(1, [], ["a"]))

        assert duplicates == ["a"]
        snapshot = aggregator.snapshot()
        assert snapshot.completed == ("a",)
        assert snapshot.failed == ()

    def test_never_in_both_lists(self):
        aggregator = ResultAggregator()
        aggregator.record(_outcome(0, ["a", "b"], ["c"]))
        aggregator.record(_outcome(1, ["c"], ["a", "d"]))

        snapshot = aggregator.snapshot()
        assert not set(snapshot.completed) & set(snapshot.failed_tokens)
        assert len(snapshot) == 4

    def test_strict_mode_raises(self):
        aggregator = ResultAggregator(strict=True)
        aggregator.record(_outcome(0, ["a"], []))

        with pytest.raises(DuplicateTokenError) as exc_info:
            aggregator.record(_outcome(1, ["a"], []))
        assert exc_info.value.token == "a"

    def test_snapshot_is_a_copy(self):
        aggregator = ResultAggregator()
        aggregator.record(_outcome(0, ["a"], []))
        snapshot = aggregator.snapshot()

        aggregator.record(_outcome(1, ["b"], []))

        assert snapshot.completed == ("a",)
        assert aggregator.snapshot().completed == ("a", "b")

    def test_empty_snapshot(self):
        assert ResultAggregator().snapshot() == ResultSnapshot()


class TestOutcome:
    """Test the one-result-per-token invariant."""

    def test_outcome_must_cover_chunk(self):
        chunk = Chunk(tokens=("a", "b"))
        with pytest.raises(ValueError):
            Outcome(chunk=chunk, results=(TokenOutcome.success("a"),))

    def test_outcome_must_follow_chunk_order(self):
        chunk = Chunk(tokens=("a", "b"))
        with pytest.raises(ValueError):
            Outcome(
                chunk=chunk,
                results=(TokenOutcome.success("b"), TokenOutcome.success("a")),
            )
