"""Result aggregation across dispatched chunks.

The aggregator is the single owner of the run's results. Only the dispatch
loop writes to it (through ``record``) and only the shutdown persister reads
from it (through ``snapshot``). A parallel dispatcher would have to guard
``record`` with a lock so the duplicate check stays atomic per token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.exceptions import DuplicateTokenError
from ..models import FailureDetail
from .chunking.definitions import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultSnapshot:
    """Read-only copy of the results recorded so far.

    Attributes:
        completed: Completed tokens in recording order
        failed: Failed tokens with their detail, in recording order
    """

    completed: tuple[str, ...] = ()
    failed: tuple[tuple[str, FailureDetail], ...] = ()

    @property
    def failed_tokens(self) -> tuple[str, ...]:
        return tuple(token for token, _ in self.failed)

    def __len__(self) -> int:
        return len(self.completed) + len(self.failed)


class ResultAggregator:
    """Accumulates completed and failed tokens for one run.

    A token lands in exactly one of the two mappings. Recording a token that
    is already present never overwrites the first outcome: the token is
    reported back as a duplicate, or ``DuplicateTokenError`` is raised when
    the aggregator is strict.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self._strict = strict
        self._completed: dict[str, None] = {}
        self._failed: dict[str, FailureDetail] = {}

    def record(self, outcome: Outcome) -> list[str]:
        """Record the outcome of one chunk.

        Args:
            outcome: Outcome returned by the dispatcher

        Returns:
            Tokens that were skipped because they were already recorded

        Raises:
            DuplicateTokenError: In strict mode, on the first duplicate
        """
        duplicates: list[str] = []
        for result in outcome.results:
            token = result.token
            if token in self:
                if self._strict:
                    raise DuplicateTokenError(f"Token already recorded: {token}", token=token)
                logger.warning(
                    "duplicate_token: chunk %d token already recorded, keeping first outcome",
                    outcome.chunk.chunk_index,
                    extra={"chunk_index": outcome.chunk.chunk_index, "token": token},
                )
                duplicates.append(token)
                continue

            if result.succeeded:
                self._completed[token] = None
            else:
                # TokenOutcome guarantees a detail on every failure.
                self._failed[token] = result.detail
        return duplicates

    def snapshot(self) -> ResultSnapshot:
        """Return a copy of the current results."""
        return ResultSnapshot(
            completed=tuple(self._completed),
            failed=tuple(self._failed.items()),
        )

    @property
    def completed_count(self) -> int:
        return len(self._completed)

    @property
    def failed_count(self) -> int:
        return len(self._failed)

    def __contains__(self, token: object) -> bool:
        return token in self._completed or token in self._failed

    def __len__(self) -> int:
        return len(self._completed) + len(self._failed)
