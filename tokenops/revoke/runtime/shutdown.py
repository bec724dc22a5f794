"""Crash-safe persistence of run results.

The ShutdownPersister is the single shutdown hook of a run. Normal
completion, operator interrupt (SIGINT), external termination (SIGTERM),
uncaught faults and interpreter exit all funnel into one ``flush`` guarded by
a one-shot flag, so results are written at most once per process.

Tokens of a chunk whose request is in flight when a signal arrives are not in
the aggregator yet; they appear in neither output file.
"""

from __future__ import annotations

import atexit
import logging
import signal
import sys
import threading
from collections.abc import Iterable
from os import PathLike
from types import FrameType, TracebackType
from typing import Protocol

from ..core.enums import RunState
from .chunking.telemetry import log_flush
from .results import ResultAggregator, ResultSnapshot

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class ResultSink(Protocol):
    def write(self, snapshot: ResultSnapshot) -> Iterable[str | PathLike[str]]: ...


class ShutdownPersister:
    """Flushes an aggregator to durable storage exactly once.

    State machine: RUNNING moves to COMPLETED, INTERRUPTED or FAULTED (the
    first trigger wins), then to FLUSHED once the sink has written, and to
    TERMINATED when the persister ends the process.
    """

    def __init__(
        self,
        aggregator: ResultAggregator,
        sink: ResultSink,
        *,
        exit_on_flush: bool = True,
        signals: Iterable[signal.Signals] = DEFAULT_SIGNALS,
    ) -> None:
        """Initialize persister.

        Args:
            aggregator: Source of the results to persist
            sink: Writes a snapshot to disk
            exit_on_flush: Exit the process after a signal-triggered flush
            signals: Signals that trigger a flush
        """
        self._aggregator = aggregator
        self._sink = sink
        self._exit_on_flush = exit_on_flush
        self._signals = tuple(signals)

        self._lock = threading.RLock()
        self._state = RunState.RUNNING
        self._trigger: RunState | None = None
        self._flushed = False
        self._flushing = False
        self._pending_signal: int | None = None

        self._installed = False
        self._previous_handlers: dict[int, object] = {}
        self._previous_excepthook = None

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def trigger(self) -> RunState | None:
        """State that led to the flush (COMPLETED, INTERRUPTED or FAULTED)."""
        return self._trigger

    @property
    def flushed(self) -> bool:
        return self._flushed

    def install(self) -> None:
        """Register the atexit hook, the excepthook and the signal handlers."""
        if self._installed:
            return
        atexit.register(self._on_exit)
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._on_fault

        if threading.current_thread() is threading.main_thread():
            for sig in self._signals:
                self._previous_handlers[sig] = signal.signal(sig, self._on_signal)
        else:
            logger.warning("Signal handlers can only be installed from the main thread")
        self._installed = True

    def uninstall(self) -> None:
        """Restore whatever was installed before ``install``."""
        if not self._installed:
            return
        atexit.unregister(self._on_exit)
        if sys.excepthook == self._on_fault:
            sys.excepthook = self._previous_excepthook
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()
        self._installed = False

    def complete(self) -> bool:
        """Mark the dispatch loop as finished and flush."""
        self._enter(RunState.COMPLETED)
        return self.flush()

    def interrupt(self, signum: int | None = None) -> bool:
        """Mark the run as interrupted and flush."""
        self._enter(RunState.INTERRUPTED)
        if signum is not None:
            logger.warning("Received %s, writing results collected so far", _signal_name(signum))
        return self.flush()

    def fault(self, exc: BaseException) -> bool:
        """Mark the run as faulted and flush."""
        self._enter(RunState.FAULTED)
        logger.critical(
            "Uncaught %s: %s, writing results collected so far", type(exc).__name__, exc
        )
        return self.flush()

    def flush(self) -> bool:
        """Write the current snapshot unless it was already written.

        Returns:
            True if this call wrote the files, False if a previous call did
        """
        with self._lock:
            if self._flushed:
                return False
            # _flushing before _flushed: _on_signal defers only while _flushing is set.
            self._flushing = True
            self._flushed = True
            if self._trigger is None:
                self._enter(RunState.INTERRUPTED)
            try:
                snapshot = self._aggregator.snapshot()
                paths = [str(p) for p in self._sink.write(snapshot)]
                self._state = RunState.FLUSHED
                log_flush(
                    state=self._trigger or RunState.COMPLETED,
                    completed=len(snapshot.completed),
                    failed=len(snapshot.failed),
                    paths=paths,
                )
            except Exception:
                logger.exception("Failed to write results")
                raise
            finally:
                self._flushing = False

        if self._pending_signal is not None and self._exit_on_flush:
            self._terminate(self._pending_signal)
        return True

    def _enter(self, state: RunState) -> None:
        if self._trigger is None:
            self._trigger = state
            self._state = state

    def _terminate(self, signum: int) -> None:
        self._state = RunState.TERMINATED
        raise SystemExit(128 + signum)

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        if self._flushing:
            # Let the write in progress finish before exiting.
            self._pending_signal = signum
            return
        self.interrupt(signum)
        if self._exit_on_flush:
            self._terminate(signum)

    def _on_fault(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.fault(exc)
        finally:
            previous = self._previous_excepthook or sys.__excepthook__
            previous(exc_type, exc, tb)

    def _on_exit(self) -> None:
        self.flush()
        if self._state is RunState.FLUSHED:
            self._state = RunState.TERMINATED


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"
