"""Tabular token files.

The input is a CSV with a header row naming at least ``payment_token``.
Results are written next to it as ``<input>.completions`` and
``<input>.failures`` using the same convention, so a failures file can be
fed back in as the input of a later run.
"""

from __future__ import annotations

import contextlib
import csv
import logging
import os
import tempfile
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from ..core.exceptions import ConfigurationError, InputFormatError
from ..models import TokenRow
from ..runtime.results import ResultSnapshot

logger = logging.getLogger(__name__)

TOKEN_COLUMN = "payment_token"
DIAGNOSTIC_COLUMNS = ("reason", "status_code", "status_text", "response_body")

COMPLETIONS_SUFFIX = ".completions"
FAILURES_SUFFIX = ".failures"


def read_tokens(path: str | os.PathLike[str]) -> list[str]:
    """Read the ordered token list from a CSV file.

    Args:
        path: CSV file with a header row

    Returns:
        Tokens in file order

    Raises:
        ConfigurationError: If the file cannot be opened
        InputFormatError: If the header lacks ``payment_token`` or a row has an
            empty token
    """
    path = Path(path)
    try:
        handle = path.open(newline="", encoding="utf-8-sig")
    except OSError as e:
        raise ConfigurationError(f"Cannot read token file {path}: {e}") from e

    tokens: list[str] = []
    with handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None or TOKEN_COLUMN not in reader.fieldnames:
            raise InputFormatError(f"{path}: header row must name a '{TOKEN_COLUMN}' column", 1)
        for row in reader:
            try:
                tokens.append(TokenRow(payment_token=row.get(TOKEN_COLUMN)).payment_token)
            except ValidationError as e:
                raise InputFormatError(
                    f"{path}:{reader.line_num}: invalid '{TOKEN_COLUMN}' value",
                    reader.line_num,
                ) from e

    logger.info("Read %d tokens from %s", len(tokens), path)
    return tokens


@dataclass(frozen=True)
class OutputPaths:
    completions: Path
    failures: Path

    def __iter__(self) -> Iterator[Path]:
        yield self.completions
        yield self.failures


def output_paths(input_path: str | os.PathLike[str]) -> OutputPaths:
    """Derive the result file paths from the input path."""
    base = os.fspath(input_path)
    return OutputPaths(
        completions=Path(base + COMPLETIONS_SUFFIX),
        failures=Path(base + FAILURES_SUFFIX),
    )


class ResultWriter:
    """Writes a ResultSnapshot to the completions and failures files.

    Output is deterministic: the same snapshot always produces the same
    bytes. Each file is written to a temporary sibling first and then moved
    into place, so an interrupted write never leaves a truncated file.
    """

    def __init__(
        self, input_path: str | os.PathLike[str], *, include_diagnostics: bool = True
    ) -> None:
        self._paths = output_paths(input_path)
        self._include_diagnostics = include_diagnostics

    @property
    def paths(self) -> OutputPaths:
        return self._paths

    def write(self, snapshot: ResultSnapshot) -> OutputPaths:
        """Write both files and return their paths."""
        _atomic_write_csv(
            self._paths.completions,
            [TOKEN_COLUMN],
            ([token] for token in snapshot.completed),
        )

        header = [TOKEN_COLUMN]
        if self._include_diagnostics:
            header.extend(DIAGNOSTIC_COLUMNS)
        rows = []
        for token, detail in snapshot.failed:
            row = [token]
            if self._include_diagnostics:
                row.extend(
                    [
                        detail.reason.value,
                        "" if detail.status_code is None else str(detail.status_code),
                        detail.status_text or "",
                        detail.body or "",
                    ]
                )
            rows.append(row)
        _atomic_write_csv(self._paths.failures, header, rows)
        return self._paths


def _atomic_write_csv(path: Path, header: list[str], rows: Iterable[list[str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(header)
            writer.writerows(rows)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
