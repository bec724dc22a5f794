"""File I/O for token lists and result files."""

from .csv_files import (
    COMPLETIONS_SUFFIX,
    FAILURES_SUFFIX,
    TOKEN_COLUMN,
    OutputPaths,
    ResultWriter,
    output_paths,
    read_tokens,
)

__all__ = [
    "read_tokens",
    "output_paths",
    "OutputPaths",
    "ResultWriter",
    "TOKEN_COLUMN",
    "COMPLETIONS_SUFFIX",
    "FAILURES_SUFFIX",
]
