# ./src/deno_npm_sync/_logging.py
"""Logging setup for deno-npm-sync CLI runs.

Console logs go to stderr so stdout stays clean for summaries and JSON
payloads. `-v` shows per-entry rewrites, `-vv` also shows why entries were
kept; an optional file sink always records debug detail.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _console_level(verbosity: int, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbosity: int, quiet: bool, log_file: Path | None) -> None:
    """Configure root logging based on CLI verbosity flags."""

    level = _console_level(verbosity, quiet)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if log_file else level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root.addHandler(file_handler)


__all__ = ["setup_logging"]
