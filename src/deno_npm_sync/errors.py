# ./src/deno_npm_sync/errors.py
"""Custom exceptions carrying stable deno-npm-sync exit-code intent.

The core engine raises these typed errors so CLI and MCP layers can map failures
without brittle string parsing. Catalog lookups never raise; only problems with
the two primary documents (or invalid options) surface here.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._types import PRECISION_MODES, ExitCode


@dataclass
class DenoNpmSyncError(RuntimeError):
    """Base deno-npm-sync exception with a stable exit code."""

    message: str
    exit_code: ExitCode = ExitCode.GENERIC_ERROR

    def __str__(self) -> str:
        return self.message


class ManifestNotFoundError(DenoNpmSyncError):
    def __init__(self, path: str) -> None:
        super().__init__(f"package.json not found at: {path}", ExitCode.MISSING_FILE)


class ImportMapNotFoundError(DenoNpmSyncError):
    def __init__(self, path: str) -> None:
        super().__init__(f"deno.json not found at: {path}", ExitCode.MISSING_FILE)


class DocumentParseError(DenoNpmSyncError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Failed to parse {path}: {detail}", ExitCode.PARSE_ERROR)


class InvalidOptionError(DenoNpmSyncError):
    def __init__(self, detail: str) -> None:
        super().__init__(detail, ExitCode.INVALID_OPTION)


class InvalidPrecisionError(InvalidOptionError):
    def __init__(self, value: object) -> None:
        modes = ", ".join(f"'{mode}'" for mode in PRECISION_MODES)
        super().__init__(f"--version-precision must be one of: {modes} (got {value!r})")


class WriteFailedError(DenoNpmSyncError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Failed to write {path}: {detail}", ExitCode.WRITE_FAILED)


__all__ = [
    "DenoNpmSyncError",
    "DocumentParseError",
    "ImportMapNotFoundError",
    "InvalidOptionError",
    "InvalidPrecisionError",
    "ManifestNotFoundError",
    "WriteFailedError",
]
