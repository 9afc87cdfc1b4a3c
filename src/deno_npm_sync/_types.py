# ./src/deno_npm_sync/_types.py
"""Core deno-npm-sync type contracts shared by CLI, API, and MCP integrations.

Used by all orchestration layers to keep sync options, change tracking, and
exit-code behavior consistent. Import these models when calling deno-npm-sync
from Python, CLI wrappers, or model-tool adapters.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Literal, Optional, TypedDict

Precision = Literal["auto", "major", "minor", "full"]
RegistryKind = Literal["npm", "jsr"]

PRECISION_MODES: tuple[Precision, ...] = ("auto", "major", "minor", "full")
DEFAULT_CATALOG = "default"

# directory -> package manager name ("pnpm", "npm", ...) or None
PackageManagerDetector = Callable[[Path], Optional[str]]


class ExitCode(IntEnum):
    """Stable process exit codes for CLI and MCP callers."""

    OK = 0
    GENERIC_ERROR = 1
    MISSING_FILE = 2
    PARSE_ERROR = 3
    INVALID_OPTION = 4
    WRITE_FAILED = 5
    CHANGES_WOULD_BE_MADE = 6


@dataclass(frozen=True)
class Options:
    """Runtime options for a single deno-npm-sync operation."""

    deno_json_path: Path = Path("deno.json")
    package_json_path: Path = Path("package.json")
    silent: bool = False
    version_precision: Precision = "auto"
    dry_run: bool = False
    check: bool = False
    show_diff: bool = False
    json_report: Path | None = None
    log_file: Path | None = None
    verbosity: int = 0
    quiet: bool = False


@dataclass(frozen=True)
class ImportSpecifier:
    """A registry specifier split into its parts."""

    registry: RegistryKind
    name: str
    version: str
    subpath: str = ""


@dataclass(frozen=True)
class CatalogReference:
    """Parsed `catalog:` / `catalog:<name>` range."""

    catalog_name: str = DEFAULT_CATALOG


@dataclass(frozen=True)
class WorkspaceCatalog:
    """Catalog sections of a pnpm-workspace.yaml document."""

    catalog: Mapping[str, str] = field(default_factory=dict)
    catalogs: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Change:
    """A single import-map entry rewrite."""

    name: str
    old_version: str
    new_version: str
    alias: str = ""
    old_specifier: str = ""
    new_specifier: str = ""


@dataclass
class Result:
    """Structured outcome of a sync call."""

    changed: bool
    changes: list[Change] = field(default_factory=list)
    import_map_path: Path | None = None
    original_text: str = ""
    new_text: str = ""
    diff: str | None = None
    written: bool = False


class JsonChange(TypedDict):
    name: str
    old_version: str
    new_version: str
    alias: str


class JsonResult(TypedDict):
    changed: bool
    changes: list[JsonChange]
    import_map: str | None
    written: bool
    diff: str | None


__all__ = [
    "DEFAULT_CATALOG",
    "PRECISION_MODES",
    "CatalogReference",
    "Change",
    "ExitCode",
    "ImportSpecifier",
    "JsonChange",
    "JsonResult",
    "Options",
    "PackageManagerDetector",
    "Precision",
    "RegistryKind",
    "Result",
    "WorkspaceCatalog",
]
