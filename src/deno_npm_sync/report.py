# ./src/deno_npm_sync/report.py
"""Reporting utilities for human and machine consumers.

Provides the console summary, a unified diff of the import map, and JSON
serialization helpers used by the CLI, Python API, and MCP server.
"""

from __future__ import annotations

import difflib
import json
from pathlib import Path

from ._types import Change, JsonChange, JsonResult, Result

UPDATED_BANNER = "Updated Deno dependencies:"
IN_SYNC_BANNER = "Deno imports are already in sync with package.json"


def make_diff(path: Path, original_text: str, new_text: str) -> str:
    """Build a unified diff for the import map if it changed."""

    if original_text == new_text:
        return ""
    diff = difflib.unified_diff(
        original_text.splitlines(keepends=True),
        new_text.splitlines(keepends=True),
        fromfile=f"{path} (old)",
        tofile=f"{path} (new)",
    )
    return "".join(diff)


def summarize_changes(changes: list[Change]) -> list[str]:
    """Produce the banner plus one line per change."""

    if not changes:
        return [IN_SYNC_BANNER]
    return [UPDATED_BANNER, *(f"  - {change.name}: {change.old_version} → {change.new_version}" for change in changes)]


def result_to_json(result: Result) -> JsonResult:
    """Serialize a sync result to a JSON-safe dictionary."""

    change_rows: list[JsonChange] = [
        {
            "name": change.name,
            "old_version": change.old_version,
            "new_version": change.new_version,
            "alias": change.alias,
        }
        for change in result.changes
    ]
    return {
        "changed": result.changed,
        "changes": change_rows,
        "import_map": str(result.import_map_path) if result.import_map_path else None,
        "written": result.written,
        "diff": result.diff,
    }


def write_json_report(report: JsonResult, path: str) -> Path:
    """Write JSON report to file path and return resolved output path."""

    target = Path(path)
    if target.exists() and target.is_dir():
        target = target / "deno-npm-sync-report.json"
    elif str(target).strip() in {"", "."}:
        target = Path("deno-npm-sync-report.json")

    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as stream:
        json.dump(report, stream, indent=2, ensure_ascii=False)
    return target


__all__ = [
    "IN_SYNC_BANNER",
    "UPDATED_BANNER",
    "make_diff",
    "result_to_json",
    "summarize_changes",
    "write_json_report",
]
