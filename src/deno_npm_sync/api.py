# ./src/deno_npm_sync/api.py
"""Programmatic integration helpers for local AI tools and automation.

Use this module when embedding deno-npm-sync into agents, MCP tools, or CI
wrappers. It converts loose dictionaries into strongly typed options and
returns JSON-safe result payloads without requiring subprocess parsing.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ._types import JsonResult, Options
from .config import merge_options, normalize_keys
from .core import sync
from .report import result_to_json


def options_from_mapping(payload: Mapping[str, Any], *, base_dir: Path | None = None) -> Options:
    """Create validated Options from arbitrary mapping input."""

    root = base_dir or Path(".")
    base = Options(deno_json_path=root / "deno.json", package_json_path=root / "package.json")
    return merge_options(base, normalize_keys(dict(payload)))


def run_sync_payload(payload: Mapping[str, Any], *, base_dir: Path | None = None) -> JsonResult:
    """Execute deno-npm-sync using a dictionary payload and return JSON-safe output."""

    options = options_from_mapping(payload, base_dir=base_dir)
    result = sync(options)
    return result_to_json(result)


__all__ = ["options_from_mapping", "run_sync_payload"]
