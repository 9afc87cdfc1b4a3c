# ./src/deno_npm_sync/io.py
"""File I/O helpers for reading manifests and rewriting the import map.

This module loads the two primary JSON documents (parse failures are fatal),
serializes the import map with two-space indentation and a trailing newline,
and replaces it atomically.
"""

from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from .errors import DocumentParseError

JSON_INDENT = 2


def read_json_document(path: Path) -> tuple[dict[str, Any], str]:
    """Return the parsed JSON object and the raw text it came from."""

    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise DocumentParseError(str(path), str(exc)) from exc

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise DocumentParseError(str(path), str(exc)) from exc

    if not isinstance(data, dict):
        raise DocumentParseError(str(path), f"expected a JSON object, got {type(data).__name__}")
    return data, text


def dump_json_document(data: dict[str, Any]) -> str:
    """Serialize like `JSON.stringify(data, null, 2)` plus one newline."""

    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False) + "\n"


def write_atomic_bytes(path: Path, data: bytes) -> None:
    """Atomically replace file content with a temp-file swap.

    Symlinks are followed and the existing file mode is kept.
    """

    target = path.resolve()
    mode = stat.S_IMODE(os.stat(target).st_mode) if target.exists() else None

    tmp_fd, tmp_path = tempfile.mkstemp(prefix="deno-npm-sync-", suffix=".tmp", dir=str(target.parent))
    try:
        with os.fdopen(tmp_fd, "wb") as stream:
            stream.write(data)
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_json_document(path: Path, text: str) -> None:
    """Write serialized JSON text as UTF-8."""

    write_atomic_bytes(path, text.encode("utf-8"))


__all__ = [
    "JSON_INDENT",
    "dump_json_document",
    "read_json_document",
    "write_atomic_bytes",
    "write_json_document",
]
