# ./src/deno_npm_sync/env.py
"""Environment helpers for deno-npm-sync runtime decisions.

This module answers one question for the catalog resolver: which package
manager owns a directory. It probes lockfiles upward from the directory and
consults the `packageManager` / `devEngines` fields of package.json.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

# probe order within one directory
LOCKFILES: tuple[tuple[str, str], ...] = (
    ("bun.lock", "bun"),
    ("bun.lockb", "bun"),
    ("deno.lock", "deno"),
    ("pnpm-lock.yaml", "pnpm"),
    ("pnpm-workspace.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
    ("npm-shrinkwrap.json", "npm"),
)

KNOWN_MANAGERS = frozenset(name for _lock, name in LOCKFILES)


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def _iter_dirs(start: Path):
    current = start.resolve()
    yield current
    yield from current.parents


def _manager_from_field(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    # "pnpm@9.1.0+sha512..." -> "pnpm"
    name = value.strip().split("@", 1)[0]
    return name if name in KNOWN_MANAGERS else None


def read_package_manager_field(directory: Path) -> str | None:
    """Return the manager named by package.json in `directory`, if any."""

    manifest = directory / "package.json"
    if not _is_file(manifest):
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logging.debug("Ignoring unreadable %s: %s", manifest, exc)
        return None
    if not isinstance(data, dict):
        return None

    name = _manager_from_field(data.get("packageManager"))
    if name:
        return name

    engines = data.get("devEngines")
    if isinstance(engines, dict):
        declared = engines.get("packageManager")
        if isinstance(declared, dict):
            return _manager_from_field(declared.get("name"))
    return None


def detect_package_manager(cwd: Path) -> str | None:
    """Return the package manager owning `cwd` ("pnpm", "npm", ...), or None."""

    for directory in _iter_dirs(cwd):
        for lockfile, manager in LOCKFILES:
            if _is_file(directory / lockfile):
                declared = read_package_manager_field(directory)
                detected = declared or manager
                logging.debug("Detected package manager %s via %s", detected, directory / lockfile)
                return detected

    for directory in _iter_dirs(cwd):
        declared = read_package_manager_field(directory)
        if declared:
            logging.debug("Detected package manager %s via %s", declared, directory / "package.json")
            return declared

    return None


__all__ = [
    "LOCKFILES",
    "detect_package_manager",
    "read_package_manager_field",
]
