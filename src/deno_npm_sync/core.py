# ./src/deno_npm_sync/core.py
"""deno-npm-sync orchestration engine.

Coordinates precondition checks, import-map classification, catalog
resolution, precision-aware version decisions, a single atomic write, and
structured reporting for CLI/API callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer

from . import env as env_mod
from . import report as report_mod
from ._types import PRECISION_MODES, Change, Options, PackageManagerDetector, Precision, Result
from .catalog import find_workspace_root, parse_reference, resolve_version
from .errors import ImportMapNotFoundError, InvalidPrecisionError, ManifestNotFoundError, WriteFailedError
from .io import dump_json_document, read_json_document, write_json_document
from .parse import extract_range_version, parse_specifier, render_specifier
from .policy import decide_version

# devDependencies win over dependencies
DEPENDENCY_SECTIONS = ("devDependencies", "dependencies")


def declared_range(manifest: Mapping[str, Any], name: str) -> str | None:
    """Return the range package.json declares for `name`, if any."""

    for section in DEPENDENCY_SECTIONS:
        deps = manifest.get(section)
        if not isinstance(deps, Mapping):
            continue
        value = deps.get(name)
        if isinstance(value, str):
            return value
    return None


class _WorkspaceLookup:
    """Find the pnpm workspace root once per run, and only when needed."""

    def __init__(self, start: Path) -> None:
        self._start = start
        self._searched = False
        self._root: Path | None = None

    def __call__(self) -> Path | None:
        if not self._searched:
            self._root = find_workspace_root(self._start)
            self._searched = True
        return self._root


def _sync_entry(
    alias: str,
    value: str,
    manifest: Mapping[str, Any],
    workspace: _WorkspaceLookup,
    precision: Precision,
    detector: PackageManagerDetector,
) -> Change | None:
    spec = parse_specifier(value)
    if spec is None:
        return None

    range_value = declared_range(manifest, spec.name)
    if range_value is None:
        logging.debug("%s: %s not declared in package.json (kept)", alias, spec.name)
        return None

    resolved = range_value
    if parse_reference(range_value) is not None:
        resolved = resolve_version(range_value, spec.name, workspace(), detector)
        if resolved is None:
            logging.info("Unresolved catalog range for %s: %s (kept)", spec.name, range_value)
            return None

    candidate = extract_range_version(resolved)
    if candidate is None:
        logging.debug("%s: no numeric version in range %r (kept)", alias, resolved)
        return None

    final = decide_version(candidate, spec.version, precision)
    if final is None:
        return None

    return Change(
        name=spec.name,
        old_version=spec.version,
        new_version=final,
        alias=alias,
        old_specifier=value,
        new_specifier=render_specifier(spec, final),
    )


def _emit_summary(changes: list[Change], applied: bool) -> None:
    lines = report_mod.summarize_changes(changes)
    if changes and not applied:
        lines[0] = "Deno dependencies out of sync (not written):"
    for line in lines:
        typer.echo(line)


def sync(options: Options, *, detector: PackageManagerDetector | None = None) -> Result:
    """Synchronize deno.json import versions with package.json ranges."""

    if options.version_precision not in PRECISION_MODES:
        raise InvalidPrecisionError(options.version_precision)

    package_path = Path(options.package_json_path).resolve()
    deno_path = Path(options.deno_json_path).resolve()

    if not package_path.is_file():
        raise ManifestNotFoundError(str(package_path))
    if not deno_path.is_file():
        raise ImportMapNotFoundError(str(deno_path))

    manifest, _manifest_text = read_json_document(package_path)
    document, original_text = read_json_document(deno_path)

    imports = document.get("imports")
    if not isinstance(imports, dict):
        logging.warning("No imports mapping in %s", deno_path)
        imports = {}

    detect = detector or detect_package_manager
    workspace = _WorkspaceLookup(package_path.parent)
    changes: list[Change] = []

    for alias, value in list(imports.items()):
        if not isinstance(value, str):
            continue
        change = _sync_entry(alias, value, manifest, workspace, options.version_precision, detect)
        if change is None:
            continue
        imports[alias] = change.new_specifier
        changes.append(change)
        logging.info("%s: %s -> %s", alias, change.old_specifier, change.new_specifier)

    changed = bool(changes)
    new_text = dump_json_document(document) if changed else original_text
    apply = changed and not (options.check or options.dry_run)

    if apply:
        try:
            write_json_document(deno_path, new_text)
        except OSError as exc:
            raise WriteFailedError(str(deno_path), str(exc)) from exc

    if not options.silent:
        _emit_summary(changes, applied=apply)

    diff = report_mod.make_diff(deno_path, original_text, new_text) if changed and options.show_diff else None
    return Result(
        changed=changed,
        changes=changes,
        import_map_path=deno_path,
        original_text=original_text,
        new_text=new_text,
        diff=diff or None,
        written=apply,
    )


# --- Test shims -------------------------------------------------------------------
# Tests and external callers may monkeypatch this name directly on deno_npm_sync.core.
detect_package_manager = env_mod.detect_package_manager


__all__ = ["declared_range", "sync"]
