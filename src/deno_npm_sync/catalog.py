# ./src/deno_npm_sync/catalog.py
"""pnpm catalog resolution for `catalog:` version ranges.

A package.json range of `catalog:` or `catalog:<name>` points at a shared
version declared in the workspace's pnpm-workspace.yaml. Every miss here is a
None result: a missing workspace file, an unparsable one, an absent entry or a
non-pnpm workspace all leave the import-map entry untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ._types import DEFAULT_CATALOG, CatalogReference, PackageManagerDetector, WorkspaceCatalog
from .env import detect_package_manager

CATALOG_PREFIX = "catalog:"
WORKSPACE_FILENAME = "pnpm-workspace.yaml"
CATALOG_MANAGER = "pnpm"


def parse_reference(range_value: str) -> CatalogReference | None:
    """Parse `catalog:` / `catalog:<name>`; None for ordinary ranges."""

    if not range_value.startswith(CATALOG_PREFIX):
        return None
    name = range_value[len(CATALOG_PREFIX) :].strip()
    return CatalogReference(catalog_name=name or DEFAULT_CATALOG)


def _has_workspace_file(directory: Path) -> bool:
    try:
        return (directory / WORKSPACE_FILENAME).is_file()
    except OSError:
        return False


def find_workspace_root(start_path: Path) -> Path | None:
    """Walk upward from `start_path` to the directory holding pnpm-workspace.yaml."""

    try:
        current = Path(start_path).resolve()
    except OSError:
        return None

    # the filesystem root itself is not probed
    while current != current.parent:
        if _has_workspace_file(current):
            return current
        current = current.parent
    return None


def _string_mapping(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): str(item) for key, item in value.items() if item is not None}


def read_workspace_document(workspace_root: Path) -> WorkspaceCatalog | None:
    """Load the catalog sections of pnpm-workspace.yaml, or None if unusable."""

    path = Path(workspace_root) / WORKSPACE_FILENAME
    if not _has_workspace_file(Path(workspace_root)):
        return None

    try:
        with open(path, encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except (OSError, yaml.YAMLError) as exc:
        logging.debug("Ignoring unreadable %s: %s", path, exc)
        return None

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        logging.debug("Ignoring %s: top level is not a mapping", path)
        return None

    named = data.get("catalogs")
    catalogs: dict[str, dict[str, str]] = {}
    if isinstance(named, Mapping):
        catalogs = {str(name): _string_mapping(entries) for name, entries in named.items()}

    return WorkspaceCatalog(catalog=_string_mapping(data.get("catalog")), catalogs=catalogs)


def resolve(package_name: str, catalog_name: str, workspace_root: Path) -> str | None:
    """Look `package_name` up in the default or a named catalog."""

    document = read_workspace_document(workspace_root)
    if document is None:
        return None

    if catalog_name == DEFAULT_CATALOG:
        return document.catalog.get(package_name)

    bucket = document.catalogs.get(catalog_name)
    if bucket is None:
        logging.debug("Catalog %r not declared in %s", catalog_name, workspace_root)
        return None
    return bucket.get(package_name)


def resolve_version(
    range_value: str,
    package_name: str,
    workspace_root: Path | None,
    detector: PackageManagerDetector | None = None,
) -> str | None:
    """Resolve a catalog reference to its range; ordinary ranges pass through."""

    reference = parse_reference(range_value)
    if reference is None:
        return range_value

    if workspace_root is None:
        logging.debug("No %s found for %s (%s)", WORKSPACE_FILENAME, package_name, range_value)
        return None

    manager = (detector or detect_package_manager)(workspace_root)
    if manager != CATALOG_MANAGER:
        logging.debug("Catalogs need pnpm, workspace %s uses %s", workspace_root, manager or "unknown")
        return None

    resolved = resolve(package_name, reference.catalog_name, workspace_root)
    if resolved is None:
        logging.debug("No catalog entry for %s in %r", package_name, reference.catalog_name)
    return resolved


__all__ = [
    "CATALOG_PREFIX",
    "WORKSPACE_FILENAME",
    "find_workspace_root",
    "parse_reference",
    "read_workspace_document",
    "resolve",
    "resolve_version",
]
