# ./src/deno_npm_sync/parse.py
"""Parsing helpers for import-map specifiers and manifest version ranges.

Used by the sync core to classify `npm:` / `jsr:` specifiers, split them into
name, embedded version and subpath, and pull the leading numeric version out
of a package.json range string.
"""

from __future__ import annotations

import re

from ._types import ImportSpecifier, RegistryKind

NPM_SPECIFIER_RE = re.compile(r"^npm:(?P<name>[^@]+)@(?P<version>\d+(?:\.\d+){0,2})(?P<subpath>/.*)?$")
JSR_SPECIFIER_RE = re.compile(r"^jsr:(?P<name>@[^/@]+/[^@/]+)@(?P<version>\d+(?:\.\d+){0,2})(?P<subpath>/.*)?$")

# npm first, then jsr
SPECIFIER_PATTERNS: tuple[tuple[RegistryKind, re.Pattern[str]], ...] = (
    ("npm", NPM_SPECIFIER_RE),
    ("jsr", JSR_SPECIFIER_RE),
)

LEADING_NON_DIGITS_RE = re.compile(r"^\D*")
LEADING_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*")


def parse_specifier(value: str) -> ImportSpecifier | None:
    """Split a registry specifier, or return None for anything unrecognized."""

    for registry, pattern in SPECIFIER_PATTERNS:
        match = pattern.match(value)
        if match:
            return ImportSpecifier(
                registry=registry,
                name=match.group("name"),
                version=match.group("version"),
                subpath=match.group("subpath") or "",
            )
    return None


def extract_range_version(range_value: str) -> str | None:
    """Return the leading numeric version of a range like `^4.17.21`."""

    stripped = LEADING_NON_DIGITS_RE.sub("", range_value, count=1)
    match = LEADING_VERSION_RE.match(stripped)
    if not match:
        return None
    return match.group(0)


def render_specifier(spec: ImportSpecifier, version: str) -> str:
    """Rebuild a specifier with a new embedded version, keeping the subpath."""

    return f"{spec.registry}:{spec.name}@{version}{spec.subpath}"


__all__ = [
    "JSR_SPECIFIER_RE",
    "NPM_SPECIFIER_RE",
    "SPECIFIER_PATTERNS",
    "extract_range_version",
    "parse_specifier",
    "render_specifier",
]
