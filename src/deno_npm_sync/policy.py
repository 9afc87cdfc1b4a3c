# src/deno_npm_sync/policy.py

from __future__ import annotations

from ._types import Precision

_PRECISION_SEGMENTS: dict[str, int] = {"major": 1, "minor": 2}


def count_segments(version: str) -> int:
    return len(version.split("."))


def truncate_version(version: str, segments: int) -> str:
    return ".".join(version.split(".")[:segments])


def apply_precision(candidate: str, current: str, precision: Precision) -> str:
    """
    Return the version to embed for `candidate` under the given precision mode.
    `auto` keeps as many segments as the currently embedded version has.
    Nothing is padded: a short candidate stays short.
    """
    if precision == "full":
        return candidate
    if precision == "auto":
        return truncate_version(candidate, count_segments(current))
    return truncate_version(candidate, _PRECISION_SEGMENTS[precision])


def decide_version(candidate: str, current: str, precision: Precision) -> str | None:
    """
    Return the new embedded version, or None when the entry should be left alone.
    """
    if candidate == current:
        return None

    final = apply_precision(candidate, current, precision)
    # truncation can land back on the current version
    if final == current:
        return None
    return final
