# ./src/deno_npm_sync/__init__.py
"""Public deno-npm-sync package API.

Keeps the `npm:` and `jsr:` versions pinned in a deno.json import map in step
with package.json (including pnpm catalogs). Import `sync` for direct
orchestration or `run_sync_payload` for JSON-style automation flows.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from ._types import Change, Options, Result
from .api import options_from_mapping, run_sync_payload
from .core import sync

__all__ = ["Change", "Options", "Result", "__version__", "options_from_mapping", "run_sync_payload", "sync"]

try:
    __version__ = version("deno-npm-sync")
except PackageNotFoundError:
    __version__ = "0.0.0+dev"
