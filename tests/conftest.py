# ./tests/conftest.py
"""Pytest session setup for deno-npm-sync.

Ensures the local `src/` package is importable during test runs and provides a
small project builder for deno.json / package.json / pnpm-workspace.yaml trees.
"""

from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class Project:
    """Writes fixture documents into one temporary directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.deno_json = root / "deno.json"
        self.package_json = root / "package.json"

    def write_json(self, path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    def imports(self, mapping: dict[str, Any]) -> Path:
        return self.write_json(self.deno_json, {"imports": mapping})

    def manifest(self, data: dict[str, Any]) -> Path:
        return self.write_json(self.package_json, data)

    def workspace(self, content: str, where: Path | None = None) -> Path:
        target = (where or self.root) / "pnpm-workspace.yaml"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return target

    def read_imports(self) -> dict[str, Any]:
        return json.loads(self.deno_json.read_text(encoding="utf-8"))["imports"]


@pytest.fixture
def project(tmp_path: Path) -> Project:
    return Project(tmp_path)
