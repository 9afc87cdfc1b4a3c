# src/deno_npm_sync/config.py
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from ._types import PRECISION_MODES, Options
from .errors import InvalidOptionError, InvalidPrecisionError

try:
    import tomllib as toml
except Exception:
    try:
        import tomli as toml  # type: ignore[no-redef]
    except Exception:
        toml = None  # type: ignore[assignment]

PACKAGE_JSON_KEY = "denoNpmSync"

# short names accepted in config files
_ALIASES = {
    "deno": "deno_json_path",
    "package": "package_json_path",
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _load_toml(path: Path) -> dict[str, Any]:
    if not toml:
        return {}
    try:
        with open(path, "rb") as f:
            data = toml.load(f)
            return data if isinstance(data, dict) else {}
    except Exception as e:
        logging.warning("Failed to parse %s: %s", path.name, e)
        return {}


def _load_json_object(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception as e:
        logging.warning("Failed to parse %s: %s", path.name, e)
        return {}
    return data if isinstance(data, dict) else {}


def normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        name = _CAMEL_RE.sub("_", str(key)).replace("-", "_").lower()
        out[_ALIASES.get(name, name)] = value
    return out


def load_project_config(start_dir: Path) -> dict[str, Any]:
    cfg: dict[str, Any] = {}

    # deno-npm-sync.toml
    ts = start_dir / "deno-npm-sync.toml"
    if ts.exists():
        cfg.update(normalize_keys(_load_toml(ts)))

    # package.json "denoNpmSync"
    pkg = start_dir / "package.json"
    if pkg.exists():
        section = _load_json_object(pkg).get(PACKAGE_JSON_KEY) or {}
        if isinstance(section, dict):
            cfg.update(normalize_keys(section))

    # JSON fallback
    js = start_dir / "deno-npm-sync.json"
    if js.exists():
        cfg.update(normalize_keys(_load_json_object(js)))

    return cfg


def _to_path(v: Any) -> Path | None:
    if v in (None, "", "."):
        return None
    try:
        return Path(str(v))
    except Exception:
        return None


def _to_precision(v: Any, default: str) -> str:
    if v is None:
        return default
    value = getattr(v, "value", v)
    if value not in PRECISION_MODES:
        raise InvalidPrecisionError(value)
    return str(value)


_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def _to_bool(key: str, v: Any, default: bool) -> bool:
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    if isinstance(v, str):
        text = v.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise InvalidOptionError(f"{key} must be a boolean (got {v!r})")


def merge_options(base: Options, overrides: dict[str, Any]) -> Options:
    return Options(
        deno_json_path=_to_path(overrides.get("deno_json_path")) or base.deno_json_path,
        package_json_path=_to_path(overrides.get("package_json_path")) or base.package_json_path,
        silent=_to_bool("silent", overrides.get("silent"), base.silent),
        version_precision=_to_precision(overrides.get("version_precision"), base.version_precision),  # type: ignore[arg-type]
        dry_run=_to_bool("dry_run", overrides.get("dry_run"), base.dry_run),
        check=_to_bool("check", overrides.get("check"), base.check),
        show_diff=_to_bool("show_diff", overrides.get("show_diff"), base.show_diff),
        json_report=_to_path(overrides.get("json_report")) or base.json_report,
        log_file=_to_path(overrides.get("log_file")) or base.log_file,
        verbosity=int(overrides.get("verbosity", base.verbosity)),
        quiet=_to_bool("quiet", overrides.get("quiet"), base.quiet),
    )
