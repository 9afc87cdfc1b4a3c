# ./src/deno_npm_sync/mcp_server.py
"""Built-in MCP server for deno-npm-sync automation.

Run as `deno-npm-sync mcp` or `deno-npm-sync-mcp` to expose the sync as an MCP
tool over stdio (or alternate FastMCP transports). Inputs are plain tool
parameters and outputs are structured JSON payloads for local AI model clients.
"""

from __future__ import annotations

import importlib
from typing import Any, TypedDict

from ._types import ExitCode, JsonResult
from .api import run_sync_payload
from .errors import DenoNpmSyncError

FastMCP: Any
_MCP_IMPORT_ERROR: Exception | None
try:
    _fastmcp_module = importlib.import_module("mcp.server.fastmcp")
except Exception as exc:  # pragma: no cover - import guarded at runtime
    FastMCP = None
    _MCP_IMPORT_ERROR = exc
else:
    FastMCP = _fastmcp_module.FastMCP
    _MCP_IMPORT_ERROR = None


class McpToolResult(TypedDict):
    ok: bool
    exit_code: int
    error: str | None
    result: JsonResult | None


def sync_tool(
    deno_json_path: str = "deno.json",
    package_json_path: str = "package.json",
    version_precision: str = "auto",
    dry_run: bool = True,
    check: bool = False,
    show_diff: bool = True,
) -> McpToolResult:
    """Run one sync and wrap the outcome; never raises."""

    payload: dict[str, Any] = {
        "deno_json_path": deno_json_path,
        "package_json_path": package_json_path,
        "version_precision": version_precision,
        "dry_run": dry_run,
        "check": check,
        "show_diff": show_diff,
        "silent": True,
    }

    try:
        result = run_sync_payload(payload)
        return {"ok": True, "exit_code": int(ExitCode.OK), "error": None, "result": result}
    except DenoNpmSyncError as error:
        return {"ok": False, "exit_code": int(error.exit_code), "error": str(error), "result": None}
    except Exception as error:
        return {
            "ok": False,
            "exit_code": int(ExitCode.GENERIC_ERROR),
            "error": str(error),
            "result": None,
        }


def _server() -> Any:
    if FastMCP is None:
        raise RuntimeError(
            "MCP support requires the `mcp` package. Install optional extras: `pip install deno-npm-sync[mcp]`."
        ) from _MCP_IMPORT_ERROR

    mcp = FastMCP("deno-npm-sync")
    mcp.tool(
        name="deno_npm_sync",
        description="Sync npm:/jsr: versions in deno.json imports to package.json (pnpm catalogs supported).",
    )(sync_tool)
    return mcp


def serve_mcp(transport: str = "stdio") -> None:
    """Start deno-npm-sync MCP server using the requested FastMCP transport."""

    server = _server()
    server.run(transport=transport)


def main() -> None:
    serve_mcp("stdio")


__all__ = ["main", "serve_mcp", "sync_tool"]
