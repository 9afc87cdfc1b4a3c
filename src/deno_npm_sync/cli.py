# ./src/deno_npm_sync/cli.py
"""Command-line entrypoints for deno-npm-sync and built-in MCP serving.

Primary usage is `deno-npm-sync run ...` to rewrite deno.json import versions
from package.json, and `deno-npm-sync mcp` for local AI model integrations.
CLI arguments override optional project config and can emit either human
summaries or JSON payloads.
"""

from __future__ import annotations

import json
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from click.core import ParameterSource

from . import __version__
from ._logging import setup_logging
from ._types import ExitCode, JsonResult, Options, Result
from .config import load_project_config, merge_options, normalize_keys
from .core import sync
from .errors import DenoNpmSyncError
from .report import result_to_json, write_json_report


class PrecisionEnum(str, Enum):
    AUTO = "auto"
    MAJOR = "major"
    MINOR = "minor"
    FULL = "full"


class TransportEnum(str, Enum):
    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class OutputModeEnum(str, Enum):
    HUMAN = "human"
    JSON = "json"
    BOTH = "both"


class HelpTopicEnum(str, Enum):
    ALL = "all"
    RUN = "run"
    VERSION = "version"
    MCP = "mcp"


_ROOT_HELP_EPILOG = """Help tips:
  deno-npm-sync run --help
  deno-npm-sync mcp --help
  deno-npm-sync help all
"""

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Sync npm and JSR package versions from package.json to deno.json imports.",
    epilog=_ROOT_HELP_EPILOG,
)

_SUBCOMMAND_HELP_FOOTER = """Other deno-npm-sync commands:
  deno-npm-sync run [OPTIONS]
  deno-npm-sync help [all|run|version|mcp]
  deno-npm-sync version
  deno-npm-sync mcp [--transport stdio|sse|streamable-http]
"""

_HELP_TEXTS: dict[HelpTopicEnum, str] = {
    HelpTopicEnum.ALL: """deno-npm-sync help overview

Top-level commands:
  deno-npm-sync run [OPTIONS]
  deno-npm-sync help [all|run|version|mcp]
  deno-npm-sync version
  deno-npm-sync mcp [--transport stdio|sse|streamable-http]

Common quick starts:
  deno-npm-sync run
  deno-npm-sync run --deno ./apps/api/deno.json --package ./apps/api/package.json
  deno-npm-sync run --check --show-diff
""",
    HelpTopicEnum.RUN: """deno-npm-sync run help

Use:
  deno-npm-sync run --help

Version precision (-v):
  auto   keep the segment count already in deno.json (default)
  major  x
  minor  x.y
  full   x.y.z

Common run patterns:
  deno-npm-sync run --silent
  deno-npm-sync run --version-precision minor
  deno-npm-sync run --dry-run --show-diff
  deno-npm-sync run --output json --check
""",
    HelpTopicEnum.VERSION: """deno-npm-sync version help

Use:
  deno-npm-sync version
""",
    HelpTopicEnum.MCP: """deno-npm-sync mcp help

Use:
  deno-npm-sync mcp --help
  deno-npm-sync mcp --transport stdio
  deno-npm-sync mcp --transport sse
""",
}

# run() parameters that are not Options fields
_NON_OPTION_KEYS = {"ctx", "output", "use_config"}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"deno-npm-sync {__version__}")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        is_eager=True,
        callback=_version_callback,
        help="Show deno-npm-sync version and exit.",
    ),
) -> None:
    """Global CLI options for deno-npm-sync."""


def _build_options(ctx: typer.Context, use_config: bool) -> Options:
    options = Options()
    if use_config:
        options = merge_options(options, load_project_config(Path(".").resolve()))

    overrides: dict[str, Any] = {}
    for key, value in ctx.params.items():
        if key in _NON_OPTION_KEYS:
            continue
        if ctx.get_parameter_source(key) is not ParameterSource.DEFAULT:
            overrides[key] = value

    return merge_options(options, normalize_keys(overrides))


def _print_human_summary(result: Result, options: Options, report_path: Optional[Path]) -> None:
    if not options.silent and result.written:
        typer.secho(f"\nSuccessfully synchronized {len(result.changes)} package(s)", fg=typer.colors.GREEN)

    if result.diff and (options.show_diff or options.dry_run):
        typer.echo(result.diff)

    if report_path:
        typer.echo(f"json report written: {report_path}")


def _emit_result(result: Result, options: Options, output_mode: OutputModeEnum) -> None:
    payload: JsonResult = result_to_json(result)
    report_path: Optional[Path] = None
    if options.json_report:
        report_path = write_json_report(payload, str(options.json_report))

    if output_mode in {OutputModeEnum.HUMAN, OutputModeEnum.BOTH}:
        _print_human_summary(result=result, options=options, report_path=report_path)

    if output_mode in {OutputModeEnum.JSON, OutputModeEnum.BOTH}:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("run", epilog=_SUBCOMMAND_HELP_FOOTER)
def run_command(
    ctx: typer.Context,
    deno: Path = typer.Option(
        Path("./deno.json"),
        "--deno",
        "-d",
        help="Path to deno.json file.",
        dir_okay=False,
        rich_help_panel="Target",
    ),
    package: Path = typer.Option(
        Path("./package.json"),
        "--package",
        "-p",
        help="Path to package.json file.",
        dir_okay=False,
        rich_help_panel="Target",
    ),
    version_precision: PrecisionEnum = typer.Option(
        PrecisionEnum.AUTO,
        "--version-precision",
        "-v",
        help="Version precision: auto (preserve format), major (x), minor (x.y), or full (x.y.z).",
        rich_help_panel="Policy",
    ),
    silent: bool = typer.Option(
        False,
        "--silent",
        "-s",
        help="Suppress console output.",
        rich_help_panel="Output",
    ),
    check: bool = typer.Option(
        False,
        help="Exit nonzero when changes would be made; never writes.",
        rich_help_panel="Execution",
    ),
    dry_run: bool = typer.Option(
        False,
        help="Preview changes without writing deno.json.",
        rich_help_panel="Execution",
    ),
    show_diff: bool = typer.Option(
        False,
        help="Show unified diff for deno.json.",
        rich_help_panel="Output",
    ),
    output: OutputModeEnum = typer.Option(
        OutputModeEnum.HUMAN,
        "--output",
        "-o",
        help="Stdout output mode.",
        rich_help_panel="Output",
    ),
    json_report: Optional[Path] = typer.Option(
        None,
        help="Write machine-readable JSON report to file.",
        rich_help_panel="Output",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        help="Optional log file path.",
        rich_help_panel="Logging",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbose",
        count=True,
        help="Increase logging verbosity (repeat for debug).",
        rich_help_panel="Logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors.",
        rich_help_panel="Logging",
    ),
    use_config: bool = typer.Option(
        True,
        help="Load deno-npm-sync.toml / package.json#denoNpmSync / deno-npm-sync.json.",
        rich_help_panel="Config",
    ),
) -> None:
    """Rewrite deno.json npm:/jsr: versions to match package.json."""

    try:
        options = _build_options(ctx, use_config=use_config)
    except DenoNpmSyncError as error:
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(int(error.exit_code)) from error

    setup_logging(verbosity=options.verbosity, quiet=options.quiet, log_file=options.log_file)

    # keep stdout parseable
    run_options = replace(options, silent=True) if output == OutputModeEnum.JSON else options

    try:
        result = sync(run_options)
    except DenoNpmSyncError as error:
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(int(error.exit_code)) from error
    except Exception as error:
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(int(ExitCode.GENERIC_ERROR)) from error

    _emit_result(result=result, options=run_options, output_mode=output)

    if options.check and result.changed:
        raise typer.Exit(int(ExitCode.CHANGES_WOULD_BE_MADE)) from None

    raise typer.Exit(int(ExitCode.OK)) from None


@app.command("help", epilog=_SUBCOMMAND_HELP_FOOTER)
def help_command(
    topic: HelpTopicEnum = typer.Argument(
        HelpTopicEnum.ALL,
        help="Help topic: all, run, version, or mcp.",
    ),
) -> None:
    """Show concise command guidance and discoverability tips."""

    typer.echo(_HELP_TEXTS[topic].strip())


@app.command("version", epilog=_SUBCOMMAND_HELP_FOOTER)
def version_command() -> None:
    """Print installed deno-npm-sync version."""

    typer.echo(f"deno-npm-sync {__version__}")


@app.command("mcp", epilog=_SUBCOMMAND_HELP_FOOTER)
def mcp_server(
    transport: TransportEnum = typer.Option(TransportEnum.STDIO, help="MCP transport to serve"),
) -> None:
    """Start deno-npm-sync MCP server for local AI model clients."""

    from .mcp_server import serve_mcp

    serve_mcp(transport=transport.value)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
