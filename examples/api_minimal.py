# ./examples/api_minimal.py
"""Minimal deno-npm-sync API usage example.

Run with: `python examples/api_minimal.py`
Inputs: ./deno.json and ./package.json (plus pnpm-workspace.yaml for catalogs).
Outputs: prints the changed flag, each pending update and a diff; performs no writes.
"""

from __future__ import annotations

from pathlib import Path

from deno_npm_sync import Options, sync


def main() -> None:
    options = Options(
        deno_json_path=Path("deno.json"),
        package_json_path=Path("package.json"),
        version_precision="auto",
        dry_run=True,
        show_diff=True,
        silent=True,
    )
    result = sync(options)
    print("Changed:", result.changed)
    for change in result.changes:
        print(f"  {change.name}: {change.old_version} -> {change.new_version}")
    if result.diff:
        print(result.diff)


if __name__ == "__main__":
    main()
