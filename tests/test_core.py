# tests/test_core.py

import json
import stat
from pathlib import Path

import pytest

from deno_npm_sync import core as core_mod
from deno_npm_sync._types import Change, ExitCode, Options
from deno_npm_sync.core import declared_range, sync
from deno_npm_sync.errors import DocumentParseError, ImportMapNotFoundError, InvalidPrecisionError, ManifestNotFoundError


def opts(project, **kwargs) -> Options:
    return Options(deno_json_path=project.deno_json, package_json_path=project.package_json, silent=True, **kwargs)


def test_syncs_npm_versions_with_dev_and_regular_dependencies(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}, "devDependencies": {"typescript": "^5.0.0"}})
    project.imports({"lodash": "npm:lodash@4.17.0", "ts": "npm:typescript@4.9.0"})

    result = sync(opts(project))

    assert result.changed and result.written
    assert [(c.name, c.old_version, c.new_version) for c in result.changes] == [
        ("lodash", "4.17.0", "4.17.21"),
        ("typescript", "4.9.0", "5.0.0"),
    ]
    assert project.read_imports() == {"lodash": "npm:lodash@4.17.21", "ts": "npm:typescript@5.0.0"}


def test_dev_dependencies_win_over_dependencies():
    manifest = {"dependencies": {"zod": "^3.0.0"}, "devDependencies": {"zod": "^3.22.0"}}
    assert declared_range(manifest, "zod") == "^3.22.0"
    assert declared_range({"dependencies": {"zod": "^3.0.0"}}, "zod") == "^3.0.0"
    assert declared_range({"dependencies": ["zod"]}, "zod") is None


def test_catalog_default_scenario(project):
    project.workspace("catalog:\n  zod: ^3.22.0\n")
    project.manifest({"dependencies": {"zod": "catalog:"}})
    project.imports({"zod": "npm:zod@3.21.0"})

    result = sync(opts(project))

    assert result.changes == [
        Change(
            name="zod",
            old_version="3.21.0",
            new_version="3.22.0",
            alias="zod",
            old_specifier="npm:zod@3.21.0",
            new_specifier="npm:zod@3.22.0",
        )
    ]
    assert project.read_imports()["zod"] == "npm:zod@3.22.0"


def test_named_catalogs(project):
    project.workspace(
        """
        catalogs:
          prod:
            zod: ^3.22.0
            lodash: ^4.17.21
          dev:
            typescript: ^5.0.0
        """
    )
    project.manifest(
        {
            "dependencies": {"zod": "catalog:prod", "lodash": "catalog:prod"},
            "devDependencies": {"typescript": "catalog:dev"},
        }
    )
    project.imports({"zod": "npm:zod@3.21.0", "lodash": "npm:lodash@4.17.0", "ts": "npm:typescript@4.9.0"})

    result = sync(opts(project))

    assert len(result.changes) == 3
    assert project.read_imports() == {
        "zod": "npm:zod@3.22.0",
        "lodash": "npm:lodash@4.17.21",
        "ts": "npm:typescript@5.0.0",
    }


def test_catalog_in_parent_workspace(project):
    project.workspace("catalog:\n  zod: ^3.22.0\n")
    app = project.root / "apps" / "api"
    deno = project.write_json(app / "deno.json", {"imports": {"zod": "npm:zod@3.21.0"}})
    pkg = project.write_json(app / "package.json", {"dependencies": {"zod": "catalog:"}})

    result = sync(Options(deno_json_path=deno, package_json_path=pkg, silent=True))
    assert [c.new_version for c in result.changes] == ["3.22.0"]


def test_catalog_auto_precision_is_a_noop(project):
    project.workspace("catalog:\n  zod: ^3.22.4\n")
    project.manifest({"dependencies": {"zod": "catalog:"}})
    project.imports({"zod": "npm:zod@3"})
    before = project.deno_json.read_bytes()

    result = sync(opts(project, version_precision="auto"))

    assert not result.changed and result.changes == []
    assert project.deno_json.read_bytes() == before, "Unchanged documents are not rewritten"


def test_missing_named_catalog_leaves_entry(project):
    project.workspace("catalogs:\n  prod:\n    zod: ^3.22.0\n")
    project.manifest({"dependencies": {"zod": "catalog:staging", "lodash": "^4.17.21"}})
    project.imports({"zod": "npm:zod@3.21.0", "lodash": "npm:lodash@4.17.0"})

    result = sync(opts(project))

    assert [c.name for c in result.changes] == ["lodash"], "One unresolvable entry must not block the rest"
    assert project.read_imports()["zod"] == "npm:zod@3.21.0"


def test_catalog_requires_pnpm(project, monkeypatch):
    project.workspace("catalog:\n  zod: ^3.22.0\n")
    project.manifest({"dependencies": {"zod": "catalog:"}})
    project.imports({"zod": "npm:zod@3.21.0"})

    monkeypatch.setattr(core_mod, "detect_package_manager", lambda _cwd: "npm")
    assert not sync(opts(project)).changed

    result = sync(opts(project), detector=lambda _cwd: "pnpm")
    assert result.changed


def test_catalog_without_workspace_file(project):
    project.manifest({"dependencies": {"zod": "catalog:"}})
    project.imports({"zod": "npm:zod@3.21.0"})
    assert not sync(opts(project)).changed


def test_subpath_is_preserved(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash/fp": "npm:lodash@4.17.0/fp"})

    sync(opts(project))
    assert project.read_imports() == {"lodash/fp": "npm:lodash@4.17.21/fp"}


def test_jsr_imports(project):
    project.manifest({"dependencies": {"@std/assert": "^1.0.0", "@std/path": "^0.225.0"}})
    project.imports(
        {
            "@std/assert": "jsr:@std/assert@0.226.0",
            "assert/equals": "jsr:@std/assert@0.226.0/equals",
            "@std/path": "jsr:@std/path@0.224.0",
        }
    )

    result = sync(opts(project))

    assert [(c.name, c.new_version) for c in result.changes] == [
        ("@std/assert", "1.0.0"),
        ("@std/assert", "1.0.0"),
        ("@std/path", "0.225.0"),
    ]
    assert project.read_imports() == {
        "@std/assert": "jsr:@std/assert@1.0.0",
        "assert/equals": "jsr:@std/assert@1.0.0/equals",
        "@std/path": "jsr:@std/path@0.225.0",
    }


def test_unrecognized_and_undeclared_entries_are_untouched(project):
    project.manifest({"dependencies": {"lodash": "^4.17.22", "react": "latest"}})
    imports = {
        "@std/assert": "jsr:@std/assert@^1.0.0",
        "https://example": "https://example.com/module.ts",
        "@std/fs": "jsr:@std/fs@1.0.0",
        "react": "npm:react@18.0.0",
        "local": 42,
        "lodash": "npm:lodash@4.17.21",
    }
    project.imports(imports)

    result = sync(opts(project))

    assert [c.alias for c in result.changes] == ["lodash"]
    after = project.read_imports()
    for alias in ("@std/assert", "https://example", "@std/fs", "react", "local"):
        assert after[alias] == imports[alias], f"{alias} must be byte-identical"
    assert list(after) == list(imports), "Key order is preserved"


@pytest.mark.parametrize(
    ("precision", "current", "expected"),
    [
        ("major", "4.17.0", "npm:lodash@4"),
        ("minor", "4.16.0", "npm:lodash@4.17"),
        ("full", "4", "npm:lodash@4.17.21"),
        ("auto", "4.16", "npm:lodash@4.17"),
    ],
)
def test_precision_modes(project, precision, current, expected):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash": f"npm:lodash@{current}"})

    sync(opts(project, version_precision=precision))
    assert project.read_imports()["lodash"] == expected


def test_precision_guard_omits_noop_entries(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21", "zod": "^3.23.0"}})
    project.imports({"lodash": "npm:lodash@4.17", "zod": "npm:zod@3"})

    result = sync(opts(project, version_precision="auto"))
    assert result.changes == []

    project.imports({"lodash": "npm:lodash@4.17", "zod": "npm:zod@3.23"})
    result = sync(opts(project, version_precision="minor"))
    assert result.changes == []
    assert not result.changed


def test_idempotent_second_run(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}, "devDependencies": {"@std/assert": "^1.0.0"}})
    project.imports({"lodash": "npm:lodash@4.17.0", "@std/assert": "jsr:@std/assert@0.226.0"})

    first = sync(opts(project))
    after_first = project.deno_json.read_bytes()
    second = sync(opts(project))

    assert first.changed and not second.changed
    assert second.changes == []
    assert project.deno_json.read_bytes() == after_first


def test_written_format(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.write_json(project.deno_json, {"tasks": {"dev": "deno run main.ts"}, "imports": {"lodash": "npm:lodash@4.17.0"}})

    sync(opts(project))

    text = project.deno_json.read_text(encoding="utf-8")
    assert text.endswith("}\n") and not text.endswith("\n\n")
    assert '  "imports": {' in text
    assert list(json.loads(text)) == ["tasks", "imports"]


def test_dry_run_and_check_do_not_write(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash": "npm:lodash@4.17.0"})
    before = project.deno_json.read_bytes()

    for flags in ({"dry_run": True}, {"check": True}):
        result = sync(opts(project, show_diff=True, **flags))
        assert result.changed and not result.written
        assert result.diff and "+    \"lodash\": \"npm:lodash@4.17.21\"" in result.diff
        assert project.deno_json.read_bytes() == before


def test_missing_manifest_is_fatal(project):
    project.imports({"lodash": "npm:lodash@4.17.0"})
    before = project.deno_json.read_bytes()

    with pytest.raises(ManifestNotFoundError) as info:
        sync(opts(project))

    assert str(project.package_json.resolve()) in str(info.value)
    assert "package.json not found" in str(info.value)
    assert info.value.exit_code == ExitCode.MISSING_FILE
    assert project.deno_json.read_bytes() == before


def test_missing_import_map_is_fatal(project):
    project.manifest({})
    with pytest.raises(ImportMapNotFoundError, match=r"deno\.json not found"):
        sync(opts(project))


def test_malformed_primary_documents_are_fatal(project):
    project.manifest({"dependencies": {}})
    project.deno_json.write_text("{ broken", encoding="utf-8")
    with pytest.raises(DocumentParseError):
        sync(opts(project))

    project.imports({})
    project.package_json.write_text("nope", encoding="utf-8")
    with pytest.raises(DocumentParseError):
        sync(opts(project))


def test_missing_imports_section(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.write_json(project.deno_json, {"tasks": {}})
    assert not sync(opts(project)).changed


def test_invalid_precision_rejected(project):
    project.manifest({})
    project.imports({})
    with pytest.raises(InvalidPrecisionError):
        sync(opts(project, version_precision="patch"))


def test_summary_output(project, capsys):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash": "npm:lodash@4.17.0"})

    sync(Options(deno_json_path=project.deno_json, package_json_path=project.package_json))
    out = capsys.readouterr().out
    assert "Updated Deno dependencies:" in out
    assert "  - lodash: 4.17.0 → 4.17.21" in out

    sync(Options(deno_json_path=project.deno_json, package_json_path=project.package_json))
    assert "already in sync" in capsys.readouterr().out


def test_silent_prints_nothing(project, capsys):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash": "npm:lodash@4.17.0"})

    result = sync(opts(project))
    assert result.changed
    assert capsys.readouterr().out == ""


def test_write_keeps_file_mode(project):
    project.manifest({"dependencies": {"lodash": "^4.17.21"}})
    project.imports({"lodash": "npm:lodash@4.17.0"})
    project.deno_json.chmod(0o644)

    assert sync(opts(project)).written
    assert stat.S_IMODE(project.deno_json.stat().st_mode) == 0o644


def test_prerelease_range_yields_release_candidate(project):
    project.manifest({"dependencies": {"x": "^2.0.0-beta.1", "y": ">=1.2.3 <2"}})
    project.imports({"x": "npm:x@1.0.0", "y": "npm:y@1.0.0"})

    sync(opts(project))
    assert project.read_imports() == {"x": "npm:x@2.0.0", "y": "npm:y@1.2.3"}
