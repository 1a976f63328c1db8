from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mkt import __version__
from mkt.cli.app import app
from mkt.core.errors import ErrorCode

runner = CliRunner()


@pytest.fixture
def in_workspace(marketplace: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("MKT_WORKSPACE", str(marketplace))
    return marketplace


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_no_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["index", "1.0.0"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_workspace_option(marketplace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MKT_WORKSPACE", "")

    result = runner.invoke(app, ["--workspace", str(marketplace), "files", "alpha"])

    assert result.exit_code == 0, result.output
    assert "objects/Alpha__c" in result.output


def test_workspace_option_rejects_non_workspace(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MKT_WORKSPACE", "")

    result = runner.invoke(app, ["--workspace", str(tmp_path), "files", "alpha"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_release_builtin_no_publish(in_workspace: Path) -> None:
    result = runner.invoke(app, ["release", "1.0.0", "--backend", "builtin", "--no-publish"])

    assert result.exit_code == 0, result.output
    index = json.loads((in_workspace / ".mkt" / "dist" / "index.json").read_text(encoding="utf-8"))
    assert [b["id"] for b in index["bundles"]] == ["alpha", "beta"]
    assert (in_workspace / ".mkt" / "dist" / "beta-with-dependencies.zip").is_file()
    assert "released v1.0.0" in result.output


def test_release_custom_out(in_workspace: Path) -> None:
    result = runner.invoke(
        app, ["release", "2.0.0", "--backend", "builtin", "--no-publish", "--out", "build/out"]
    )

    assert result.exit_code == 0, result.output
    assert (in_workspace / "build" / "out" / "alpha.zip").is_file()


def test_release_rejects_unknown_backend(in_workspace: Path) -> None:
    result = runner.invoke(app, ["release", "1.0.0", "--backend", "ant"])

    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_release_with_errors_exits_with_build_error(in_workspace: Path) -> None:
    (in_workspace / "bundles" / "alpha" / "info.json").write_text("{", encoding="utf-8")

    result = runner.invoke(app, ["release", "1.0.0", "--backend", "builtin", "--no-publish"])

    assert result.exit_code == int(ErrorCode.BUILD_ERROR)
    assert "1 error(s)" in result.output
    assert "invalid JSON" in result.output


def test_index_command(in_workspace: Path) -> None:
    result = runner.invoke(app, ["index", "3.0.0", "--out", "index.json"])

    assert result.exit_code == 0, result.output
    index = json.loads((in_workspace / "index.json").read_text(encoding="utf-8"))
    assert index["title"] == "Test Marketplace"
    assert {b["version"] for b in index["bundles"]} == {"3.0.0"}
    assert not (in_workspace / ".mkt" / "dist" / "alpha.zip").exists()


def test_files_unknown_bundle(in_workspace: Path) -> None:
    result = runner.invoke(app, ["files", "nope"])

    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_manifest_uninstall(in_workspace: Path) -> None:
    (in_workspace / "package.xml").write_text(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<Package xmlns="http://soap.sforce.com/2006/04/metadata">'
        "<types><members>Foo</members><name>ApexClass</name></types>"
        "<version>62.0</version></Package>",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["manifest", "uninstall", "package.xml", "--out", "out"])

    assert result.exit_code == 0, result.output
    destructive = (in_workspace / "out" / "destructiveChanges.xml").read_text(encoding="utf-8")
    package = (in_workspace / "out" / "package.xml").read_text(encoding="utf-8")
    assert "<members>Foo</members>" in destructive
    assert "<version>62.0</version>" in package
    assert "<types>" not in package


def test_manifest_uninstall_malformed(in_workspace: Path) -> None:
    (in_workspace / "package.xml").write_text("<Package>", encoding="utf-8")

    result = runner.invoke(app, ["manifest", "uninstall", "package.xml"])

    assert result.exit_code == int(ErrorCode.USER_ERROR)
