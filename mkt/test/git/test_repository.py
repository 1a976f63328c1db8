"""Tests for git/repository.py."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

import mkt.git.repository as repo_mod
from mkt.core.result import Err, Ok, Result
from mkt.git.repository import GitStatus, Repository, StatusEntry
from mkt.platform.process import ProcessError


class TestGitStatus:
    def test_clean(self) -> None:
        assert GitStatus(branch="main").is_clean

    def test_dirty_with_entries(self) -> None:
        status = GitStatus(
            branch="main",
            entries=(StatusEntry(" M", "a.cls"), StatusEntry("??", "b.cls")),
        )
        assert not status.is_clean


class TestRepositoryWithFakeGit:
    def test_status_parses_porcelain(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []

        def fake_run(
            cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
        ) -> Result[str, ProcessError]:
            calls.append(cmd)
            return Ok("## main...origin/main [ahead 1]\n M bundles/alpha/info.json\n?? .mkt/\n")

        monkeypatch.setattr(repo_mod, "run_process", fake_run)

        result = Repository(tmp_path).status()

        assert isinstance(result, Ok)
        assert result.value.branch == "main"
        assert result.value.entries == (
            StatusEntry(" M", "bundles/alpha/info.json"),
            StatusEntry("??", ".mkt/"),
        )
        assert calls[0][-3:] == ["status", "--porcelain=v1", "-b"]

    def test_status_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(
            cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
        ) -> Result[str, ProcessError]:
            return Err(ProcessError(tuple(cmd), 128, "", "fatal: not a git repository\n"))

        monkeypatch.setattr(repo_mod, "run_process", fake_run)

        result = Repository(tmp_path).status()

        assert isinstance(result, Err)
        assert result.error.message == "fatal: not a git repository"
        assert result.error.returncode == 128

    def test_discard_runs_checkout_then_clean(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[list[str]] = []

        def fake_run(
            cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
        ) -> Result[str, ProcessError]:
            calls.append(cmd[3:])
            return Ok("")

        monkeypatch.setattr(repo_mod, "run_process", fake_run)

        assert Repository(tmp_path).discard_changes() == Ok(None)
        assert calls == [["checkout", "--", "."], ["clean", "-fd"]]

    def test_discard_stops_on_first_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[list[str]] = []

        def fake_run(
            cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
        ) -> Result[str, ProcessError]:
            calls.append(cmd[3:])
            return Err(ProcessError(tuple(cmd), 1, "", ""))

        monkeypatch.setattr(repo_mod, "run_process", fake_run)

        result = Repository(tmp_path).discard_changes()

        assert isinstance(result, Err)
        assert result.error.command == "checkout -- ."
        assert len(calls) == 1


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_discard_changes_restores_real_checkout(tmp_path: Path) -> None:
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "dev@example.com")
    _git(tmp_path, "config", "user.name", "dev")
    (tmp_path / "info.json").write_text("{}", encoding="utf-8")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "init")

    (tmp_path / "info.json").write_text('{"changed": true}', encoding="utf-8")
    (tmp_path / "package.xml").write_text("<Package/>", encoding="utf-8")

    repo = Repository(tmp_path)
    assert repo.exists()
    assert not repo.status().unwrap().is_clean

    assert repo.discard_changes() == Ok(None)

    assert repo.status().unwrap().is_clean
    assert (tmp_path / "info.json").read_text(encoding="utf-8") == "{}"
    assert not (tmp_path / "package.xml").exists()
