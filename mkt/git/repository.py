"""Git working-tree operations used at the end of a release run.

A release run must not leave generated files behind in the checkout. The
orchestrator checks the working tree and, when asked to, discards local
changes.

Usage:
    repo = Repository(Path("/path/to/repo"))
    match repo.status():
        case Ok(status) if not status.is_clean:
            repo.discard_changes()
        case Err(e):
            print(e.message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mkt.core.result import Err, Ok, Result
from mkt.platform.process import ProcessError
from mkt.platform.process import run as run_process

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]

GIT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation."""

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One `git status --porcelain` line.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path relative to the repository root
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0


class Repository:
    """A git checkout.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return (self.path / ".git").exists()

    def status(self) -> Result[GitStatus, GitError]:
        """Run `git status --porcelain=v1 -b` and parse it."""
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="status",
                        message=e.stderr.strip() or "git status failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def discard_changes(self) -> Result[None, GitError]:
        """Restore tracked files and remove untracked, non-ignored files."""
        for args in (["checkout", "--", "."], ["clean", "-fd"]):
            result = self._run(args)
            if isinstance(result, Err):
                e = result.error
                return Err(
                    GitError(
                        command=" ".join(args),
                        message=e.stderr.strip() or f"git {args[0]} failed",
                        returncode=e.returncode,
                    )
                )
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=GIT_TIMEOUT_SECONDS
        )

    def _parse_status(self, output: str) -> GitStatus:
        lines = [ln for ln in output.splitlines() if ln.strip()]
        if not lines:
            return GitStatus(branch="")

        branch = ""
        entry_lines = lines
        if lines[0].startswith("##"):
            # "## main...origin/main [ahead 1]"
            branch = lines[0][2:].strip().split(" [", 1)[0].split("...", 1)[0].strip()
            entry_lines = lines[1:]

        entries: list[StatusEntry] = []
        for line in entry_lines:
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))

        return GitStatus(branch=branch, entries=tuple(entries))
