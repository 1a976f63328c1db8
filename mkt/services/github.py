"""GitHub release publishing through the gh CLI.

A release is identified by its tag. Assets are uploaded with
`gh release upload --clobber`, which makes uploads safe to retry; gh sets
the content type and length of each asset.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path
from time import sleep

from mkt.core.result import Err, Ok, Result
from mkt.output.console import ConsoleProtocol, Style
from mkt.platform.process import ProcessError
from mkt.platform.process import run as run_process
from mkt.services.errors import ReleaseError, ReleaseErrorKind
from mkt.services.timeouts import (
    GH_RETRY_ATTEMPTS,
    GH_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
    GH_UPLOAD_TIMEOUT_SECONDS,
)

__all__ = [
    "create_release",
    "ensure_gh_auth",
    "ensure_gh_available",
    "release_exists",
    "upload_asset",
    "upload_assets",
]


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def _run_gh(
    *,
    workspace_root: Path,
    cmd: list[str],
    kind: ReleaseErrorKind,
    message: str,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = 1,
) -> Result[str, ReleaseError]:
    attempts = max(1, retry_attempts)
    last_error: ProcessError | None = None
    for attempt in range(attempts):
        result = run_process(cmd, cwd=workspace_root, timeout=timeout)
        if isinstance(result, Ok):
            return result

        last_error = result.error
        if attempt < attempts - 1 and _is_transient_gh_error(last_error):
            sleep(GH_RETRY_DELAY_SECONDS * (attempt + 1))
            continue
        break

    hint = last_error.detail() if last_error is not None else None
    return Err(ReleaseError(kind=kind, message=message, hint=hint))


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, workspace_root: Path) -> Result[None, ReleaseError]:
    result = run_process(["gh", "auth", "status"], cwd=workspace_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login (or set GH_TOKEN)",
            )
        )
    return Ok(None)


def release_exists(*, workspace_root: Path, repo: str, tag: str) -> bool:
    result = run_process(
        ["gh", "release", "view", tag, "--repo", repo, "--json", "tagName"],
        cwd=workspace_root,
        timeout=GH_TIMEOUT_SECONDS,
    )
    return isinstance(result, Ok)


def create_release(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    title: str,
    notes: str,
    console: ConsoleProtocol,
    prerelease: bool = False,
) -> Result[str, ReleaseError]:
    """Create the release (or reuse an existing one) and return its tag."""
    if release_exists(workspace_root=workspace_root, repo=repo, tag=tag):
        console.print(f"release {tag} already exists, reusing it", Style.DIM)
        return Ok(tag)

    cmd = ["gh", "release", "create", tag, "--repo", repo, "--title", title, "--notes", notes]
    if prerelease:
        cmd.append("--prerelease")
    console.print(f"gh release create {tag} --repo {repo}", Style.DIM)
    result = _run_gh(
        workspace_root=workspace_root,
        cmd=cmd,
        kind="release_failed",
        message=f"failed to create release {tag}",
    )
    if isinstance(result, Err):
        return result
    return Ok(tag)


def upload_asset(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    path: Path,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    """Upload one file as a release asset; returns the asset name."""
    if not path.is_file():
        return Err(ReleaseError(kind="upload_failed", message=f"asset not found: {path}"))

    console.print(f"gh release upload {tag} {path.name}", Style.DIM)
    result = _run_gh(
        workspace_root=workspace_root,
        cmd=["gh", "release", "upload", tag, str(path), "--repo", repo, "--clobber"],
        kind="upload_failed",
        message=f"failed to upload {path.name}",
        timeout=GH_UPLOAD_TIMEOUT_SECONDS,
        retry_attempts=GH_RETRY_ATTEMPTS,
    )
    if isinstance(result, Err):
        return result
    return Ok(path.name)


def upload_assets(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    paths: Sequence[Path],
    console: ConsoleProtocol,
) -> list[Result[str, ReleaseError]]:
    """Upload each file independently; one result per file."""
    return [
        upload_asset(workspace_root=workspace_root, repo=repo, tag=tag, path=p, console=console)
        for p in paths
    ]
