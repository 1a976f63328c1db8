from __future__ import annotations

import os
from pathlib import Path
from typing import cast

import typer

from mkt.bundles.constants import DEFAULT_API_VERSION
from mkt.bundles.dependencies import ConflictPolicy
from mkt.cli.commands._helpers import fail_with_errors, require_choice
from mkt.cli.context import build_context
from mkt.output.console import Style
from mkt.services.orchestrator import ReleaseSettings, release_bundles
from mkt.services.packaging import PackagingBackend

_BACKENDS = ("sf", "builtin")
_POLICIES = ("warn", "fail")


def release(
    version: str = typer.Argument(..., help="Release version written to every bundle"),
    tag: str | None = typer.Option(None, "--tag", help="Release tag (default: v<version>)"),
    api_version: str = typer.Option(
        DEFAULT_API_VERSION, "--api-version", help="API version of generated manifests"
    ),
    out: Path | None = typer.Option(None, "--out", help="Output directory (default: .mkt/dist)"),
    backend: str = typer.Option("sf", "--backend", help="Manifest generator: sf|builtin"),
    on_conflict: str = typer.Option(
        "warn", "--on-conflict", help="Dependency file already present: warn|fail"
    ),
    repo: str | None = typer.Option(
        None, "--repo", help="GitHub repository owner/name (default: $GITHUB_REPOSITORY)"
    ),
    publish: bool = typer.Option(True, "--publish/--no-publish", help="Create release + upload"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Build artifacts, publish nothing"),
    discard_changes: bool | None = typer.Option(
        None,
        "--discard-changes/--keep-changes",
        help="Restore the git working tree at the end (default: on in CI)",
    ),
) -> None:
    """Package every bundle, write index.json and publish a release."""
    backend = require_choice(backend, _BACKENDS, "--backend")
    on_conflict = require_choice(on_conflict, _POLICIES, "--on-conflict")

    ctx = build_context()
    root = ctx.workspace.root

    if discard_changes is None:
        discard_changes = bool(os.environ.get("CI"))

    settings = ReleaseSettings(
        workspace_root=root,
        config=ctx.config,
        version=version,
        tag=tag,
        api_version=api_version,
        out_dir=(root / out) if out is not None else ctx.workspace.dist_dir,
        backend=cast(PackagingBackend, backend),
        conflict_policy=cast(ConflictPolicy, on_conflict),
        repo=repo,
        publish=publish,
        dry_run=dry_run,
        discard_changes=discard_changes,
    )

    ctx.console.print(f"workspace: {root}", Style.DIM)
    report = release_bundles(settings, ctx.console)

    for path in report.archives:
        ctx.console.print(str(path), Style.DIM)
    if report.warnings:
        ctx.console.warning(f"{len(report.warnings)} warning(s)")

    if not report.ok:
        fail_with_errors(ctx.console, report.errors)

    ctx.console.success(f"released {settings.release_tag}")
