from __future__ import annotations

from pathlib import Path

import typer

from mkt.bundles.index import bundle_files
from mkt.cli.commands._helpers import exit_on_error
from mkt.cli.context import build_context
from mkt.core.errors import ErrorCode


def files(
    bundle: str = typer.Argument(..., help="Bundle folder name (or path)"),
) -> None:
    """List the files of one bundle as they appear in the index."""
    ctx = build_context()

    bundle_dir = Path(bundle)
    if not bundle_dir.is_dir():
        bundle_dir = ctx.config.bundles_dir(ctx.workspace.root) / bundle
    if not bundle_dir.is_dir():
        ctx.console.error(f"bundle not found: {bundle}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    for rel in exit_on_error(bundle_files(bundle_dir), ctx, ErrorCode.IO_ERROR):
        ctx.console.print(rel)
