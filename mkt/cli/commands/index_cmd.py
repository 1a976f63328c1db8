from __future__ import annotations

from pathlib import Path

import typer

from mkt.bundles.index import assemble_index, write_index
from mkt.cli.commands._helpers import fail_with_errors
from mkt.cli.context import build_context


def index(
    version: str = typer.Argument(..., help="Version written to every bundle entry"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: .mkt/dist/index.json)"),
) -> None:
    """Write index.json without packaging anything."""
    ctx = build_context()
    root = ctx.workspace.root

    assembly = assemble_index(workspace_root=root, config=ctx.config, version=version)
    for message in assembly.errors:
        ctx.console.error(message)

    path = (root / out) if out is not None else ctx.workspace.index_path
    try:
        write_index(assembly.document, path)
    except OSError as e:
        assembly.errors.append(f"index: cannot write {path}: {e}")

    if assembly.errors:
        fail_with_errors(ctx.console, assembly.errors)

    ctx.console.success(
        f"{path} ({len(assembly.document.bundles)} bundle(s), "
        f"{len(assembly.document.packages)} package(s))"
    )
