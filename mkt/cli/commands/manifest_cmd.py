from __future__ import annotations

from pathlib import Path

import typer

from mkt.bundles.constants import DESTRUCTIVE_CHANGES_XML, PACKAGE_XML
from mkt.bundles.manifest import load_manifest, synthesize_uninstall
from mkt.cli.commands._helpers import exit_on_error
from mkt.cli.context import build_context
from mkt.core.errors import ErrorCode
from mkt.platform.files import atomic_write_text

manifest_app = typer.Typer(add_completion=False, no_args_is_help=True)


@manifest_app.command("uninstall")
def uninstall_cmd(
    manifest: Path = typer.Argument(..., help="Install package.xml"),
    out: Path = typer.Option(Path("uninstall"), "--out", help="Output directory"),
) -> None:
    """Write package.xml + destructiveChanges.xml that remove a manifest's components."""
    ctx = build_context()
    root = ctx.workspace.root

    source = manifest if manifest.is_absolute() else root / manifest
    document = exit_on_error(load_manifest(source), ctx, ErrorCode.USER_ERROR)
    descriptors = synthesize_uninstall(document)

    out_dir = out if out.is_absolute() else root / out
    try:
        atomic_write_text(out_dir / PACKAGE_XML, descriptors.render_package())
        atomic_write_text(
            out_dir / DESTRUCTIVE_CHANGES_XML, descriptors.render_destructive_changes()
        )
    except OSError as e:
        ctx.console.error(f"cannot write {out_dir}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR)) from e

    types = len(document.types)
    ctx.console.success(f"{out_dir} ({types} type(s))")
