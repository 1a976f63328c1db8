from __future__ import annotations

import os
from pathlib import Path

import typer

from mkt import __version__
from mkt.cli.commands.files_cmd import files
from mkt.cli.commands.index_cmd import index
from mkt.cli.commands.manifest_cmd import manifest_app
from mkt.cli.commands.release_cmd import release
from mkt.core.config import CONFIG_FILE_NAME
from mkt.core.errors import ErrorCode
from mkt.core.workspace import is_workspace_root

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(release)
app.command()(index)
app.command()(files)

# Sub-apps
app.add_typer(manifest_app, name="manifest")


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        help="Workspace root (overrides auto detection)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if workspace is not None:
        try:
            root = workspace.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --workspace: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir() or not is_workspace_root(root):
            typer.echo(
                f"error: --workspace '{root}' is not a valid workspace (missing {CONFIG_FILE_NAME})",
                err=True,
            )
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ["MKT_WORKSPACE"] = str(root)


def main() -> None:
    app()
