"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from mkt.core.errors import ErrorCode
from mkt.core.result import Err, Result
from mkt.output.console import ConsoleProtocol, Style

if TYPE_CHECKING:
    from mkt.cli.context import CLIContext

T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.BUILD_ERROR,
) -> T:
    """Return the Ok value, or print the error and exit.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))
    return result.value


def require_choice(value: str, choices: Sequence[str], option: str) -> str:
    if value not in choices:
        typer.echo(f"error: {option} must be one of: {', '.join(choices)}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return value


def fail_with_errors(console: ConsoleProtocol, errors: Sequence[str]) -> NoReturn:
    """Print the collected errors as one block and exit with BUILD_ERROR."""
    console.header(f"{len(errors)} error(s)")
    console.print("\n".join(errors), Style.ERROR)
    raise typer.Exit(code=int(ErrorCode.BUILD_ERROR))
