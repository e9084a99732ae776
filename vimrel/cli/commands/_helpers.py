"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import typer

from vimrel.core.config import load_config_file
from vimrel.core.errors import ErrorCode
from vimrel.core.result import Err, Result
from vimrel.core.structured import StrDict
from vimrel.output.console import Style

if TYPE_CHECKING:
    from vimrel.cli.context import CLIContext


T = TypeVar("T")
E = TypeVar("E")

# Commands declare their own -h/--help (see help_option), which exits with 1.
NO_DEFAULT_HELP: dict[str, Any] = {"help_option_names": []}


def _print_help(ctx: typer.Context, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit(code=int(ErrorCode.HELP))


def help_option() -> Any:
    return typer.Option(
        False,
        "-h",
        "--help",
        is_eager=True,
        expose_value=False,
        callback=_print_help,
        help="Show this message and exit.",
    )


def exit_on_error(
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

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


def load_options(path: Path | None, ctx: CLIContext) -> StrDict:
    """Options from the -c/--config file, empty without one. Exits on error."""
    if path is None:
        return {}
    loaded = load_config_file(path)
    exit_on_error(loaded, ctx)
    assert not isinstance(loaded, Err)
    ctx.console.debug(f"config file {path}: {sorted(loaded.value)}")
    return loaded.value
