from __future__ import annotations

import typer

from vimrel import __version__
from vimrel.cli.commands._helpers import NO_DEFAULT_HELP, help_option
from vimrel.cli.commands.define import define
from vimrel.cli.commands.upload import upload


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    context_settings=NO_DEFAULT_HELP,
    help="Build release descriptors for Vim plugins and publish them on www.vim.org.",
)

app.command("def", context_settings=NO_DEFAULT_HELP)(define)
app.command("upload", context_settings=NO_DEFAULT_HELP)(upload)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    _version: bool = typer.Option(
        False,
        "--version",
        is_eager=True,
        expose_value=False,
        callback=_print_version,
        help="Show version and exit.",
    ),
    _help: bool = help_option(),
) -> None:
    pass


# Standalone tools: `vimscriptdef` and `vimscriptuploader`.
def_app = typer.Typer(add_completion=False)
def_app.command(context_settings=NO_DEFAULT_HELP)(define)

upload_app = typer.Typer(add_completion=False)
upload_app.command(context_settings=NO_DEFAULT_HELP)(upload)


def main() -> None:
    app()


def def_main() -> None:
    def_app(prog_name="vimscriptdef")


def upload_main() -> None:
    upload_app(prog_name="vimscriptuploader")
