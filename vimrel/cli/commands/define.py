from __future__ import annotations

import sys
from pathlib import Path

import typer

from vimrel.cli.commands._helpers import exit_on_error, help_option, load_options
from vimrel.cli.context import build_context
from vimrel.core.config import BuilderCommand, merge_options, resolve_builder_config
from vimrel.core.result import Err
from vimrel.services.builder import DescriptorBuilder


def _command(print_version: bool, print_saved_version: bool) -> BuilderCommand | None:
    if print_saved_version:
        return "print_saved_version"
    if print_version:
        return "print_version"
    return None


def define(
    files: list[Path] | None = typer.Argument(
        None, help="Plugin source files (relative to --dir)", show_default=False
    ),
    work_dir: Path | None = typer.Option(None, "--dir", help="The working directory"),
    archive: Path | None = typer.Option(
        None, "-a", "--archive", help="The plugin distribution archive"
    ),
    config: Path | None = typer.Option(None, "-c", "--config", help="Config file (YAML)"),
    fmt: str | None = typer.Option(None, "--format", help="Redistribution format: zip or vba"),
    name: str | None = typer.Option(None, "-n", "--name", help="The plugin name"),
    out: Path | None = typer.Option(
        None, "-o", "--out", help="The filename of the YAML output ('-' for stdout)"
    ),
    print_version: bool = typer.Option(
        False, "--print-version", help="Print the plugin's current version number"
    ),
    print_saved_version: bool = typer.Option(
        False, "--print-saved-version", help="Print the plugin's last saved version number"
    ),
    recipe: Path | None = typer.Option(
        None, "--recipe", help="A vimball recipe (implies --archive, --name and --out)"
    ),
    checksum: str | None = typer.Option(
        None, "--checksum", help="Checksum algorithm for the version comment: md5, sha1, sha256"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Run verbosely"),
    debug: bool = typer.Option(False, "--debug", help="Show debug messages"),
    _help: bool = help_option(),
) -> None:
    """Write the YAML script definition (id, version, message, file) of a Vim plugin."""
    ctx = build_context(progname="vimscriptdef", verbose=verbose, debug=debug)

    options = merge_options(
        load_options(config, ctx),
        {
            "dir": work_dir,
            "archive": archive,
            "format": fmt,
            "name": name,
            "outfile": out,
            "files": files or None,
            "recipe": recipe,
            "checksum": checksum,
            "command": _command(print_version, print_saved_version),
        },
    )
    ctx.console.debug(f"options: {options}")

    resolved = resolve_builder_config(options)
    exit_on_error(resolved, ctx)
    assert not isinstance(resolved, Err)
    builder = DescriptorBuilder(resolved.value, console=ctx.console)

    match resolved.value.command:
        case "print_version":
            version = builder.current_version()
            exit_on_error(version, ctx)
            typer.echo(version.unwrap())
        case "print_saved_version":
            saved = builder.saved_version()
            exit_on_error(saved, ctx)
            if saved.unwrap():
                typer.echo(saved.unwrap())
        case _:
            descriptor = builder.build()
            exit_on_error(descriptor, ctx)
            assert not isinstance(descriptor, Err)
            written = builder.write(descriptor.value, sys.stdout)
            exit_on_error(written, ctx)
