from __future__ import annotations

from pathlib import Path

import typer

from vimrel.cli.commands._helpers import exit_on_error, help_option, load_options
from vimrel.cli.context import CLIContext, build_context
from vimrel.core.config import UploaderConfig, merge_options, resolve_uploader_config
from vimrel.core.errors import ErrorCode
from vimrel.core.result import Err
from vimrel.services.uploader import Uploader
from vimrel.site.client import RequestsSiteClient, SiteClient, SiteError


def make_client(config: UploaderConfig) -> SiteClient:
    return RequestsSiteClient(config.base_url, timeout=config.timeout)


def _read_message_file(path: Path, ctx: CLIContext) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        ctx.console.error(f"Message file does not exist: {path}")
    except (OSError, UnicodeDecodeError) as e:
        ctx.console.error(f"Cannot read message file {path}: {e}")
    raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))


def upload(
    descriptors: list[Path] | None = typer.Argument(
        None, help="YAML script definitions (id, version, message, file)", show_default=False
    ),
    config: Path | None = typer.Option(None, "-c", "--config", help="Config file (YAML)"),
    script_id: str | None = typer.Option(None, "--id", help="The script ID"),
    file: str | None = typer.Option(None, "--file", help="The plugin archive"),
    message: str | None = typer.Option(None, "--message", help="The version comment"),
    message_file: Path | None = typer.Option(
        None, "--message-file", help="A file containing the version comment (wins over --message)"
    ),
    version: str | None = typer.Option(None, "--version", help="The script version"),
    username: str | None = typer.Option(
        None, "--username", envvar="VIMSCRIPT_USERNAME", help="User name"
    ),
    password: str | None = typer.Option(
        None, "--password", envvar="VIMSCRIPT_PASSWORD", help="User password"
    ),
    dry_run: bool | None = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        "-n",
        help="Don't actually upload anything; just print the script definitions",
        show_default=False,
    ),
    base_url: str | None = typer.Option(None, "--base-url", help="Site root URL"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Run verbosely"),
    debug: bool = typer.Option(False, "--debug", help="Show debug messages"),
    _help: bool = help_option(),
) -> None:
    """Upload new plugin versions to www.vim.org.

    Values in a script definition win over --id, --file, --message and
    --version, which only fill in what a definition leaves out.
    """
    ctx = build_context(progname="vimscriptuploader", verbose=verbose, debug=debug)

    if not descriptors:
        ctx.console.error("No yaml script definition given")
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    if message_file is not None:
        message = _read_message_file(message_file, ctx)

    options = merge_options(
        load_options(config, ctx),
        {
            "id": script_id,
            "file": file,
            "message": message,
            "version": version,
            "username": username,
            "password": password,
            "dry": dry_run,
            "base_url": base_url,
        },
    )
    resolved = resolve_uploader_config(options)
    exit_on_error(resolved, ctx)
    assert not isinstance(resolved, Err)
    settings = resolved.value
    ctx.console.debug(f"descriptors: {[str(d) for d in descriptors]}")

    client = make_client(settings)
    uploader = Uploader(settings, client=client, console=ctx.console)
    try:
        result = uploader.run(descriptors)
    except SiteError as e:
        ctx.console.error(str(e))
        raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))
    finally:
        client.close()

    exit_on_error(result, ctx)
    assert not isinstance(result, Err)
    report = result.value
    if report.failed:
        ctx.console.warning(
            f"{len(report.failed)} of {len(descriptors)} script definitions were not uploaded"
        )
