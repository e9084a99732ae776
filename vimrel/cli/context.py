from __future__ import annotations

from dataclasses import dataclass

from vimrel.output.console import ConsoleProtocol, RichConsole, Verbosity


@dataclass(frozen=True, slots=True)
class CLIContext:
    console: ConsoleProtocol


def build_context(*, progname: str, verbose: bool = False, debug: bool = False) -> CLIContext:
    verbosity = Verbosity.from_flags(verbose=verbose, debug=debug)
    return CLIContext(console=RichConsole(verbosity, progname=progname))
