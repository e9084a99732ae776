"""Console output abstraction.

Services never print or log directly. They receive a console object at
construction time and report progress through it, so the verbosity chosen on
the command line travels with the object instead of living in module state.
Diagnostics go to stderr; machine-readable output (descriptor YAML, dry-run
records) is written by the CLI layer to stdout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import Protocol

__all__ = [
    "Style",
    "Verbosity",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DEBUG = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Verbosity(IntEnum):
    """How much the console shows. Errors and warnings are always shown."""

    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2

    @classmethod
    def from_flags(cls, *, verbose: bool = False, debug: bool = False) -> Verbosity:
        if debug:
            return cls.DEBUG
        if verbose:
            return cls.VERBOSE
        return cls.NORMAL


class ConsoleProtocol(Protocol):
    """Protocol for diagnostic output."""

    verbosity: Verbosity

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None:
        """Print a message shown with --verbose."""
        ...

    def debug(self, message: str) -> None:
        """Print a message shown with --debug."""
        ...


class RichConsole:
    """Console implementation using Rich, writing to stderr."""

    def __init__(self, verbosity: Verbosity = Verbosity.NORMAL, *, progname: str = "vimrel") -> None:
        from rich.console import Console

        self.verbosity = verbosity
        self.progname = progname
        self._console = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DEBUG: "dim",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def _tagged(self, tag: str, markup: str, message: str) -> None:
        self._console.print(f"[{markup}]{self.progname}: {tag}[/{markup}] ", end="")
        self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._tagged("ok", "green", message)

    def error(self, message: str) -> None:
        self._tagged("error:", "red bold", message)

    def warning(self, message: str) -> None:
        self._tagged("warning:", "yellow", message)

    def info(self, message: str) -> None:
        if self.verbosity >= Verbosity.VERBOSE:
            self._tagged("info:", "cyan", message)

    def debug(self, message: str) -> None:
        if self.verbosity >= Verbosity.DEBUG:
            self._tagged("debug:", "dim", message)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing.

    Captures everything at DEBUG verbosity unless told otherwise.
    """

    verbosity: Verbosity = Verbosity.DEBUG
    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"ok {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        if self.verbosity >= Verbosity.VERBOSE:
            self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def debug(self, message: str) -> None:
        if self.verbosity >= Verbosity.DEBUG:
            self.outputs.append(OutputRecord(f"debug: {message}", Style.DEBUG))

    # Test helper methods

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
