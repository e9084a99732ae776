"""Script id and version markers embedded in Vim plugin sources.

A plugin announces its www.vim.org script id through a GetLatestVimScripts
line and its version through the ``loaded_<name>`` guard variable::

    " GetLatestVimScripts: 1863 1 :AutoInstall: tlib.vim
    let loaded_tlib = 105

The line parsers are pure; ``find_script_id`` and ``find_version`` add the
file scanning on top (first match wins, in file-then-line order).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from vimrel.core.result import Err, Ok, Result
from vimrel.output.console import ConsoleProtocol

__all__ = [
    "SourceReadError",
    "find_script_id",
    "find_version",
    "format_version",
    "parse_loaded_version",
    "parse_script_id",
]

_NONZERO_DIGIT = re.compile(r"[1-9]")


@dataclass(frozen=True, slots=True)
class SourceReadError:
    message: str
    path: Path


def _script_id_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf'^" GetLatestVimScripts: (\d+) +\d+ +(?::AutoInstall: +)?{re.escape(name)}\.vim$'
    )


def _loaded_re(name: str) -> re.Pattern[str]:
    return re.compile(rf"^let (?:g:)?loaded_{re.escape(name)} = (\d+)$")


def format_version(number: int) -> str:
    """Format ``major * 100 + minor`` as "MAJOR.MINOR" (105 -> "1.05")."""
    major, minor = divmod(number, 100)
    return f"{major}.{minor:02d}"


def parse_script_id(line: str, name: str) -> str | None:
    """Return the script id of a GetLatestVimScripts line for plugin ``name``.

    Ids made only of zeros are not ids.
    """
    m = _script_id_re(name).match(line.rstrip("\r\n"))
    if m is None:
        return None
    script_id = m.group(1)
    if not _NONZERO_DIGIT.search(script_id):
        return None
    return script_id


def parse_loaded_version(line: str, name: str) -> str | None:
    """Return the formatted version of a ``let loaded_<name> = N`` line."""
    m = _loaded_re(name).match(line.rstrip("\r\n"))
    if m is None:
        return None
    return format_version(int(m.group(1)))


def _read_lines(path: Path) -> Result[list[str], SourceReadError]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return Err(SourceReadError(f"Cannot read source file: {e}", path=path))
    return Ok(text.splitlines())


def _first_match(
    files: Iterable[Path],
    name: str,
    parse: Callable[[str, str], str | None],
    console: ConsoleProtocol,
    what: str,
) -> Result[str | None, SourceReadError]:
    for path in files:
        console.debug(f"Get {what} in {path}")
        lines = _read_lines(path)
        if isinstance(lines, Err):
            return lines
        for line in lines.value:
            found = parse(line, name)
            if found is not None:
                return Ok(found)
    return Ok(None)


def find_script_id(
    files: Iterable[Path], name: str, *, console: ConsoleProtocol
) -> Result[str | None, SourceReadError]:
    """Find the first script id for ``name``; Ok(None) if no file has one."""
    console.debug(f"Get script ID for {name}")
    result = _first_match(files, name, parse_script_id, console, "script ID")
    if isinstance(result, Ok) and result.value is not None:
        console.debug(f"{name}: Script ID is #{result.value}")
    return result


def find_version(
    files: Iterable[Path], name: str, *, console: ConsoleProtocol
) -> Result[str | None, SourceReadError]:
    """Find the first version number for ``name``; Ok(None) if no file has one."""
    console.debug(f"Get version number for {name}")
    result = _first_match(files, name, parse_loaded_version, console, "version number")
    if isinstance(result, Ok) and result.value is not None:
        console.debug(f"Version number is {result.value}")
    return result
