"""Subprocess execution with Result-based error handling.

Usage:
    match run(["git", "tag"], cwd=Path(".")):
        case Ok(stdout):
            tags = stdout.splitlines()
        case Err(error):
            console.warning(str(error))
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from vimrel.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code of the process, -1 if it never ran or timed out.
        stdout: Standard output (may be empty).
        stderr: Standard error, or the reason the process could not start.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        detail = self.stderr.strip()
        if detail:
            return f"{cmd_str} failed (exit {self.returncode}): {detail}"
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) when the command exits with 0, Err(ProcessError) otherwise.
    """

    def failure(returncode: int, stdout: str, stderr: str) -> Err[ProcessError]:
        return Err(ProcessError(tuple(cmd), returncode, stdout, stderr))

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return failure(-1, "", f"Command timed out after {timeout}s")
    except OSError as e:
        return failure(-1, "", str(e))

    if proc.returncode != 0:
        return failure(proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)
