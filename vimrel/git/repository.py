"""Git repository queries used to build changelogs.

Usage:
    repo = Repository(Path("."))
    if repo.exists():
        match repo.tags():
            case Ok(tags):
                print(tags)
            case Err(e):
                print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vimrel.core.result import Err, Ok, Result
from vimrel.platform.process import ProcessError
from vimrel.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A git working copy.

    Attributes:
        path: Path to the working copy root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check for a .git directory (or a .git file, for worktrees)."""
        return (self.path / ".git").exists()

    def tags(self) -> Result[list[str], GitError]:
        """List all tag names, in git's order."""
        result = self._run(["tag"])
        match result:
            case Err(e):
                return Err(self._error("tag", e))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def log_oneline_since(self, ref: str) -> Result[list[str], GitError]:
        """One line per commit reachable from HEAD but not from ``ref``.

        Newest commit first, each line ``<abbrev-hash> <subject>``.
        """
        result = self._run(["log", "--oneline", "--no-decorate", "--no-color", f"{ref}.."])
        match result:
            case Err(e):
                return Err(self._error(f"log --oneline {ref}..", e))
            case Ok(stdout):
                return Ok([ln for ln in stdout.splitlines() if ln.strip()])

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )

    @staticmethod
    def _error(command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or f"git {command} failed",
            returncode=e.returncode,
        )
