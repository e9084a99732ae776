"""Git operations module."""

from vimrel.git.repository import GitError, Repository

__all__ = ["GitError", "Repository"]
