"""Error codes for CLI exit status.

Both tools report failures through their exit status only. The values are
kept compatible with the historical tool pair: configuration and validation
failures exit with 5, printing the help text exits with 1.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: Help was printed instead of running
    - 4: Network error (site unreachable, form missing, HTTP error)
    - 5: Configuration or validation error
    """

    OK = 0
    HELP = 1
    NETWORK_ERROR = 4
    CONFIG_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")
