"""Exit codes for the release CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments, unknown bundle)
- 2: Environment error (workspace or marketplace.json not found)
- 3: Build error (one or more bundles failed to package or publish)
- 4: Network error (release host unreachable)
- 5: I/O error (file not found, permission denied)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

