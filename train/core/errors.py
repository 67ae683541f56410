"""Process exit codes.

The values are used as shell exit codes and must stay stable so that
wrapping scripts can tell a refused release apart from a broken one.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad input, refused precondition, missing release id)
    - 2: Environment error (wrong codebase, unknown remote, bad config)
    - 3: Git error (a version-control command failed)
    - 5: I/O error (release store unreadable or unwritable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
