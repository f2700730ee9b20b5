"""Exit codes for the rdist CLI.

These values are used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad input, missing path)
    - 2: Config error (unreadable config, missing access key)
    - 4: Network error (server unreachable, HTTP error status)
    - 5: I/O error (unreadable directory, archive write failure)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
