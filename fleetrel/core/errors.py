"""Error codes for process exit status.

A failed release run is reported to the CI platform through the process
exit code. The mapping from `ReleaseError.kind` to these codes lives in
`fleetrel.output.errors`.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success (including runs that decided to do nothing)
    - 1: User error (bad input, unsupported event or push target)
    - 2: Environment error (payload incomplete, runner variables missing)
    - 3: Build error (build, finalize, checkout or tagging failed)
    - 4: Network error (backend API unreachable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
