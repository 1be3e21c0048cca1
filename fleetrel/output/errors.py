"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fleetrel.core.errors import ErrorCode
from fleetrel.output.console import Style
from fleetrel.release.errors import ReleaseError

if TYPE_CHECKING:
    from fleetrel.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "invalid_input" | "unsupported_event" | "unsupported_push_target":
            return int(ErrorCode.USER_ERROR)
        case "precondition_failed":
            return int(ErrorCode.ENV_ERROR)
        case "backend_unavailable":
            return int(ErrorCode.NETWORK_ERROR)
        case (
            "missing_expected_release"
            | "build_failed"
            | "checkout_failed"
            | "tag_creation_failed"
        ):
            return int(ErrorCode.BUILD_ERROR)
