"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from fleetrel.core.result import Err, Result
from fleetrel.output.errors import print_release_error, release_error_exit_code
from fleetrel.release.errors import ReleaseError

if TYPE_CHECKING:
    from fleetrel.cli.context import CLIContext


T = TypeVar("T")


def unwrap_or_exit(result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code.

    This replaces the common pattern:
        if isinstance(result, Err):
            ctx.console.error(result.error.message)
            raise typer.Exit(code=...)
        value = result.value
    """
    if isinstance(result, Err):
        error = result.error
        print_release_error(error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(error))
    return result.value
