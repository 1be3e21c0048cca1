from __future__ import annotations

import os
from dataclasses import dataclass

from fleetrel.actions.context import RunnerContext
from fleetrel.output.console import ConsoleProtocol, default_console


@dataclass(frozen=True, slots=True)
class CLIContext:
    env: dict[str, str]
    runner: RunnerContext
    console: ConsoleProtocol


def build_context() -> CLIContext:
    env = dict(os.environ)
    return CLIContext(
        env=env,
        runner=RunnerContext.from_env(env),
        console=default_console(env),
    )
