"""Report step outputs back to the CI platform."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol
from fleetrel.release.errors import ReleaseError


class OutputSink(Protocol):
    def set_output(self, name: str, value: str) -> Result[None, ReleaseError]: ...


def format_output(name: str, value: str) -> str:
    """Format one entry for the `GITHUB_OUTPUT` file.

    Multi-line values use the heredoc form with a random delimiter.
    """
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class GithubOutputFile:
    """Appends outputs to the file named by `GITHUB_OUTPUT`."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def set_output(self, name: str, value: str) -> Result[None, ReleaseError]:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(format_output(name, value))
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="precondition_failed",
                    message=f"failed to write output {name}",
                    hint=str(e),
                )
            )
        return Ok(None)


class ConsoleOutputs:
    """Fallback for local runs: prints `name=value` lines."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def set_output(self, name: str, value: str) -> Result[None, ReleaseError]:
        self._console.print(f"{name}={value}")
        return Ok(None)


def _empty_values() -> dict[str, str]:
    return {}


@dataclass
class MemoryOutputs:
    """Collects outputs in memory (tests)."""

    values: dict[str, str] = field(default_factory=_empty_values)

    def set_output(self, name: str, value: str) -> Result[None, ReleaseError]:
        self.values[name] = value
        return Ok(None)


def output_sink(env: dict[str, str], console: ConsoleProtocol) -> OutputSink:
    path = env.get("GITHUB_OUTPUT", "").strip()
    if path:
        return GithubOutputFile(Path(path))
    return ConsoleOutputs(console)
