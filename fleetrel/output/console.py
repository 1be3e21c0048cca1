"""Console output abstraction.

Services and the orchestrator log through `ConsoleProtocol` and never touch
stdout directly. Three backends exist:

- RichConsole: styled output for local runs.
- ActionsConsole: GitHub Actions workflow commands (`::error::`,
  `::warning::`, `::notice::`) so failures surface as run annotations.
- MockConsole: captures output for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "ActionsConsole",
    "MockConsole",
    "default_console",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling.

        Args:
            message: The text to print
            style: The style to apply
        """
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich library."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console()
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.BOLD: "bold",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {_escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]error:[/red bold] {_escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {_escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {_escape(message)}")

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{_escape(message)}[/blue bold]")

    def newline(self) -> None:
        self._console.print()


class ActionsConsole:
    """Console implementation emitting GitHub Actions workflow commands.

    The runner parses `::error::`/`::warning::` lines from stdout and turns
    them into annotations on the workflow run. Plain lines are kept as-is so
    the log stays readable.
    """

    def __init__(self) -> None:
        from rich.console import Console

        # No colors and no wrapping: the runner parses lines verbatim.
        self._console = Console(no_color=True, highlight=False, soft_wrap=True, emoji=False)

    def _emit(self, line: str) -> None:
        self._console.print(line, markup=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if style == Style.ERROR:
            self.error(message)
        elif style == Style.WARNING:
            self.warning(message)
        else:
            self._emit(message)

    def success(self, message: str) -> None:
        self._emit(message)

    def error(self, message: str) -> None:
        self._emit(f"::error::{_escape_command_data(message)}")

    def warning(self, message: str) -> None:
        self._emit(f"::warning::{_escape_command_data(message)}")

    def info(self, message: str) -> None:
        self._emit(message)

    def header(self, message: str) -> None:
        self._emit(f"::notice::{_escape_command_data(message)}")

    def newline(self) -> None:
        self._emit("")


def _escape(message: str) -> str:
    from rich.markup import escape

    return escape(message)


def _escape_command_data(message: str) -> str:
    # Workflow command data must not contain raw newlines or '%'.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def default_console(env: dict[str, str]) -> ConsoleProtocol:
    """Pick the console backend for the current process environment."""
    if env.get("GITHUB_ACTIONS") == "true":
        return ActionsConsole()
    return RichConsole()


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
