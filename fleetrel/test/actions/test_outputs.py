from __future__ import annotations

from pathlib import Path

from fleetrel.actions.outputs import (
    ConsoleOutputs,
    GithubOutputFile,
    MemoryOutputs,
    format_output,
    output_sink,
)
from fleetrel.core.result import Err, Ok
from fleetrel.output.console import MockConsole


def test_format_single_line_output() -> None:
    assert format_output("version", "1.2.3") == "version=1.2.3\n"


def test_format_multiline_output_uses_delimiter() -> None:
    text = format_output("notes", "a\nb")

    header, body_a, body_b, footer, trailing = text.split("\n")
    assert header.startswith("notes<<ghadelimiter_")
    assert (body_a, body_b) == ("a", "b")
    assert footer == header.split("<<", 1)[1]
    assert trailing == ""


def test_github_output_file_appends(tmp_path: Path) -> None:
    out = tmp_path / "github_output"
    out.write_text("existing=1\n", encoding="utf-8")
    sink = GithubOutputFile(out)

    assert sink.set_output("version", "1.2.3") == Ok(None)
    assert sink.set_output("release_id", "42") == Ok(None)

    assert out.read_text(encoding="utf-8") == "existing=1\nversion=1.2.3\nrelease_id=42\n"


def test_github_output_file_unwritable(tmp_path: Path) -> None:
    sink = GithubOutputFile(tmp_path / "missing-dir" / "out")

    result = sink.set_output("version", "1.2.3")

    assert isinstance(result, Err)
    assert result.error.kind == "precondition_failed"


def test_output_sink_selection(tmp_path: Path) -> None:
    console = MockConsole()

    env = {"GITHUB_OUTPUT": str(tmp_path / "o")}
    assert isinstance(output_sink(env, console), GithubOutputFile)
    fallback = output_sink({}, console)
    assert isinstance(fallback, ConsoleOutputs)

    fallback.set_output("version", "1.2.3")
    assert console.messages == ["version=1.2.3"]


def test_memory_outputs() -> None:
    sink = MemoryOutputs()
    sink.set_output("release_id", "42")
    assert sink.values == {"release_id": "42"}
