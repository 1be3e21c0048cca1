from __future__ import annotations

import pytest

from fleetrel.output.console import (
    ActionsConsole,
    MockConsole,
    RichConsole,
    Style,
    default_console,
)


class TestMockConsole:
    def test_captures_styles(self) -> None:
        console = MockConsole()

        console.info("building")
        console.warning("create_ref is deprecated")
        console.error("build failed")
        console.success("tagged")

        assert console.messages == [
            "info: building",
            "warning: create_ref is deprecated",
            "error: build failed",
            "OK tagged",
        ]
        assert console.has_error()
        assert console.has_warning()
        assert console.count(Style.INFO) == 1
        assert len(console.find("build")) == 2

    def test_text_joins_lines(self) -> None:
        console = MockConsole()
        console.print("a")
        console.newline()
        console.print("b")

        assert console.text == "a\n\nb"


class TestActionsConsole:
    def test_error_is_workflow_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().error("Push failed")

        assert capsys.readouterr().out == "::error::Push failed\n"

    def test_command_data_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().warning("100% done\nnext")

        assert capsys.readouterr().out == "::warning::100%25 done%0Anext\n"

    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().print("[bold]release[/bold]")

        assert capsys.readouterr().out == "[bold]release[/bold]\n"

    def test_error_style_routes_to_annotation(self, capsys: pytest.CaptureFixture[str]) -> None:
        ActionsConsole().print("oops", Style.ERROR)

        assert capsys.readouterr().out == "::error::oops\n"


def test_default_console_selection() -> None:
    assert isinstance(default_console({"GITHUB_ACTIONS": "true"}), ActionsConsole)
    assert isinstance(default_console({}), RichConsole)
