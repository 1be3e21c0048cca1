from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from fleetrel.actions.context import load_event
from fleetrel.cli.commands._helpers import unwrap_or_exit
from fleetrel.cli.context import build_context
from fleetrel.output.console import Style
from fleetrel.release.classifier import Action, BuildDraft, BuildFinal, Finalize, NoOp, classify
from fleetrel.release.model import CorrelationTags


def _format_tags(tags: CorrelationTags) -> str:
    return " ".join(f"{key}={value}" for key, value in tags.as_release_tags())


def describe_action(action: Action) -> tuple[str, str]:
    """Short action name and its details, for display."""
    match action:
        case NoOp(reason=reason):
            return ("no-op", reason)
        case Finalize(tags=tags):
            return ("finalize", _format_tags(tags))
        case BuildDraft(options=options):
            return ("build-draft", f"draft={options.draft} {_format_tags(options.tags)}")
        case BuildFinal(options=options):
            return ("build-final", f"draft={options.draft} {_format_tags(options.tags)}")


def classify_cmd(
    event_name: str | None = typer.Option(
        None, "--event-name", help="Overrides GITHUB_EVENT_NAME."
    ),
    event_path: Path | None = typer.Option(
        None, "--event-path", help="Event payload JSON (overrides GITHUB_EVENT_PATH)."
    ),
    ref: str | None = typer.Option(None, "--ref", help="Overrides GITHUB_REF."),
    sha: str | None = typer.Option(None, "--sha", help="Overrides GITHUB_SHA."),
) -> None:
    """Show what `run` would do for an event, without side effects."""
    ctx = build_context()
    runner = ctx.runner
    if event_name is not None:
        runner = replace(runner, event_name=event_name)
    if event_path is not None:
        runner = replace(runner, event_path=event_path)
    if ref is not None:
        runner = replace(runner, ref=ref)
    if sha is not None:
        runner = replace(runner, sha=sha)

    loaded = unwrap_or_exit(load_event(runner), ctx)
    action = unwrap_or_exit(classify(loaded.event), ctx)
    name, details = describe_action(action)
    ctx.console.print(f"action: {name}", Style.BOLD)
    ctx.console.print(details, Style.DIM)
