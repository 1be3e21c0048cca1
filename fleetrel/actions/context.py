"""Build the typed event from the GitHub Actions runner environment."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fleetrel.core.result import Err, Ok, Result
from fleetrel.core.structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import (
    Event,
    OtherEvent,
    PullRequestEvent,
    PullRequestRef,
    PushEvent,
)


@dataclass(frozen=True, slots=True)
class RunnerContext:
    """Raw runner variables for one workflow step."""

    event_name: str
    event_path: Path | None
    ref: str
    sha: str
    workspace: Path
    repository: str | None

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> RunnerContext:
        event_path = env.get("GITHUB_EVENT_PATH", "").strip()
        return cls(
            event_name=env.get("GITHUB_EVENT_NAME", "").strip(),
            event_path=Path(event_path) if event_path else None,
            ref=env.get("GITHUB_REF", "").strip(),
            sha=env.get("GITHUB_SHA", "").strip(),
            workspace=Path(env.get("GITHUB_WORKSPACE", "").strip() or "."),
            repository=env.get("GITHUB_REPOSITORY", "").strip() or None,
        )


@dataclass(frozen=True, slots=True)
class LoadedEvent:
    event: Event
    repository: str
    payload: StrDict


def read_payload(path: Path | None) -> Result[StrDict, ReleaseError]:
    if path is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="GITHUB_EVENT_PATH is not set",
                hint="Run inside a GitHub Actions workflow or pass --event-path.",
            )
        )
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message=f"cannot read event payload: {path}",
                hint=str(e),
            )
        )
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"invalid event payload JSON: {e}"))

    payload = as_str_dict(obj)
    if payload is None:
        return Err(ReleaseError(kind="invalid_input", message="event payload is not a JSON object"))
    return Ok(payload)


def _parse_pull_request(obj: StrDict) -> Result[PullRequestRef, ReleaseError]:
    pr_id = get_int(obj, "id")
    number = get_int(obj, "number")
    head = get_table(obj, "head")
    head_sha = get_str(head, "sha") if head is not None else None
    if pr_id is None or number is None or head_sha is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="pull_request payload is missing id, number or head.sha",
            )
        )
    # `merged` is null until the pull request is closed.
    merged = get_bool(obj, "merged") or False
    return Ok(PullRequestRef(id=pr_id, number=number, head_sha=head_sha, merged=merged))


def parse_event(
    *, event_name: str, ref: str, sha: str, payload: StrDict
) -> Result[tuple[Event, StrDict], ReleaseError]:
    """Map the raw payload to the event variant for its kind.

    Returns the event and the payload's repository object.
    """
    repository = get_table(payload, "repository")
    if repository is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="Workflow payload was missing repository object",
            )
        )

    target = get_str(repository, "master_branch") or get_str(repository, "default_branch")
    if target is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="repository payload has no master_branch or default_branch",
            )
        )

    action = get_str(payload, "action")
    pr_obj = get_table(payload, "pull_request")
    pull_request: PullRequestRef | None = None
    if pr_obj is not None:
        parsed = _parse_pull_request(pr_obj)
        if isinstance(parsed, Err):
            return parsed
        pull_request = parsed.value

    event: Event
    if event_name == "push":
        event = PushEvent(ref=ref, sha=sha, target_branch=target)
    elif event_name == "pull_request":
        if pull_request is None:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message="pull_request event payload has no pull_request object",
                )
            )
        event = PullRequestEvent(
            action=action, ref=ref, sha=sha, target_branch=target, pull_request=pull_request
        )
    else:
        event = OtherEvent(
            name=event_name or "(unknown)",
            action=action,
            ref=ref,
            sha=sha,
            target_branch=target,
            pull_request=pull_request,
        )
    return Ok((event, repository))


def load_event(context: RunnerContext) -> Result[LoadedEvent, ReleaseError]:
    payload = read_payload(context.event_path)
    if isinstance(payload, Err):
        return payload

    parsed = parse_event(
        event_name=context.event_name, ref=context.ref, sha=context.sha, payload=payload.value
    )
    if isinstance(parsed, Err):
        return parsed
    event, repository = parsed.value

    slug = get_str(repository, "full_name") or context.repository
    if slug is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="cannot determine repository (owner/name)",
                hint="Set GITHUB_REPOSITORY or include repository.full_name in the payload.",
            )
        )
    return Ok(LoadedEvent(event=event, repository=slug, payload=payload.value))
