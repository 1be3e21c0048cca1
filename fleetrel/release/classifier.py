"""Map a repository event to the release action it calls for.

This module is pure: it reads the event and returns a decision. All I/O
happens in the orchestrator after classification.
"""

from __future__ import annotations

from dataclasses import dataclass

from fleetrel.core.result import Err, Ok, Result
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import (
    BuildOptions,
    CorrelationTags,
    Event,
    OtherEvent,
    PullRequestEvent,
    PullRequestRef,
    PushEvent,
)


@dataclass(frozen=True, slots=True)
class NoOp:
    reason: str


@dataclass(frozen=True, slots=True)
class Finalize:
    tags: CorrelationTags


@dataclass(frozen=True, slots=True)
class BuildDraft:
    options: BuildOptions


@dataclass(frozen=True, slots=True)
class BuildFinal:
    options: BuildOptions


Action = NoOp | Finalize | BuildDraft | BuildFinal


def pull_request_tags(pull_request: PullRequestRef) -> CorrelationTags:
    return CorrelationTags(sha=pull_request.head_sha, pull_request_id=pull_request.id)


def classify(event: Event) -> Result[Action, ReleaseError]:
    """Decide what to do for one event.

    Rules, first match wins:
    1. A closed pull request finalizes its draft when merged; any other
       closed event is a no-op.
    2. A push to the target branch builds a final release directly.
    3. A push anywhere else is rejected.
    4. Any event that is not a pull request is rejected.
    5. An open or updated pull request builds a draft.
    """
    match event:
        case PullRequestEvent(action="closed", pull_request=pr) | OtherEvent(
            action="closed", pull_request=PullRequestRef() as pr
        ) if pr.merged:
            return Ok(Finalize(tags=pull_request_tags(pr)))
        case PullRequestEvent(action="closed") | OtherEvent(action="closed"):
            return Ok(NoOp(reason="Pull request was closed but not merged, nothing to do."))
        case PushEvent(sha=sha) if event.ref == event.target_ref:
            return Ok(BuildFinal(options=BuildOptions(draft=False, tags=CorrelationTags(sha=sha))))
        case PushEvent(ref=ref, target_branch=target):
            return Err(
                ReleaseError(
                    kind="unsupported_push_target",
                    message=f"Push workflow only works with {target} branch. "
                    f"Event tried pushing to: {ref}",
                    hint=f"Trigger on push to {target} only, or use pull_request events.",
                )
            )
        case OtherEvent(name=name):
            return Err(
                ReleaseError(
                    kind="unsupported_event",
                    message=f"Unsure how to proceed with event: {name}",
                    hint="Supported events: push, pull_request",
                )
            )
        case PullRequestEvent(pull_request=pr):
            return Ok(BuildDraft(options=BuildOptions(draft=True, tags=pull_request_tags(pr))))
