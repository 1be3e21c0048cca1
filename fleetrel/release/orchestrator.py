"""Run one release decision for one repository event.

The classifier decides first and has no side effects. Everything after it is
a linear sequence of collaborator calls, each gating the next. Nothing is
kept between runs: "was this pull request already finalized" is re-derived
from the backend every time, so a re-run workflow is safe.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fleetrel.actions.outputs import OutputSink
from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol, Style
from fleetrel.release.classifier import (
    Action,
    BuildDraft,
    BuildFinal,
    Finalize,
    NoOp,
    classify,
)
from fleetrel.release.config import ActionInputs
from fleetrel.release.correlator import AlreadyFinal, resolve_finalize
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import (
    BuildOptions,
    BuildResult,
    Event,
    OtherEvent,
    PullRequestEvent,
    PullRequestRef,
    PushEvent,
)
from fleetrel.release.ports import BranchResolver, Checkout, ReleaseBackend, TagWriter
from fleetrel.release.tagging import create_tag


@dataclass(frozen=True, slots=True)
class Collaborators:
    backend: ReleaseBackend
    tag_writer: TagWriter
    branches: BranchResolver
    checkout: Checkout
    outputs: OutputSink


@dataclass(frozen=True, slots=True)
class RunOutcome:
    action: Action
    build: BuildResult | None = None
    finalized_release_id: str | None = None
    tagged: bool = False


def _pull_request_of(event: Event) -> PullRequestRef | None:
    match event:
        case PullRequestEvent(pull_request=pr):
            return pr
        case OtherEvent(pull_request=pr):
            return pr
        case PushEvent():
            return None


def tag_commit_sha(event: Event) -> str:
    """Commit to tag: the pull request head when there is one, else the event sha."""
    pr = _pull_request_of(event)
    return pr.head_sha if pr is not None else event.sha


def _finalize(
    *, fleet: str, action: Finalize, deps: Collaborators, console: ConsoleProtocol
) -> Result[RunOutcome, ReleaseError]:
    target = resolve_finalize(backend=deps.backend, fleet=fleet, tags=action.tags)
    if isinstance(target, Err):
        return target

    if isinstance(target.value, AlreadyFinal):
        console.info("Release is already finalized so skipping.")
        return Ok(RunOutcome(action=action))

    release = target.value.release
    finalized = deps.backend.finalize(release.id)
    if isinstance(finalized, Err):
        return finalized
    console.success(f"finalized release {release.id}")
    return Ok(RunOutcome(action=action, finalized_release_id=release.id))


def _checkout_versionbot(
    *, event: Event, deps: Collaborators, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    pr = _pull_request_of(event)
    if pr is None:
        console.print(
            "versionbot: no pull request on this event, building as checked out", Style.DIM
        )
        return Ok(None)

    branch = deps.branches.get_branch(pr.number)
    if isinstance(branch, Err):
        return branch
    return deps.checkout.checkout(branch.value)


def _build(
    *,
    fleet: str,
    source: Path,
    options: BuildOptions,
    deps: Collaborators,
    console: ConsoleProtocol,
) -> Result[BuildResult, ReleaseError]:
    kind = "draft" if options.draft else "final"
    console.header(f"Building {kind} release for {fleet}")

    release_id = deps.backend.push(fleet, source, options)
    if isinstance(release_id, Err):
        return release_id
    if not release_id.value.isdigit():
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"build backend returned a non-numeric release id: {release_id.value!r}",
            )
        )

    version = deps.backend.get_release_version(int(release_id.value))
    if isinstance(version, Err):
        return version

    build = BuildResult(release_id=release_id.value, version=version.value)
    for name, value in (("version", build.version), ("release_id", build.release_id)):
        written = deps.outputs.set_output(name, value)
        if isinstance(written, Err):
            return written
    console.success(f"release {build.release_id} built, version {build.version}")
    return Ok(build)


def _build_and_tag(
    *,
    event: Event,
    action: BuildDraft | BuildFinal,
    options: BuildOptions,
    inputs: ActionInputs,
    workspace: Path,
    deps: Collaborators,
    console: ConsoleProtocol,
) -> Result[RunOutcome, ReleaseError]:
    if inputs.versionbot:
        checked_out = _checkout_versionbot(event=event, deps=deps, console=console)
        if isinstance(checked_out, Err):
            return checked_out

    build = _build(
        fleet=inputs.fleet,
        source=inputs.source_path(workspace),
        options=options,
        deps=deps,
        console=console,
    )
    if isinstance(build, Err):
        return build

    if not inputs.create_tag:
        return Ok(RunOutcome(action=action, build=build.value))

    tagged = create_tag(
        writer=deps.tag_writer,
        version=build.value.version,
        sha=tag_commit_sha(event),
        console=console,
    )
    if isinstance(tagged, Err):
        return tagged
    return Ok(RunOutcome(action=action, build=build.value, tagged=True))


def run_release(
    *,
    event: Event,
    inputs: ActionInputs,
    workspace: Path,
    deps: Collaborators,
    console: ConsoleProtocol,
) -> Result[RunOutcome, ReleaseError]:
    classified = classify(event)
    if isinstance(classified, Err):
        return classified
    action = classified.value

    match action:
        case NoOp(reason=reason):
            console.info(reason)
            return Ok(RunOutcome(action=action))
        case Finalize():
            return _finalize(fleet=inputs.fleet, action=action, deps=deps, console=console)
        case BuildDraft(options=options) | BuildFinal(options=options):
            return _build_and_tag(
                event=event,
                action=action,
                options=options,
                inputs=inputs,
                workspace=workspace,
                deps=deps,
                console=console,
            )
