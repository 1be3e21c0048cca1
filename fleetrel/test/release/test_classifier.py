from __future__ import annotations

import pytest

from fleetrel.core.result import Err, Ok
from fleetrel.release.classifier import BuildDraft, BuildFinal, Finalize, NoOp, classify
from fleetrel.release.model import (
    BuildOptions,
    CorrelationTags,
    OtherEvent,
    PullRequestEvent,
    PullRequestRef,
    PushEvent,
)


def _pr_event(*, action: str | None, merged: bool = False) -> PullRequestEvent:
    return PullRequestEvent(
        action=action,
        ref="refs/pull/12/merge",
        sha="mergecommit",
        target_branch="main",
        pull_request=PullRequestRef(id=99, number=12, head_sha="def456", merged=merged),
    )


def test_closed_and_merged_pull_request_finalizes_by_head_sha_and_id() -> None:
    result = classify(_pr_event(action="closed", merged=True))

    assert result == Ok(Finalize(tags=CorrelationTags(sha="def456", pull_request_id=99)))


def test_closed_without_merge_is_noop() -> None:
    result = classify(_pr_event(action="closed", merged=False))

    assert isinstance(result, Ok)
    assert isinstance(result.value, NoOp)
    assert "not merged" in result.value.reason


def test_closed_non_pull_request_event_without_pull_request_is_noop() -> None:
    event = OtherEvent(name="issues", action="closed", ref="", sha="abc", target_branch="main")

    result = classify(event)

    assert isinstance(result, Ok)
    assert isinstance(result.value, NoOp)


def test_closed_pull_request_target_event_carrying_merged_pr_finalizes() -> None:
    pr = PullRequestRef(id=5, number=3, head_sha="aaa111", merged=True)
    event = OtherEvent(
        name="pull_request_target",
        action="closed",
        ref="refs/heads/main",
        sha="bbb",
        target_branch="main",
        pull_request=pr,
    )

    result = classify(event)

    assert result == Ok(Finalize(tags=CorrelationTags(sha="aaa111", pull_request_id=5)))


def test_push_to_target_branch_builds_final_release_with_sha_only() -> None:
    event = PushEvent(ref="refs/heads/main", sha="abc123", target_branch="main")

    result = classify(event)

    assert result == Ok(
        BuildFinal(options=BuildOptions(draft=False, tags=CorrelationTags(sha="abc123")))
    )


@pytest.mark.parametrize("ref", ["refs/heads/develop", "refs/tags/v1.0.0", "refs/heads/main2"])
def test_push_to_other_ref_is_rejected_naming_target_and_ref(ref: str) -> None:
    event = PushEvent(ref=ref, sha="abc123", target_branch="main")

    result = classify(event)

    assert isinstance(result, Err)
    assert result.error.kind == "unsupported_push_target"
    assert "main" in result.error.message
    assert ref in result.error.message


def test_other_event_kind_is_rejected() -> None:
    event = OtherEvent(
        name="workflow_dispatch",
        action=None,
        ref="refs/heads/main",
        sha="abc",
        target_branch="main",
    )

    result = classify(event)

    assert isinstance(result, Err)
    assert result.error.kind == "unsupported_event"
    assert "workflow_dispatch" in result.error.message


@pytest.mark.parametrize("action", ["opened", "synchronize", "reopened", None])
def test_open_pull_request_builds_explicit_draft(action: str | None) -> None:
    result = classify(_pr_event(action=action))

    assert result == Ok(
        BuildDraft(
            options=BuildOptions(
                draft=True, tags=CorrelationTags(sha="def456", pull_request_id=99)
            )
        )
    )


def test_draft_build_of_merged_but_not_closed_event_still_builds_draft() -> None:
    # `merged` alone does not finalize; only the `closed` action does.
    result = classify(_pr_event(action="edited", merged=True))

    assert isinstance(result, Ok)
    assert isinstance(result.value, BuildDraft)
