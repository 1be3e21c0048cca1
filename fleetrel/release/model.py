from __future__ import annotations

from dataclasses import dataclass

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    id: int
    number: int
    head_sha: str
    merged: bool


@dataclass(frozen=True, slots=True)
class PushEvent:
    ref: str
    sha: str
    target_branch: str

    @property
    def target_ref(self) -> str:
        return f"{BRANCH_REF_PREFIX}{self.target_branch}"


@dataclass(frozen=True, slots=True)
class PullRequestEvent:
    action: str | None
    ref: str
    sha: str
    target_branch: str
    pull_request: PullRequestRef


@dataclass(frozen=True, slots=True)
class OtherEvent:
    """Any event kind the orchestrator does not build for.

    Kept so the classifier can name it in errors. Some of these kinds (for
    example `pull_request_target`) still carry a pull request.
    """

    name: str
    action: str | None
    ref: str
    sha: str
    target_branch: str
    pull_request: PullRequestRef | None = None


Event = PushEvent | PullRequestEvent | OtherEvent


@dataclass(frozen=True, slots=True)
class CorrelationTags:
    """Lookup key for a release: commit sha plus optional pull request id.

    Several builds can share a sha; (fleet, sha, pull_request_id) resolves
    to at most one logical release per pull request lifecycle.
    """

    sha: str
    pull_request_id: int | None = None

    def as_release_tags(self) -> tuple[tuple[str, str], ...]:
        """Key/value pairs as stored on the backend release."""
        tags = [("sha", self.sha)]
        if self.pull_request_id is not None:
            tags.append(("pullRequestId", str(self.pull_request_id)))
        return tuple(tags)


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    id: str
    is_final: bool


@dataclass(frozen=True, slots=True)
class BuildOptions:
    draft: bool
    tags: CorrelationTags


@dataclass(frozen=True, slots=True)
class BuildResult:
    release_id: str
    version: str
