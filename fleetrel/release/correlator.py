"""Find the release previously built for a pull request.

Lookups always go to the backend. Release history is shared with concurrent
builds of the same pull request, so nothing here is cached.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from fleetrel.core.result import Err, Ok, Result
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import CorrelationTags, ReleaseRecord
from fleetrel.release.ports import ReleaseBackend


@dataclass(frozen=True, slots=True)
class TaggedRelease:
    """A backend release together with its tags, as listed by an adapter."""

    record: ReleaseRecord
    tags: Mapping[str, str]
    created_at: str


@dataclass(frozen=True, slots=True)
class NeedsFinalize:
    release: ReleaseRecord


@dataclass(frozen=True, slots=True)
class AlreadyFinal:
    release: ReleaseRecord


FinalizeTarget = NeedsFinalize | AlreadyFinal


def tags_match(release_tags: Mapping[str, str], tags: CorrelationTags) -> bool:
    """Sha must match; the pull request id must match too when given."""
    return all(release_tags.get(key) == value for key, value in tags.as_release_tags())


def select_release(
    candidates: Iterable[TaggedRelease], tags: CorrelationTags
) -> ReleaseRecord | None:
    # ISO-8601 timestamps sort chronologically as strings.
    matching = [c for c in candidates if tags_match(c.tags, tags)]
    if not matching:
        return None
    return max(matching, key=lambda c: c.created_at).record


def find_release(
    *, backend: ReleaseBackend, fleet: str, tags: CorrelationTags
) -> Result[ReleaseRecord | None, ReleaseError]:
    return backend.get_release_by_tags(fleet, tags)


def resolve_finalize(
    *, backend: ReleaseBackend, fleet: str, tags: CorrelationTags
) -> Result[FinalizeTarget, ReleaseError]:
    """Find the draft a merged pull request should promote.

    A missing release means the draft-then-finalize contract was broken
    upstream and is an error. An already final release is reported as such
    so duplicate `closed` events finalize at most once.
    """
    found = find_release(backend=backend, fleet=fleet, tags=tags)
    if isinstance(found, Err):
        return found

    release = found.value
    if release is None:
        pr = f", pullRequestId={tags.pull_request_id}" if tags.pull_request_id is not None else ""
        return Err(
            ReleaseError(
                kind="missing_expected_release",
                message="Action reached point of finalizing a release but did not find one",
                hint=f"no release of {fleet} tagged sha={tags.sha}{pr}",
            )
        )
    if release.is_final:
        return Ok(AlreadyFinal(release=release))
    return Ok(NeedsFinalize(release=release))
