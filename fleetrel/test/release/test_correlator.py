from __future__ import annotations

from pathlib import Path

from fleetrel.core.result import Err, Ok, Result
from fleetrel.release.correlator import (
    AlreadyFinal,
    NeedsFinalize,
    TaggedRelease,
    find_release,
    resolve_finalize,
    select_release,
    tags_match,
)
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import BuildOptions, CorrelationTags, ReleaseRecord


class _LookupBackend:
    def __init__(self, found: Result[ReleaseRecord | None, ReleaseError]) -> None:
        self.found = found
        self.lookups: list[tuple[str, CorrelationTags]] = []

    def get_release_by_tags(
        self, fleet: str, tags: CorrelationTags
    ) -> Result[ReleaseRecord | None, ReleaseError]:
        self.lookups.append((fleet, tags))
        return self.found

    def finalize(self, release_id: str) -> Result[None, ReleaseError]:
        raise AssertionError("correlator must not finalize")

    def push(self, fleet: str, source: Path, options: BuildOptions) -> Result[str, ReleaseError]:
        raise AssertionError("correlator must not build")

    def get_release_version(self, release_id: int) -> Result[str, ReleaseError]:
        raise AssertionError("correlator must not read versions")


def _tagged(release_id: str, created_at: str, **tags: str) -> TaggedRelease:
    return TaggedRelease(
        record=ReleaseRecord(id=release_id, is_final=False),
        tags=tags,
        created_at=created_at,
    )


class TestTagsMatch:
    def test_sha_alone_matches_when_no_pull_request_id(self) -> None:
        assert tags_match({"sha": "abc", "pullRequestId": "7"}, CorrelationTags(sha="abc"))

    def test_pull_request_id_must_match_when_given(self) -> None:
        tags = CorrelationTags(sha="abc", pull_request_id=7)
        assert tags_match({"sha": "abc", "pullRequestId": "7"}, tags)
        assert not tags_match({"sha": "abc", "pullRequestId": "8"}, tags)
        assert not tags_match({"sha": "abc"}, tags)

    def test_sha_mismatch_never_matches(self) -> None:
        assert not tags_match({"sha": "other"}, CorrelationTags(sha="abc"))


class TestSelectRelease:
    def test_returns_none_without_candidates(self) -> None:
        assert select_release([], CorrelationTags(sha="abc")) is None

    def test_picks_most_recent_matching(self) -> None:
        candidates = [
            _tagged("1", "2024-01-01T00:00:00.000Z", sha="abc", pullRequestId="9"),
            _tagged("3", "2024-03-01T00:00:00.000Z", sha="abc", pullRequestId="9"),
            _tagged("2", "2024-02-01T00:00:00.000Z", sha="abc", pullRequestId="9"),
        ]

        found = select_release(candidates, CorrelationTags(sha="abc", pull_request_id=9))

        assert found == ReleaseRecord(id="3", is_final=False)

    def test_ignores_newer_release_of_other_pull_request(self) -> None:
        candidates = [
            _tagged("1", "2024-01-01T00:00:00.000Z", sha="abc", pullRequestId="9"),
            _tagged("2", "2024-05-01T00:00:00.000Z", sha="abc", pullRequestId="10"),
        ]

        found = select_release(candidates, CorrelationTags(sha="abc", pull_request_id=9))

        assert found is not None
        assert found.id == "1"


class TestResolveFinalize:
    def test_missing_release_is_error(self) -> None:
        backend = _LookupBackend(Ok(None))
        tags = CorrelationTags(sha="def456", pull_request_id=99)

        result = resolve_finalize(backend=backend, fleet="org/fleet", tags=tags)

        assert isinstance(result, Err)
        assert result.error.kind == "missing_expected_release"
        assert result.error.hint is not None
        assert "def456" in result.error.hint
        assert backend.lookups == [("org/fleet", tags)]

    def test_final_release_is_already_final(self) -> None:
        release = ReleaseRecord(id="7", is_final=True)
        backend = _LookupBackend(Ok(release))

        result = resolve_finalize(backend=backend, fleet="f", tags=CorrelationTags(sha="a"))

        assert result == Ok(AlreadyFinal(release=release))

    def test_draft_release_needs_finalize(self) -> None:
        release = ReleaseRecord(id="7", is_final=False)
        backend = _LookupBackend(Ok(release))

        result = resolve_finalize(backend=backend, fleet="f", tags=CorrelationTags(sha="a"))

        assert result == Ok(NeedsFinalize(release=release))

    def test_backend_error_propagates(self) -> None:
        error = ReleaseError(kind="backend_unavailable", message="down")
        backend = _LookupBackend(Err(error))

        result = resolve_finalize(backend=backend, fleet="f", tags=CorrelationTags(sha="a"))

        assert result == Err(error)


def test_find_release_queries_backend_every_time() -> None:
    backend = _LookupBackend(Ok(None))
    tags = CorrelationTags(sha="abc")

    find_release(backend=backend, fleet="f", tags=tags)
    find_release(backend=backend, fleet="f", tags=tags)

    assert len(backend.lookups) == 2
