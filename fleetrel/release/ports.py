"""Collaborator interfaces the orchestrator depends on.

Production adapters live in `fleetrel.backends` and `fleetrel.git`; tests
pass in-memory fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from fleetrel.core.result import Result
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import BuildOptions, CorrelationTags, ReleaseRecord


class ReleaseBackend(Protocol):
    """Build backend that produces, finds and finalizes releases."""

    def get_release_by_tags(
        self, fleet: str, tags: CorrelationTags
    ) -> Result[ReleaseRecord | None, ReleaseError]:
        """Return the most recent release of fleet matching tags, or None."""
        ...

    def finalize(self, release_id: str) -> Result[None, ReleaseError]: ...

    def push(
        self, fleet: str, source: Path, options: BuildOptions
    ) -> Result[str, ReleaseError]:
        """Build source for fleet and return the new release id."""
        ...

    def get_release_version(self, release_id: int) -> Result[str, ReleaseError]: ...


class BranchResolver(Protocol):
    def get_branch(self, pull_request_number: int) -> Result[str, ReleaseError]: ...


class Checkout(Protocol):
    def checkout(self, branch: str) -> Result[None, ReleaseError]: ...


class TagWriter(Protocol):
    def create_tag(self, version: str, sha: str) -> Result[None, ReleaseError]:
        """Create the tag reference.

        Must report an existing reference with a message containing
        "Reference already exists".
        """
        ...
