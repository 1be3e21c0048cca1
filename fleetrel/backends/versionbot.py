"""Resolve the branch versionbot writes its version bump to.

Versionbot commits the version bump onto the pull request's own head branch.
The workflow checks out the merge ref, so to build the bumped sources the
head branch has to be fetched and checked out explicitly.
"""

from __future__ import annotations

from pathlib import Path
from time import sleep

from fleetrel.backends.gh import branch_exists, get_pull_request_head_ref
from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol, Style
from fleetrel.release.errors import ReleaseError
from fleetrel.release.timeouts import VERSIONBOT_BRANCH_ATTEMPTS, VERSIONBOT_BRANCH_DELAY_SECONDS


class VersionbotBranches:
    def __init__(
        self,
        *,
        workspace_root: Path,
        repo: str,
        console: ConsoleProtocol,
        attempts: int = VERSIONBOT_BRANCH_ATTEMPTS,
    ) -> None:
        self.workspace_root = workspace_root
        self.repo = repo
        self.console = console
        self.attempts = max(1, attempts)

    def get_branch(self, pull_request_number: int) -> Result[str, ReleaseError]:
        ref = get_pull_request_head_ref(
            workspace_root=self.workspace_root, repo=self.repo, number=pull_request_number
        )
        if isinstance(ref, Err):
            return ref
        branch = ref.value

        for attempt in range(self.attempts):
            exists = branch_exists(
                workspace_root=self.workspace_root, repo=self.repo, branch=branch
            )
            if isinstance(exists, Err):
                return exists
            if exists.value:
                return Ok(branch)
            if attempt < self.attempts - 1:
                self.console.print(f"waiting for versionbot branch {branch}", Style.DIM)
                sleep(VERSIONBOT_BRANCH_DELAY_SECONDS)

        return Err(
            ReleaseError(
                kind="checkout_failed",
                message=f"versionbot branch not found: {branch}",
                hint=f"pull request #{pull_request_number} in {self.repo}",
            )
        )
