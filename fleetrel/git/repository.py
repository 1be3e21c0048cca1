"""Git repository abstraction.

Only what a release run needs: switching the workspace checkout to another
branch (the versionbot branch) before building.

Usage:
    repo = Repository(Path(os.environ["GITHUB_WORKSPACE"]))

    match repo.checkout_remote_branch("feature/foo"):
        case Ok(_):
            print("checked out")
        case Err(e):
            print(f"Checkout failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol, Style
from fleetrel.platform.process import ProcessError
from fleetrel.platform.process import run as run_process
from fleetrel.release.errors import ReleaseError
from fleetrel.release.timeouts import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS

__all__ = [
    "GitCheckout",
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path, remote: str = "origin") -> None:
        self.path = path
        self.remote = remote

    def fetch_branch(self, branch: str) -> Result[str, GitError]:
        """Fetch one branch from the remote into a same-named remote-tracking ref.

        Actions checkouts are shallow and single-branch, so the refspec is
        spelled out instead of relying on the configured one.
        """
        refspec = f"+refs/heads/{branch}:refs/remotes/{self.remote}/{branch}"
        result = self._run(["fetch", "--no-tags", self.remote, refspec])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="fetch",
                        message=e.stderr.strip() or "fetch failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    def checkout_remote_branch(self, branch: str) -> Result[str, GitError]:
        """Fetch `branch` and check it out as a local branch tracking the remote."""
        fetched = self.fetch_branch(branch)
        if isinstance(fetched, Err):
            return fetched

        result = self._run(["checkout", "-B", branch, f"{self.remote}/{branch}"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="checkout",
                        message=e.stderr.strip() or "checkout failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "clone"}
            else GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


class GitCheckout:
    """`Checkout` port over a workspace repository."""

    def __init__(self, repo: Repository, console: ConsoleProtocol) -> None:
        self.repo = repo
        self.console = console

    def checkout(self, branch: str) -> Result[None, ReleaseError]:
        self.console.print(f"git checkout {branch}", Style.DIM)
        result = self.repo.checkout_remote_branch(branch)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="checkout_failed",
                    message=f"git {e.command} failed for branch {branch}",
                    hint=e.message,
                )
            )
        return Ok(None)
