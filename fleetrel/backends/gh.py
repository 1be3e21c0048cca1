from __future__ import annotations

import json
import shutil
from pathlib import Path
from time import sleep

from fleetrel.core.result import Err, Ok, Result
from fleetrel.core.structured import as_str_dict, get_str
from fleetrel.platform.process import ProcessError
from fleetrel.platform.process import run as run_process
from fleetrel.release.errors import ReleaseError, ReleaseErrorKind
from fleetrel.release.timeouts import (
    GH_TIMEOUT_SECONDS,
    READ_RETRY_ATTEMPTS,
    READ_RETRY_DELAY_SECONDS,
)

_TRANSIENT_MARKERS = (
    "timed out",
    "timeout",
    "connection reset",
    "connection refused",
    "temporarily unavailable",
    "service unavailable",
    "bad gateway",
    "gateway timeout",
    "tls handshake timeout",
    "network is unreachable",
    "http 429",
    "http 500",
    "http 502",
    "http 503",
    "http 504",
)


def is_transient_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    if error.returncode == -1 and "timed out" in text:
        return True
    return any(marker in text for marker in _TRANSIENT_MARKERS)


def is_not_found(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return "http 404" in text or "not found" in text


def run_gh_read(
    *,
    workspace_root: Path,
    cmd: list[str],
    kind: ReleaseErrorKind,
    message: str,
    hint: str | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = READ_RETRY_ATTEMPTS,
) -> Result[str, ReleaseError]:
    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=workspace_root, timeout=timeout)
        if isinstance(result, Ok):
            return result

        error = result.error
        if attempt < attempts - 1 and is_transient_error(error):
            sleep(READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        return Err(
            ReleaseError(
                kind=kind,
                message=message,
                hint=error.stderr.strip() or hint,
            )
        )

    return Err(ReleaseError(kind=kind, message=message, hint=hint))


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def gh_api_json(
    *,
    workspace_root: Path,
    endpoint: str,
    kind: ReleaseErrorKind = "invalid_input",
) -> Result[object, ReleaseError]:
    result = run_gh_read(
        workspace_root=workspace_root,
        cmd=["gh", "api", endpoint],
        kind=kind,
        message=f"gh api failed: {endpoint}",
        hint=endpoint,
    )
    if isinstance(result, Err):
        return result

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )

    return Ok(obj)


def get_pull_request_head_ref(
    *, workspace_root: Path, repo: str, number: int
) -> Result[str, ReleaseError]:
    obj = gh_api_json(
        workspace_root=workspace_root,
        endpoint=f"repos/{repo}/pulls/{number}",
        kind="checkout_failed",
    )
    if isinstance(obj, Err):
        return obj

    data = as_str_dict(obj.value)
    head = as_str_dict(data.get("head")) if data is not None else None
    ref = get_str(head, "ref") if head is not None else None
    if ref is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"unexpected pull request payload: {repo}#{number}",
            )
        )
    return Ok(ref)


def branch_exists(
    *, workspace_root: Path, repo: str, branch: str
) -> Result[bool, ReleaseError]:
    cmd = ["gh", "api", f"repos/{repo}/branches/{branch}", "--jq", ".name"]
    result = run_process(cmd, cwd=workspace_root, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Ok):
        return Ok(result.value.strip() == branch)

    error = result.error
    if is_not_found(error):
        return Ok(False)
    return Err(
        ReleaseError(
            kind="checkout_failed",
            message=f"failed to query branch {branch} in {repo}",
            hint=error.stderr.strip() or None,
        )
    )


class GhTagWriter:
    """Creates lightweight tag refs through the GitHub REST API.

    Writes are never retried: a retried POST after a lost response would
    surface as "Reference already exists", which the caller already treats
    as success.
    """

    def __init__(self, *, workspace_root: Path, repo: str) -> None:
        self.workspace_root = workspace_root
        self.repo = repo

    def create_tag(self, version: str, sha: str) -> Result[None, ReleaseError]:
        cmd = [
            "gh",
            "api",
            "--method",
            "POST",
            f"repos/{self.repo}/git/refs",
            "-f",
            f"ref=refs/tags/{version}",
            "-f",
            f"sha={sha}",
        ]
        result = run_process(cmd, cwd=self.workspace_root, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="tag_creation_failed",
                    message=_gh_error_message(result.error),
                    hint=f"refs/tags/{version} in {self.repo}",
                )
            )
        return Ok(None)


def _gh_error_message(error: ProcessError) -> str:
    # `gh api` prints "gh: <message> (HTTP 422)" on stderr.
    text = error.detail
    first = text.splitlines()[0] if text else str(error)
    if first.startswith("gh: "):
        first = first[len("gh: ") :]
    return first
