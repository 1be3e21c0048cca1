from __future__ import annotations

from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol
from fleetrel.release.errors import ReleaseError
from fleetrel.release.ports import TagWriter

REFERENCE_EXISTS_MARKER = "Reference already exists"


def is_reference_exists(error: ReleaseError) -> bool:
    # The hint names the ref and repository, so only the message is checked.
    return REFERENCE_EXISTS_MARKER.lower() in error.message.lower()


def create_tag(
    *,
    writer: TagWriter,
    version: str,
    sha: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Create tag `version` on `sha`; an existing reference counts as success.

    Re-run workflows and repeated pushes of an already tagged commit hit the
    existing reference. Every other failure is reported.
    """
    result = writer.create_tag(version, sha)
    if isinstance(result, Ok):
        console.success(f"tag {version} -> {sha[:8]}")
        return result

    error = result.error
    if is_reference_exists(error):
        console.info("Git reference already exists.")
        return Ok(None)

    if error.kind == "tag_creation_failed":
        return result
    return Err(
        ReleaseError(
            kind="tag_creation_failed",
            message=f"failed to create tag {version}: {error.message}",
            hint=error.hint,
        )
    )
