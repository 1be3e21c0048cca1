"""Error types for the release orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "precondition_failed",
    "invalid_input",
    "unsupported_event",
    "unsupported_push_target",
    "missing_expected_release",
    "build_failed",
    "checkout_failed",
    "tag_creation_failed",
    "backend_unavailable",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    Stable across the classifier, the adapters and the CLI, so the CLI can
    render it and pick an exit code without knowing where it came from.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
