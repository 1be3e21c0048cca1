"""Typed action inputs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from fleetrel.actions.inputs import FALSE_VALUES, get_boolean_input, get_input
from fleetrel.core.result import Err, Ok, Result
from fleetrel.output.console import ConsoleProtocol
from fleetrel.release.errors import ReleaseError

DEFAULT_BALENA_API_URL = "https://api.balena-cloud.com"


@dataclass(frozen=True, slots=True)
class ActionInputs:
    fleet: str
    # Build context relative to the workspace; "" means the workspace root.
    source: str
    versionbot: bool
    create_tag: bool

    def source_path(self, workspace: Path) -> Path:
        return workspace / self.source if self.source else workspace


def _resolve_create_tag(
    env: Mapping[str, str], console: ConsoleProtocol
) -> Result[bool, ReleaseError]:
    # `create_ref` is the deprecated name of `create_tag`. It is folded into one
    # setting here so the rest of the run only sees `create_tag`.
    create_tag = get_boolean_input(env, "create_tag")
    if isinstance(create_tag, Err):
        return create_tag
    legacy_raw = get_input(env, "create_ref")
    if isinstance(legacy_raw, Err):
        return legacy_raw
    if not legacy_raw.value:
        return create_tag

    # Legacy configs set any string to enable it; only the false literals disable it.
    console.warning("input `create_ref` is deprecated, use `create_tag`")
    legacy = legacy_raw.value not in FALSE_VALUES
    return Ok(create_tag.value or legacy)


def load_inputs(
    env: Mapping[str, str], console: ConsoleProtocol
) -> Result[ActionInputs, ReleaseError]:
    fleet = get_input(env, "fleet", required=True)
    if isinstance(fleet, Err):
        return fleet
    source = get_input(env, "source")
    if isinstance(source, Err):
        return source
    versionbot = get_boolean_input(env, "versionbot")
    if isinstance(versionbot, Err):
        return versionbot
    create_tag = _resolve_create_tag(env, console)
    if isinstance(create_tag, Err):
        return create_tag

    return Ok(
        ActionInputs(
            fleet=fleet.value,
            source=source.value.strip("/"),
            versionbot=versionbot.value,
            create_tag=create_tag.value,
        )
    )


@dataclass(frozen=True, slots=True)
class BalenaSettings:
    api_url: str
    token: str | None

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> BalenaSettings:
        api_url = env.get("BALENA_API_URL", "").strip() or DEFAULT_BALENA_API_URL
        return cls(
            api_url=api_url.rstrip("/"),
            token=env.get("BALENA_TOKEN", "").strip() or None,
        )
