"""balena build backend.

Builds and finalizes go through the `balena` CLI; release lookups and
version reads go through the balena REST API, which exposes release tags
directly. Credentials are expected to be set up by the workflow
(`balena login` / `BALENA_TOKEN`).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from time import sleep
from urllib.parse import quote

from fleetrel.backends.http import HttpClient, HttpError, RealHttpClient
from fleetrel.core.result import Err, Ok, Result
from fleetrel.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_str,
)
from fleetrel.output.console import ConsoleProtocol, Style
from fleetrel.platform.process import ProcessError
from fleetrel.platform.process import run as run_process
from fleetrel.release.config import BalenaSettings
from fleetrel.release.correlator import TaggedRelease, select_release
from fleetrel.release.errors import ReleaseError
from fleetrel.release.model import BuildOptions, CorrelationTags, ReleaseRecord
from fleetrel.release.timeouts import (
    BALENA_API_TIMEOUT_SECONDS,
    BALENA_CLI_TIMEOUT_SECONDS,
    BALENA_PUSH_TIMEOUT_SECONDS,
    READ_RETRY_ATTEMPTS,
    READ_RETRY_DELAY_SECONDS,
)

_RELEASE_ID_RE = re.compile(r"\(id: (\d+)\)")
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_QUERY_SAFE = "$(),/:'="
PUSH_LOG_TAIL_LINES = 20


def _odata_str(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def release_query_url(api_url: str, fleet: str, sha: str) -> str:
    """URL listing a fleet's releases tagged with `sha`, newest first."""
    filter_expr = (
        f"belongs_to__application/any(a:a/slug eq {_odata_str(fleet.lower())})"
        f" and release_tag/any(rt:rt/tag_key eq 'sha' and rt/value eq {_odata_str(sha)})"
    )
    params = (
        ("$select", "id,is_final,created_at"),
        ("$expand", "release_tag($select=tag_key,value)"),
        ("$filter", filter_expr),
        ("$orderby", "created_at desc"),
    )
    query = "&".join(f"{k}={quote(v, safe=_QUERY_SAFE)}" for k, v in params)
    return f"{api_url}/v7/release?{query}"


def release_version_url(api_url: str, release_id: int) -> str:
    return f"{api_url}/v7/release({release_id})?$select=raw_version"


def parse_release_id(output: str) -> str | None:
    """Extract the release id from `balena push` output.

    The last match wins: the CLI prints earlier ids for cached images.
    """
    matches = _RELEASE_ID_RE.findall(_ANSI_RE.sub("", output))
    return matches[-1] if matches else None


def _tags_of(item: StrDict) -> dict[str, str]:
    tags: dict[str, str] = {}
    for raw in get_list(item, "release_tag") or []:
        tag = as_str_dict(raw)
        if tag is None:
            continue
        key = get_str(tag, "tag_key")
        value = tag.get("value")
        if key is not None and isinstance(value, str):
            tags[key] = value
    return tags


def parse_releases(payload: object) -> list[TaggedRelease] | None:
    data = as_str_dict(payload)
    items = as_obj_list(data.get("d")) if data is not None else None
    if items is None:
        return None

    out: list[TaggedRelease] = []
    for raw in items:
        item = as_str_dict(raw)
        if item is None:
            continue
        release_id = get_int(item, "id")
        is_final = get_bool(item, "is_final")
        if release_id is None or is_final is None:
            continue
        out.append(
            TaggedRelease(
                record=ReleaseRecord(id=str(release_id), is_final=is_final),
                tags=_tags_of(item),
                created_at=get_str(item, "created_at") or "",
            )
        )
    return out


class BalenaApi:
    """Read-only access to the balena REST API."""

    def __init__(self, settings: BalenaSettings, client: HttpClient | None = None) -> None:
        self.settings = settings
        self.client = client or RealHttpClient(timeout=BALENA_API_TIMEOUT_SECONDS)

    def _headers(self) -> Mapping[str, str]:
        if self.settings.token:
            return {"Authorization": f"Bearer {self.settings.token}"}
        return {}

    def _get(self, url: str) -> Result[object, ReleaseError]:
        last: HttpError | None = None
        for attempt in range(READ_RETRY_ATTEMPTS):
            result = self.client.get_json(url, self._headers())
            if isinstance(result, Ok):
                return result
            last = result.error
            if not last.is_transient:
                break
            if attempt < READ_RETRY_ATTEMPTS - 1:
                sleep(READ_RETRY_DELAY_SECONDS * (attempt + 1))

        assert last is not None
        return Err(
            ReleaseError(
                kind="backend_unavailable" if last.is_transient else "build_failed",
                message="balena API request failed",
                hint=str(last),
            )
        )

    def get_release_by_tags(
        self, fleet: str, tags: CorrelationTags
    ) -> Result[ReleaseRecord | None, ReleaseError]:
        url = release_query_url(self.settings.api_url, fleet, tags.sha)
        payload = self._get(url)
        if isinstance(payload, Err):
            return payload

        releases = parse_releases(payload.value)
        if releases is None:
            return Err(
                ReleaseError(kind="build_failed", message=f"unexpected release payload for {fleet}")
            )
        return Ok(select_release(releases, tags))

    def get_release_version(self, release_id: int) -> Result[str, ReleaseError]:
        payload = self._get(release_version_url(self.settings.api_url, release_id))
        if isinstance(payload, Err):
            return payload

        data = as_str_dict(payload.value)
        items = as_obj_list(data.get("d")) if data is not None else None
        item = as_str_dict(items[0]) if items else None
        version = get_str(item, "raw_version") if item is not None else None
        if version is None:
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"release {release_id} has no version",
                )
            )
        return Ok(version)


def _tail(text: str, lines: int = PUSH_LOG_TAIL_LINES) -> str:
    return "\n".join(_ANSI_RE.sub("", text).strip().splitlines()[-lines:])


def _failure_hint(error: ProcessError) -> str:
    # Build errors are reported on stdout, CLI errors on stderr.
    parts = [part for part in (_tail(error.stdout), error.stderr.strip()) if part]
    return "\n".join(parts) or str(error)


def push_command(fleet: str, source: Path, options: BuildOptions) -> list[str]:
    cmd = ["balena", "push", fleet, "--source", str(source), "--release-tag"]
    for key, value in options.tags.as_release_tags():
        cmd.extend([key, value])
    if options.draft:
        cmd.append("--draft")
    return cmd


class BalenaBackend:
    """`ReleaseBackend` backed by the balena CLI and REST API."""

    def __init__(
        self,
        *,
        api: BalenaApi,
        workspace_root: Path,
        console: ConsoleProtocol,
        env: dict[str, str] | None = None,
    ) -> None:
        self.api = api
        self.workspace_root = workspace_root
        self.console = console
        self.env = env

    def get_release_by_tags(
        self, fleet: str, tags: CorrelationTags
    ) -> Result[ReleaseRecord | None, ReleaseError]:
        return self.api.get_release_by_tags(fleet, tags)

    def get_release_version(self, release_id: int) -> Result[str, ReleaseError]:
        return self.api.get_release_version(release_id)

    def finalize(self, release_id: str) -> Result[None, ReleaseError]:
        cmd = ["balena", "release", "finalize", release_id]
        self.console.print(" ".join(cmd), Style.DIM)
        result = run_process(
            cmd, cwd=self.workspace_root, env=self.env, timeout=BALENA_CLI_TIMEOUT_SECONDS
        )
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"failed to finalize release {release_id}",
                    hint=result.error.detail,
                )
            )
        return Ok(None)

    def _echo(self, output: str) -> None:
        for line in _ANSI_RE.sub("", output).splitlines():
            self.console.print(line)

    def push(self, fleet: str, source: Path, options: BuildOptions) -> Result[str, ReleaseError]:
        """Run `balena push` and return the new release id.

        The build log is captured to read the release id, then echoed to the
        console once the process exits.
        """
        cmd = push_command(fleet, source, options)
        self.console.print(" ".join(cmd), Style.DIM)
        result = run_process(
            cmd, cwd=self.workspace_root, env=self.env, timeout=BALENA_PUSH_TIMEOUT_SECONDS
        )
        if isinstance(result, Err):
            error = result.error
            self._echo(error.stdout)
            self._echo(error.stderr)
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"balena push to {fleet} failed",
                    hint=_failure_hint(error),
                )
            )

        self._echo(result.value)
        release_id = parse_release_id(result.value)
        if release_id is None:
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message="balena push did not report a release id",
                    hint=f"fleet {fleet}",
                )
            )
        return Ok(release_id)
