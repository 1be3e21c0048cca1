"""Tests for fleetrel.git.repository module."""

from __future__ import annotations

from pathlib import Path

import pytest

import fleetrel.git.repository as repository
from fleetrel.core.result import Err, Ok, Result
from fleetrel.git.repository import GitCheckout, Repository
from fleetrel.output.console import MockConsole
from fleetrel.platform.process import ProcessError


class _FakeGit:
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[list[str], float | None]] = []

    def __call__(
        self, cmd: list[str], *, cwd: Path, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        self.calls.append((cmd, timeout))
        if self.fail_on is not None and self.fail_on in cmd:
            return Err(
                ProcessError(
                    command=tuple(cmd),
                    returncode=128,
                    stdout="",
                    stderr="fatal: couldn't find remote ref refs/heads/feature\n",
                )
            )
        return Ok("")


class TestRepository:
    def test_checkout_fetches_then_checks_out(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit()
        monkeypatch.setattr(repository, "run_process", fake)

        result = Repository(tmp_path).checkout_remote_branch("feature")

        assert isinstance(result, Ok)
        assert [cmd[3:] for cmd, _ in fake.calls] == [
            ["fetch", "--no-tags", "origin", "+refs/heads/feature:refs/remotes/origin/feature"],
            ["checkout", "-B", "feature", "origin/feature"],
        ]
        assert fake.calls[0][1] == repository.GIT_NETWORK_TIMEOUT_SECONDS
        assert fake.calls[1][1] == repository.GIT_TIMEOUT_SECONDS

    def test_fetch_failure_stops_before_checkout(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = _FakeGit(fail_on="fetch")
        monkeypatch.setattr(repository, "run_process", fake)

        result = Repository(tmp_path).checkout_remote_branch("feature")

        assert isinstance(result, Err)
        assert result.error.command == "fetch"
        assert result.error.returncode == 128
        assert len(fake.calls) == 1


class TestGitCheckout:
    def test_success(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr(repository, "run_process", _FakeGit())
        console = MockConsole()

        result = GitCheckout(Repository(tmp_path), console).checkout("feature")

        assert result == Ok(None)
        assert console.find("git checkout feature")

    def test_failure_maps_to_checkout_failed(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setattr(repository, "run_process", _FakeGit(fail_on="checkout"))

        result = GitCheckout(Repository(tmp_path), MockConsole()).checkout("feature")

        assert isinstance(result, Err)
        assert result.error.kind == "checkout_failed"
        assert result.error.message == "git checkout failed for branch feature"
        assert "couldn't find remote ref" in (result.error.hint or "")
