from __future__ import annotations

from pathlib import Path

import pytest

from fleetrel.core.result import Err, Ok
from fleetrel.output.console import MockConsole
from fleetrel.release.config import (
    DEFAULT_BALENA_API_URL,
    ActionInputs,
    BalenaSettings,
    load_inputs,
)


def test_defaults_with_only_fleet() -> None:
    console = MockConsole()

    result = load_inputs({"INPUT_FLEET": "org/fleet"}, console)

    assert result == Ok(
        ActionInputs(fleet="org/fleet", source="", versionbot=False, create_tag=False)
    )
    assert console.outputs == []


def test_missing_fleet_is_invalid_input() -> None:
    result = load_inputs({}, MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
    assert "fleet" in result.error.message


def test_create_ref_alias_enables_tagging_with_warning() -> None:
    console = MockConsole()

    result = load_inputs({"INPUT_FLEET": "f", "INPUT_CREATE_REF": "true"}, console)

    assert isinstance(result, Ok)
    assert result.value.create_tag is True
    assert console.has_warning()
    assert console.find("create_ref")


def test_create_ref_false_does_not_enable_tagging() -> None:
    result = load_inputs({"INPUT_FLEET": "f", "INPUT_CREATE_REF": "false"}, MockConsole())

    assert isinstance(result, Ok)
    assert result.value.create_tag is False


@pytest.mark.parametrize("value", ["yes", "1", "on"])
def test_create_ref_accepts_legacy_truthy_strings(value: str) -> None:
    console = MockConsole()

    result = load_inputs({"INPUT_FLEET": "f", "INPUT_CREATE_REF": value}, console)

    assert isinstance(result, Ok)
    assert result.value.create_tag is True
    assert console.has_warning()


def test_create_tag_wins_over_false_alias() -> None:
    env = {"INPUT_FLEET": "f", "INPUT_CREATE_TAG": "TRUE", "INPUT_CREATE_REF": "False"}

    result = load_inputs(env, MockConsole())

    assert isinstance(result, Ok)
    assert result.value.create_tag is True


def test_invalid_boolean_is_rejected() -> None:
    result = load_inputs({"INPUT_FLEET": "f", "INPUT_VERSIONBOT": "yes"}, MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"
    assert "versionbot" in result.error.message


def test_source_path_is_relative_to_workspace() -> None:
    result = load_inputs({"INPUT_FLEET": "f", "INPUT_SOURCE": "/services/app/"}, MockConsole())

    assert isinstance(result, Ok)
    assert result.value.source == "services/app"
    assert result.value.source_path(Path("/ws")) == Path("/ws/services/app")


def test_empty_source_is_workspace_root() -> None:
    inputs = ActionInputs(fleet="f", source="", versionbot=False, create_tag=False)

    assert inputs.source_path(Path("/ws")) == Path("/ws")


def test_balena_settings_from_env() -> None:
    assert BalenaSettings.from_env({}) == BalenaSettings(api_url=DEFAULT_BALENA_API_URL, token=None)

    custom = BalenaSettings.from_env(
        {"BALENA_API_URL": "https://api.balena.example/", "BALENA_TOKEN": " t0k "}
    )
    assert custom == BalenaSettings(api_url="https://api.balena.example", token="t0k")
