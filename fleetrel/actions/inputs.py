"""Read GitHub Actions inputs from the runner environment.

The runner exposes each `with:` input as `INPUT_<NAME>`, upper-cased with
spaces replaced by underscores. Boolean inputs follow the YAML 1.2 core
schema subset the runner itself accepts.
"""

from __future__ import annotations

from collections.abc import Mapping

from fleetrel.core.result import Err, Ok, Result
from fleetrel.release.errors import ReleaseError

TRUE_VALUES = frozenset({"true", "True", "TRUE"})
FALSE_VALUES = frozenset({"false", "False", "FALSE"})


def input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(
    env: Mapping[str, str], name: str, *, required: bool = False
) -> Result[str, ReleaseError]:
    value = env.get(input_env_name(name), "").strip()
    if required and not value:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"Input required and not supplied: {name}",
            )
        )
    return Ok(value)


def get_boolean_input(
    env: Mapping[str, str], name: str, *, required: bool = False
) -> Result[bool, ReleaseError]:
    """Parse a boolean input. Unset optional inputs read as False."""
    raw = get_input(env, name, required=required)
    if isinstance(raw, Err):
        return raw

    value = raw.value
    if not value:
        return Ok(False)
    if value in TRUE_VALUES:
        return Ok(True)
    if value in FALSE_VALUES:
        return Ok(False)
    return Err(
        ReleaseError(
            kind="invalid_input",
            message=f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}",
            hint="Support boolean input list: `true | True | TRUE | false | False | FALSE`",
        )
    )
