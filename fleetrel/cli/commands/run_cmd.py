from __future__ import annotations

from fleetrel.actions.context import load_event
from fleetrel.actions.outputs import output_sink
from fleetrel.backends.balena import BalenaApi, BalenaBackend
from fleetrel.backends.gh import GhTagWriter, ensure_gh_available
from fleetrel.backends.versionbot import VersionbotBranches
from fleetrel.cli.commands._helpers import unwrap_or_exit
from fleetrel.cli.context import CLIContext, build_context
from fleetrel.git.repository import GitCheckout, Repository
from fleetrel.release.classifier import Action, BuildDraft, BuildFinal, classify
from fleetrel.release.config import ActionInputs, BalenaSettings, load_inputs
from fleetrel.release.orchestrator import Collaborators, run_release


def build_collaborators(ctx: CLIContext, repository: str) -> Collaborators:
    workspace = ctx.runner.workspace
    console = ctx.console
    return Collaborators(
        backend=BalenaBackend(
            api=BalenaApi(BalenaSettings.from_env(ctx.env)),
            workspace_root=workspace,
            console=console,
        ),
        tag_writer=GhTagWriter(workspace_root=workspace, repo=repository),
        branches=VersionbotBranches(workspace_root=workspace, repo=repository, console=console),
        checkout=GitCheckout(Repository(workspace), console),
        outputs=output_sink(ctx.env, console),
    )


def needs_gh(action: Action, inputs: ActionInputs) -> bool:
    """Only builds tag or check out the versionbot branch."""
    if not isinstance(action, BuildDraft | BuildFinal):
        return False
    return inputs.create_tag or inputs.versionbot


def run() -> None:
    """Build, finalize or skip a release for the current workflow event."""
    ctx = build_context()
    loaded = unwrap_or_exit(load_event(ctx.runner), ctx)
    inputs = unwrap_or_exit(load_inputs(ctx.env, ctx.console), ctx)
    # Checked before the build starts so a missing `gh` fails fast.
    action = unwrap_or_exit(classify(loaded.event), ctx)
    if needs_gh(action, inputs):
        unwrap_or_exit(ensure_gh_available(), ctx)

    unwrap_or_exit(
        run_release(
            event=loaded.event,
            inputs=inputs,
            workspace=ctx.runner.workspace,
            deps=build_collaborators(ctx, loaded.repository),
            console=ctx.console,
        ),
        ctx,
    )
