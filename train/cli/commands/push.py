"""Push command - resume a release that was cut but not pushed."""

from __future__ import annotations

import typer

from train.cli.commands._helpers import (
    ask_confirmation,
    exit_release,
    fail,
    prepare_command,
    release_error_code,
)
from train.cli.context import CLIContext, build_context
from train.core.result import Err
from train.output.console import Style
from train.release.contracts import PushRequest
from train.release.report import Report, render_summary
from train.services.release.service import push_release


def _print_available(ctx: CLIContext) -> None:
    ids = ctx.store.list_ids()
    if ids:
        ctx.console.print("The following releases are available on your system:")
        for release_id in ids:
            ctx.console.print(f"- {release_id}", Style.COMMAND)
    else:
        ctx.console.print("There are no pending releases; start one with `train cut`.")


def push(
    release_id: str | None = typer.Option(None, "--id", help="Pending release to push"),
    remote: str | None = typer.Option(
        None, "--remote", "-r", envvar="TRAIN_REMOTE", help="Git remote to use"
    ),
    default_branch: str | None = typer.Option(
        None, "--default-branch", "-b", envvar="TRAIN_DEFAULT_BRANCH", help="Default git branch"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", envvar="TRAIN_VERBOSE", help="Output all operations"
    ),
) -> None:
    """Push changes from a release in progress."""
    ctx = build_context(verbose=verbose)
    request = PushRequest(
        root=ctx.root,
        config=ctx.config,
        release_id=release_id,
        remote=remote or ctx.config.remote,
        default_branch=default_branch or ctx.config.default_branch,
        verbose=verbose,
    )
    report = Report()
    prepare_command(ctx, remote=request.remote, report=report, verbose=verbose)

    result = push_release(ctx.repo, ctx.store, request, console=ctx.console, ask=ask_confirmation)
    if isinstance(result, Err):
        error = result.error
        if error.kind == "required_option":
            ctx.console.print(error.message)
            _print_available(ctx)
            exit_release(error.message, code=release_error_code(error.kind))
        if error.kind == "not_found":
            ctx.console.error("There was a problem fetching the Release data")
        fail(ctx, error, report, verbose=verbose)

    render_summary(report, ctx.console, verbose=verbose)
